"""
Ingestion layer: reads raw site records from the data source.

Submodules:
  site_csv : CSV parser producing ``SiteRecord`` objects with defensive
             numeric parsing (unparseable cells read as 0).
"""
