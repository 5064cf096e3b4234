"""
Carbon accounting engine: pure functions from a ``SiteRecord`` to derived
metrics, a gap tier and pathway recommendations.

Modules
-------
rounding        : round_metric(), the two-decimal rounding contract.
metrics         : compute_carbon_footprint() + compute_carbon_sink().
gap             : compute_gap().
credits         : estimate_carbon_credits().
land            : annual_yield_per_square_meter() + estimate_solar_land_area().
recommendations : classify_gap() + render_recommendations() lookup table.
service         : CarbonAccountingService, composes the pipeline per record.

Nothing here performs I/O or keeps state between calls.
"""
