"""
carbon_gap.reporting: terminal formatting, exports and the record-set sink.

Modules:
  formatters : ASCII portfolio table and single-site report for the CLI.
  export     : CSV/JSON flat-file exports and ``write_site_csv()``.
"""
