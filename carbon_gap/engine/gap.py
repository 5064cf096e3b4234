"""Net carbon gap: footprint minus sink, rounded to two decimals."""

from __future__ import annotations

from carbon_gap.engine.rounding import round_metric


def compute_gap(carbon_footprint: float, carbon_sink: float) -> float:
    """Return ``round(carbon_footprint - carbon_sink, 2)``.

    Negative when the sink exceeds the footprint.
    """
    return round_metric(carbon_footprint - carbon_sink)
