"""
Carbon footprint and carbon sink from raw site measurements.

    carbon_footprint = excavation         * 0.5
                     + transportation     * 0.7
                     + equipment_usage    * 0.3
                     + energy_consumption * 0.82
                     + methane_emission   * 25

    carbon_sink      = afforestation * 0.4 + reclamation * 0.3

The factors shown are the defaults from ``FootprintFactors`` / ``SinkFactors``;
callers pass their own to model revised coefficients.  Both results are in
kg CO2e and rounded to two decimals.
"""

from __future__ import annotations

from carbon_gap.config import FootprintFactors, SinkFactors
from carbon_gap.engine.rounding import round_metric
from carbon_gap.models.site import SiteRecord


def compute_carbon_footprint(
    record: SiteRecord,
    factors: FootprintFactors | None = None,
) -> float:
    """Gross emissions attributable to the site's operations (kg CO2e)."""
    f = factors or FootprintFactors()
    return round_metric(
        record.excavation           * f.excavation
        + record.transportation     * f.transportation
        + record.equipment_usage    * f.equipment_usage
        + record.energy_consumption * f.energy_consumption
        + record.methane_emission   * f.methane_emission
    )


def compute_carbon_sink(
    record: SiteRecord,
    factors: SinkFactors | None = None,
) -> float:
    """Sequestration from afforestation and reclamation (kg CO2e)."""
    f = factors or SinkFactors()
    return round_metric(
        record.afforestation * f.afforestation
        + record.reclamation * f.reclamation
    )


def compute_metrics(
    record: SiteRecord,
    footprint_factors: FootprintFactors | None = None,
    sink_factors: SinkFactors | None = None,
) -> tuple[float, float]:
    """Return ``(carbon_footprint, carbon_sink)`` for ``record``."""
    return (
        compute_carbon_footprint(record, footprint_factors),
        compute_carbon_sink(record, sink_factors),
    )
