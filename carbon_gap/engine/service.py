"""
Per-record carbon accounting service.

``CarbonAccountingService`` composes the engine for one ``SiteRecord``::

    record ─► compute_metrics ─► (footprint, sink) ─► compute_gap ─► gap
                                      │                               │
                                      ├─► estimate_carbon_credits     ├─► classify_gap
                                      └─ energy ─► estimate_solar_land_area
                                                                      └─► render_recommendations

Every call recomputes all derived values from the record it is given; the
service holds only its (frozen) configuration.  Callers decide how records are
batched and persisted: ``recompute_one()`` is enough to keep a single edited
record current without touching the rest of the collection.

Usage::

    service = CarbonAccountingService(load_config())
    metrics = service.recompute_one(record)
    assessment = service.assess(record)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from carbon_gap.config import AppConfig
from carbon_gap.engine.credits import check_credit_config, estimate_carbon_credits
from carbon_gap.engine.gap import compute_gap
from carbon_gap.engine.land import annual_yield_per_square_meter, estimate_solar_land_area
from carbon_gap.engine.metrics import compute_metrics
from carbon_gap.engine.recommendations import classify_gap, render_recommendations
from carbon_gap.models.site import DerivedMetrics, SiteAssessment, SiteRecord

logger = logging.getLogger(__name__)


def validate_engine_config(config: AppConfig) -> None:
    """Check every configured constant the engine divides by.

    Tier ordering and factor signs are already enforced when ``AppConfig`` is
    built.

    Raises:
        InvalidConfigurationError: On the first problem found.
    """
    check_credit_config(config.credits)
    annual_yield_per_square_meter(config.solar)


class CarbonAccountingService:
    """Derives metrics, tier and recommendations for site records.

    Attributes:
        config: Application configuration supplying all coefficients.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()

    def recompute_one(self, record: SiteRecord) -> DerivedMetrics:
        """Compute all derived metrics for ``record`` from scratch.

        Raises:
            InvalidConfigurationError: If credit or solar constants are unusable.
        """
        footprint, sink = compute_metrics(
            record, self.config.footprint, self.config.sink
        )
        gap = compute_gap(footprint, sink)
        return DerivedMetrics(
            carbon_footprint=footprint,
            carbon_sink=sink,
            gap=gap,
            carbon_credits=estimate_carbon_credits(footprint, self.config.credits),
            land_for_solar=estimate_solar_land_area(
                record.energy_consumption, self.config.solar
            ),
        )

    def assess(self, record: SiteRecord) -> SiteAssessment:
        """Merged view of ``record``: metrics, tier and recommendation lines."""
        metrics = self.recompute_one(record)
        tier = classify_gap(metrics.gap, self.config.tiers)
        logger.debug(
            "Assessed %s: footprint=%.2f sink=%.2f gap=%.2f tier=%s",
            record.name, metrics.carbon_footprint, metrics.carbon_sink,
            metrics.gap, tier.value,
        )
        return SiteAssessment(
            record=record,
            metrics=metrics,
            tier=tier,
            recommendations=tuple(render_recommendations(tier)),
        )

    def assess_all(self, records: Iterable[SiteRecord]) -> list[SiteAssessment]:
        """Assess each record independently, preserving input order."""
        assessments = [self.assess(r) for r in records]
        logger.info("Assessed %d site(s)", len(assessments))
        return assessments

    def apply_edit(
        self,
        record: SiteRecord,
        field: str,
        raw_value: Any,
    ) -> SiteAssessment:
        """Replace one measurement of ``record`` and reassess it.

        ``raw_value`` is coerced like any other raw input, so a non-numeric
        value is stored as ``0``.

        Raises:
            ValueError: If ``field`` is not a measurement field.
        """
        updated = record.with_measurement(field, raw_value)
        logger.info("Edited %s.%s -> %s", record.name, field, raw_value)
        return self.assess(updated)


def find_record(records: Iterable[SiteRecord], name: str) -> SiteRecord:
    """Return the record called ``name``.

    Raises:
        KeyError: If no record has that name.
    """
    for record in records:
        if record.name == name:
            return record
    raise KeyError(f"No site named '{name}'.")


def replace_record(records: list[SiteRecord], updated: SiteRecord) -> list[SiteRecord]:
    """Return ``records`` with the entry sharing ``updated.name`` swapped out.

    Raises:
        KeyError: If no record has that name.
    """
    names = [r.name for r in records]
    if updated.name not in names:
        raise KeyError(f"No site named '{updated.name}'.")
    return [updated if r.name == updated.name else r for r in records]
