"""
Site measurement and derived-metric models.

``SiteRecord`` is the raw, externally supplied measurement set for one site.
Measurement values arrive as text from CSV / form input, so every measurement
field is coerced on construction: absent, blank, non-numeric, non-finite or
negative values become ``0.0`` (logged at WARNING) instead of failing.  A record
built from ``"abc"`` is therefore indistinguishable from one built from ``0``.

``DerivedMetrics`` holds the engine outputs for one record, each rounded to two
decimals where it is computed.  It is never stored on its own; it travels
inside a ``SiteAssessment`` next to the record it was derived from.

All models are frozen.  An edit produces a new ``SiteRecord`` (see
``SiteRecord.with_measurement``) and a full recomputation.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from carbon_gap.taxonomy.tiers import RecommendationTier

logger = logging.getLogger(__name__)

MEASUREMENT_FIELDS: tuple[str, ...] = (
    "excavation",
    "transportation",
    "equipment_usage",
    "energy_consumption",
    "methane_emission",
    "afforestation",
    "reclamation",
)

# Column names used by the data source (CSV header / JSON keys).
EXTERNAL_FIELD_NAMES: dict[str, str] = {
    "excavation":         "excavation",
    "transportation":     "transportation",
    "equipment_usage":    "equipmentUsage",
    "energy_consumption": "energyConsumption",
    "methane_emission":   "methaneEmission",
    "afforestation":      "afforestation",
    "reclamation":        "reclamation",
}

FIELD_UNITS: dict[str, str] = {
    "excavation":         "m³",
    "transportation":     "t·km",
    "equipment_usage":    "kWh",
    "energy_consumption": "kWh",
    "methane_emission":   "kg CH₄",
    "afforestation":      "ha",
    "reclamation":        "ha",
}


def resolve_field_name(field: str) -> str:
    """Map an external or internal measurement name to the internal field name.

    Raises:
        ValueError: If ``field`` is not one of the seven measurement fields.
    """
    if field in MEASUREMENT_FIELDS:
        return field
    for internal, external in EXTERNAL_FIELD_NAMES.items():
        if field == external:
            return internal
    valid = sorted(set(MEASUREMENT_FIELDS) | set(EXTERNAL_FIELD_NAMES.values()))
    raise ValueError(f"Unknown measurement field '{field}'. Valid fields: {valid}")


def coerce_measurement(value: Any, field: str = "") -> float:
    """Parse a raw measurement, falling back to ``0.0`` on anything invalid.

    Accepts ints, floats and numeric strings (surrounding whitespace allowed).
    ``None`` and blank strings are treated as absent.  Booleans, non-numeric
    strings, NaN, infinities and negative numbers are replaced by ``0.0``.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        logger.warning("Non-numeric value %r for '%s'; using 0.", value, field)
        return 0.0

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            logger.warning("Out-of-range value %r for '%s'; using 0.", value, field)
            return 0.0
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            logger.warning("Non-numeric value %r for '%s'; using 0.", value, field)
            return 0.0
    else:
        logger.warning("Unsupported value %r for '%s'; using 0.", value, field)
        return 0.0

    if not math.isfinite(number) or number < 0:
        logger.warning("Out-of-range value %r for '%s'; using 0.", value, field)
        return 0.0
    return number


class SiteRecord(BaseModel):
    """Raw operational measurements for one named site.

    Field aliases match the data-source column names (``equipmentUsage`` etc.);
    either form is accepted on construction.

    Attributes:
        name: Unique, non-empty site identifier.
        excavation: Excavated volume (m³).
        transportation: Transport load (t·km).
        equipment_usage: Equipment energy use (kWh).
        energy_consumption: Site energy consumption (kWh).
        methane_emission: Methane released (kg CH₄).
        afforestation: Afforested area (ha).
        reclamation: Reclaimed area (ha).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    excavation: float = 0.0
    transportation: float = 0.0
    equipment_usage: float = Field(default=0.0, alias="equipmentUsage")
    energy_consumption: float = Field(default=0.0, alias="energyConsumption")
    methane_emission: float = Field(default=0.0, alias="methaneEmission")
    afforestation: float = 0.0
    reclamation: float = 0.0

    @field_validator("name")
    @classmethod
    def validate_name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Site name must not be empty.")
        return v.strip()

    @field_validator(*MEASUREMENT_FIELDS, mode="before")
    @classmethod
    def normalize_measurement(cls, v: Any, info: ValidationInfo) -> float:
        return coerce_measurement(v, info.field_name)

    def measurements(self) -> dict[str, float]:
        """Return the seven measurement values keyed by internal field name."""
        return {f: getattr(self, f) for f in MEASUREMENT_FIELDS}

    def with_measurement(self, field: str, raw_value: Any) -> "SiteRecord":
        """Return a copy with one measurement replaced by a coerced ``raw_value``.

        ``field`` may be the internal or the external (camelCase) name.
        """
        internal = resolve_field_name(field)
        values = self.measurements()
        values[internal] = raw_value
        return SiteRecord(name=self.name, **values)

    def to_external(self) -> dict[str, Any]:
        """Flat dict keyed by data-source column names, ``name`` first."""
        row: dict[str, Any] = {"name": self.name}
        for f in MEASUREMENT_FIELDS:
            row[EXTERNAL_FIELD_NAMES[f]] = getattr(self, f)
        return row


class DerivedMetrics(BaseModel):
    """Engine outputs for one ``SiteRecord``; every value has two decimals.

    Attributes:
        carbon_footprint: Gross emissions (kg CO2e).
        carbon_sink: Land-based sequestration (kg CO2e).
        gap: ``carbon_footprint - carbon_sink``; negative means surplus sink.
        carbon_credits: Market value of the footprint in credit currency.
        land_for_solar: Panel area (m²) that would offset ``energy_consumption``.
    """

    model_config = ConfigDict(frozen=True)

    carbon_footprint: float
    carbon_sink: float
    gap: float
    carbon_credits: float
    land_for_solar: float


class SiteAssessment(BaseModel):
    """Merged view of a site: raw record, derived metrics, tier and pathway text."""

    model_config = ConfigDict(frozen=True)

    record: SiteRecord
    metrics: DerivedMetrics
    tier: RecommendationTier
    recommendations: tuple[str, ...]

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def recommendation_text(self) -> str:
        return "\n".join(self.recommendations)

    def to_row(self) -> dict[str, Any]:
        """Flat export row: raw columns, derived columns, then the tier."""
        row = self.record.to_external()
        row.update(
            {
                "carbonFootprint": self.metrics.carbon_footprint,
                "carbonSink":      self.metrics.carbon_sink,
                "gap":             self.metrics.gap,
                "carbonCredits":   self.metrics.carbon_credits,
                "landForSolar":    self.metrics.land_for_solar,
                "tier":            self.tier.value,
            }
        )
        return row
