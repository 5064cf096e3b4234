"""
Land area needed for solar panels to offset a site's energy consumption.

    annual_yield_per_m2 = insolation * days_per_year * panel_efficiency
    land_for_solar      = energy_consumption / annual_yield_per_m2

With the defaults (5.5 kWh/m²/day, 365 days, 15% efficiency) one square meter
of panel yields 301.125 kWh a year.
"""

from __future__ import annotations

from carbon_gap.config import SolarConfig
from carbon_gap.engine.rounding import round_metric
from carbon_gap.exceptions import InvalidConfigurationError


def annual_yield_per_square_meter(config: SolarConfig | None = None) -> float:
    """Annual kWh produced by one m² of panel.

    Raises:
        InvalidConfigurationError: If any of the three factors is zero or
            negative.
    """
    cfg = config or SolarConfig()
    factors = (cfg.insolation_kwh_per_m2_day, cfg.days_per_year, cfg.panel_efficiency)
    if any(f <= 0 for f in factors):
        raise InvalidConfigurationError(
            "Annual solar yield per m² must be > 0 "
            f"(insolation={cfg.insolation_kwh_per_m2_day}, "
            f"days_per_year={cfg.days_per_year}, "
            f"panel_efficiency={cfg.panel_efficiency})."
        )
    return cfg.insolation_kwh_per_m2_day * cfg.days_per_year * cfg.panel_efficiency


def estimate_solar_land_area(
    energy_consumption: float,
    config: SolarConfig | None = None,
) -> float:
    """Panel area in m² whose annual output matches ``energy_consumption`` kWh.

    Raises:
        InvalidConfigurationError: If a configured solar factor is zero or negative.
    """
    annual_yield = annual_yield_per_square_meter(config)
    return round_metric(energy_consumption / annual_yield)
