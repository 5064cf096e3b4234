"""
Carbon-credit valuation.

    carbon_credits = (carbon_footprint / kg_per_ton) * rate_per_ton

The footprint is reported in kilograms and credits are priced per metric ton.
Valuation uses the gross footprint, not the net gap: sink activity does not
reduce the priced volume.
"""

from __future__ import annotations

from carbon_gap.config import CreditConfig
from carbon_gap.engine.rounding import round_metric
from carbon_gap.exceptions import InvalidConfigurationError


def check_credit_config(config: CreditConfig) -> None:
    """Raise ``InvalidConfigurationError`` if ``config`` cannot price credits."""
    if config.kg_per_ton <= 0:
        raise InvalidConfigurationError(
            f"credits.kg_per_ton must be > 0, got {config.kg_per_ton}."
        )
    if config.rate_per_ton < 0:
        raise InvalidConfigurationError(
            f"credits.rate_per_ton must be >= 0, got {config.rate_per_ton}."
        )


def estimate_carbon_credits(
    carbon_footprint: float,
    config: CreditConfig | None = None,
) -> float:
    """Market value of ``carbon_footprint`` (kg CO2e) at the configured rate.

    Raises:
        InvalidConfigurationError: If ``kg_per_ton <= 0`` or ``rate_per_ton < 0``.
    """
    cfg = config or CreditConfig()
    check_credit_config(cfg)
    return round_metric((carbon_footprint / cfg.kg_per_ton) * cfg.rate_per_ton)
