"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``  : committed static defaults
  2. ``config/local.toml``    : optional local overrides (gitignored)
  3. ``.env``                 : local secrets and env overrides (gitignored)
  4. Environment variables  : ``CARBON_GAP_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The emission/sequestration factors, credit pricing, solar yield constants and
gap-tier boundaries all live here so they can be revised without touching the
engine.  Every engine function receives the relevant sub-config explicitly.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem location of the site data file."""

    model_config = ConfigDict(frozen=True)

    data_file: str = "data/sites.csv"


class FootprintFactors(BaseModel):
    """Emission factors (kg CO2e per unit) applied to operational measurements."""

    model_config = ConfigDict(frozen=True)

    excavation: float = 0.5
    transportation: float = 0.7
    equipment_usage: float = 0.3
    energy_consumption: float = 0.82
    methane_emission: float = 25.0

    @field_validator(
        "excavation", "transportation", "equipment_usage",
        "energy_consumption", "methane_emission",
    )
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"Emission factors must be >= 0, got {v}.")
        return v


class SinkFactors(BaseModel):
    """Sequestration factors (kg CO2e per unit) for land-based offsets."""

    model_config = ConfigDict(frozen=True)

    afforestation: float = 0.4
    reclamation: float = 0.3

    @field_validator("afforestation", "reclamation")
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"Sink factors must be >= 0, got {v}.")
        return v


class CreditConfig(BaseModel):
    """Carbon-credit pricing.

    ``rate_per_ton`` is priced per metric ton while footprints are reported in
    kilograms, hence the ``kg_per_ton`` divisor.
    """

    model_config = ConfigDict(frozen=True)

    rate_per_ton: float = 20.0
    kg_per_ton: float = 1000.0
    currency_symbol: str = "$"


class SolarConfig(BaseModel):
    """Solar yield assumptions used to size offsetting panel area.

    Non-positive values are reported by ``annual_yield_per_square_meter()``
    as ``InvalidConfigurationError``.
    """

    model_config = ConfigDict(frozen=True)

    panel_efficiency: float = 0.15
    insolation_kwh_per_m2_day: float = 5.5
    days_per_year: int = 365


class TierBoundaries(BaseModel):
    """Upper (inclusive) gap bound of each tier below Significant."""

    model_config = ConfigDict(frozen=True)

    neutral_max: float = 0.0
    near_neutral_max: float = 1000.0
    moderate_max: float = 5000.0

    @model_validator(mode="after")
    def validate_ascending(self) -> "TierBoundaries":
        if not self.neutral_max < self.near_neutral_max < self.moderate_max:
            raise ValueError(
                "Tier boundaries must be strictly ascending: "
                f"neutral_max ({self.neutral_max}) < near_neutral_max "
                f"({self.near_neutral_max}) < moderate_max ({self.moderate_max})."
            )
        return self


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    Tests may build one directly and override any sub-config.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    footprint: FootprintFactors = FootprintFactors()
    sink: SinkFactors = SinkFactors()
    credits: CreditConfig = CreditConfig()
    solar: SolarConfig = SolarConfig()
    tiers: TierBoundaries = TierBoundaries()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; if that default file is
            absent, built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            config_path = default_path
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path is not None:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        # Also merge local.toml if present (gitignored local overrides)
        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                local_raw: dict[str, Any] = tomllib.load(f)
            raw = _deep_merge(raw, local_raw)

    # 3. Apply CARBON_GAP_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply CARBON_GAP_* env vars to the raw config dict.

    Supported overrides:
      CARBON_GAP_DATA_FILE    → raw["data"]["data_file"]
      CARBON_GAP_LOG_LEVEL    → raw["logging"]["level"]
      CARBON_GAP_CREDIT_RATE  → raw["credits"]["rate_per_ton"]
      CARBON_GAP_DEBUG        → raw["debug"]
    """
    if data_file := os.environ.get("CARBON_GAP_DATA_FILE"):
        raw.setdefault("data", {})["data_file"] = data_file

    if log_level := os.environ.get("CARBON_GAP_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if credit_rate := os.environ.get("CARBON_GAP_CREDIT_RATE"):
        raw.setdefault("credits", {})["rate_per_ton"] = credit_rate

    if debug := os.environ.get("CARBON_GAP_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    # Flatten top-level keys that may be nested under [project]
    project = raw.pop("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        footprint=FootprintFactors(**raw.get("footprint", {})),
        sink=SinkFactors(**raw.get("sink", {})),
        credits=CreditConfig(**raw.get("credits", {})),
        solar=SolarConfig(**raw.get("solar", {})),
        tiers=TierBoundaries(**raw.get("tiers", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
