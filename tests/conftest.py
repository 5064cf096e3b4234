"""
Shared pytest fixtures for the carbon gap test suite.

Provides:
  - ``worked_example_record``: the reference site whose metrics are known by
    hand (footprint 305.00, sink 5.50, gap 299.50).
  - ``service``: a ``CarbonAccountingService`` on default configuration.
  - ``write_sites_csv``: factory writing CSV text to a temp file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from carbon_gap.config import AppConfig
from carbon_gap.engine.service import CarbonAccountingService
from carbon_gap.models.site import SiteRecord

SITES_HEADER = (
    "name,excavation,transportation,equipmentUsage,energyConsumption,"
    "methaneEmission,afforestation,reclamation\n"
)


@pytest.fixture
def worked_example_record() -> SiteRecord:
    """Site with hand-checked metrics: 305.00 / 5.50 / 299.50 (Near-Neutral)."""
    return SiteRecord(
        name="North Pit",
        excavation=100,
        transportation=50,
        equipment_usage=20,
        energy_consumption=200,
        methane_emission=2,
        afforestation=10,
        reclamation=5,
    )


@pytest.fixture
def default_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def service(default_config: AppConfig) -> CarbonAccountingService:
    return CarbonAccountingService(default_config)


@pytest.fixture
def write_sites_csv(tmp_path: Path) -> Callable[[str], Path]:
    """Return a factory: ``write_sites_csv(body)`` → path of a CSV with header."""

    def _write(body: str, header: str = SITES_HEADER, name: str = "sites.csv") -> Path:
        p = tmp_path / name
        p.write_text(header + body, encoding="utf-8")
        return p

    return _write
