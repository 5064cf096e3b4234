"""
Tests for carbon_gap.cli: commands invoked through typer's CliRunner.

Each test writes its own config and site CSV under ``tmp_path`` so nothing
depends on the repository's data directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from carbon_gap.cli import app
from carbon_gap.ingestion.site_csv import parse_site_csv

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Drop handlers bound to CliRunner's temporary streams after each test."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


SITES_CSV = (
    "name,excavation,transportation,equipmentUsage,energyConsumption,"
    "methaneEmission,afforestation,reclamation\n"
    "North Pit,100,50,20,200,2,10,5\n"
    "Valley Reclaim,40,10,5,30,0,500,300\n"
)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    p = tmp_path / "config.toml"
    p.write_text('[logging]\nlevel = "WARNING"\nlog_file = ""\n', encoding="utf-8")
    return p


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    p = tmp_path / "sites.csv"
    p.write_text(SITES_CSV, encoding="utf-8")
    return p


def _invoke(*args: str):
    return runner.invoke(app, list(args))


# ── validate-config ────────────────────────────────────────────────────────────

def test_validate_config_ok(config_file):
    result = _invoke("validate-config", "--config", str(config_file))
    assert result.exit_code == 0, result.output
    assert "[OK] Config valid." in result.output
    assert "301.125 kWh/m²/yr" in result.output


def test_validate_config_full_dumps_json(config_file):
    result = _invoke("validate-config", "--config", str(config_file), "--full")
    assert result.exit_code == 0
    assert '"methane_emission": 25.0' in result.output


def test_validate_config_zero_efficiency_fails(tmp_path):
    p = tmp_path / "bad.toml"
    p.write_text("[solar]\npanel_efficiency = 0.0\n", encoding="utf-8")
    result = _invoke("validate-config", "--config", str(p))
    assert result.exit_code == 1
    assert "Invalid engine configuration" in result.output


def test_validate_config_missing_file(tmp_path):
    result = _invoke("validate-config", "--config", str(tmp_path / "nope.toml"))
    assert result.exit_code == 1
    assert "Config file not found" in result.output


# ── assess ─────────────────────────────────────────────────────────────────────

def test_assess_prints_portfolio(config_file, data_file):
    result = _invoke("assess", "--config", str(config_file), "--data", str(data_file))
    assert result.exit_code == 0, result.output
    assert "North Pit" in result.output
    assert "Valley Reclaim" in result.output
    assert "299.50" in result.output


def test_assess_exports(config_file, data_file, tmp_path):
    csv_out = tmp_path / "out" / "assessed.csv"
    json_out = tmp_path / "out" / "assessed.json"
    result = _invoke(
        "assess", "--config", str(config_file), "--data", str(data_file),
        "--export-csv", str(csv_out), "--export-json", str(json_out),
    )
    assert result.exit_code == 0, result.output
    assert csv_out.exists()
    rows = json.loads(json_out.read_text(encoding="utf-8"))
    assert rows[0]["carbonCredits"] == 6.1
    assert rows[1]["tier"] == "neutral"
    assert rows[1]["recommendations"].startswith("Congratulations!")


def test_assess_missing_data_file(config_file, tmp_path):
    result = _invoke(
        "assess", "--config", str(config_file), "--data", str(tmp_path / "none.csv")
    )
    assert result.exit_code == 1
    assert "Could not read site data" in result.output


# ── recommend ──────────────────────────────────────────────────────────────────

def test_recommend_site(config_file, data_file):
    result = _invoke(
        "recommend", "--config", str(config_file), "--data", str(data_file),
        "--site", "North Pit",
    )
    assert result.exit_code == 0, result.output
    assert "You're close to carbon neutrality" in result.output
    assert "Potential Carbon Credits: $6.10" in result.output


def test_recommend_unknown_site(config_file, data_file):
    result = _invoke(
        "recommend", "--config", str(config_file), "--data", str(data_file),
        "--site", "Nowhere",
    )
    assert result.exit_code == 1
    assert "Site not found" in result.output


# ── edit ───────────────────────────────────────────────────────────────────────

def test_edit_writes_updated_record(config_file, data_file):
    result = _invoke(
        "edit", "--config", str(config_file), "--data", str(data_file),
        "--site", "North Pit", "--field", "energyConsumption", "--value", "1000",
    )
    assert result.exit_code == 0, result.output
    assert "961.00" in result.output

    records = parse_site_csv(data_file)
    assert [r.name for r in records] == ["North Pit", "Valley Reclaim"]
    assert records[0].energy_consumption == 1000.0
    assert records[1].afforestation == 500.0


def test_edit_to_output_path_leaves_source(config_file, data_file, tmp_path):
    out = tmp_path / "edited.csv"
    result = _invoke(
        "edit", "--config", str(config_file), "--data", str(data_file),
        "--site", "North Pit", "--field", "excavation", "--value", "oops",
        "--output", str(out),
    )
    assert result.exit_code == 0, result.output
    assert parse_site_csv(out)[0].excavation == 0.0
    assert parse_site_csv(data_file)[0].excavation == 100.0


def test_edit_dry_run_writes_nothing(config_file, data_file):
    before = data_file.read_text(encoding="utf-8")
    result = _invoke(
        "edit", "--config", str(config_file), "--data", str(data_file),
        "--site", "North Pit", "--field", "excavation", "--value", "5", "--dry-run",
    )
    assert result.exit_code == 0
    assert "[DRY RUN]" in result.output
    assert data_file.read_text(encoding="utf-8") == before


def test_edit_unknown_field(config_file, data_file):
    result = _invoke(
        "edit", "--config", str(config_file), "--data", str(data_file),
        "--site", "North Pit", "--field", "rainfall", "--value", "5",
    )
    assert result.exit_code == 1
    assert "Unknown measurement field" in result.output
