"""
Carbon gap CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Check engine constants and read the site data file.
  4. Run the engine (assess / recommend / edit).
  5. Report result to stdout.

Install and run::

    pip install -e .
    carbon-gap --help
    carbon-gap validate-config
    carbon-gap assess --data data/sites.csv
    carbon-gap recommend --site "North Pit"
    carbon-gap edit --site "North Pit" --field energyConsumption --value 250
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from carbon_gap.exceptions import InvalidConfigurationError

app = typer.Typer(
    name="carbon-gap",
    help="Site carbon footprint, sink and offset accounting (local CLI).",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig and check engine constants, exiting on failure."""
    from carbon_gap.config import load_config
    from carbon_gap.engine.service import validate_engine_config

    try:
        cfg_path = Path(config_path) if config_path else None
        config = load_config(cfg_path)
        validate_engine_config(config)
        return config
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, tomllib.TOMLDecodeError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)
    except InvalidConfigurationError as exc:
        typer.echo(f"[ERROR] Invalid engine configuration: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from carbon_gap.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_sites_or_exit(data_path: Path):
    """Parse the site CSV, printing a friendly error and exiting on failure."""
    from carbon_gap.ingestion.site_csv import parse_site_csv

    try:
        return parse_site_csv(data_path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] Could not read site data:\n{exc}", err=True)
        raise typer.Exit(code=1)


def _data_path(data_file: Optional[str], config) -> Path:
    return Path(data_file) if data_file else Path(config.data.data_file)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print the engine constants.

    Exits with code 1 if the config fails validation or a constant would make
    a derived metric undefined (e.g. zero panel efficiency).
    """
    from carbon_gap.engine.land import annual_yield_per_square_meter

    config = _load_config_or_exit(config_path)
    fp, sk, cr, so, ti = (
        config.footprint, config.sink, config.credits, config.solar, config.tiers,
    )

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Data file:          {config.data.data_file}")
    typer.echo(
        f"  Footprint factors:  excavation={fp.excavation} transportation={fp.transportation} "
        f"equipment={fp.equipment_usage} energy={fp.energy_consumption} "
        f"methane={fp.methane_emission}"
    )
    typer.echo(f"  Sink factors:       afforestation={sk.afforestation} reclamation={sk.reclamation}")
    typer.echo(f"  Credit rate:        {cr.currency_symbol}{cr.rate_per_ton:g}/ton (÷{cr.kg_per_ton:g} kg)")
    typer.echo(
        f"  Solar yield:        {annual_yield_per_square_meter(so):.3f} kWh/m²/yr "
        f"(efficiency={so.panel_efficiency}, insolation={so.insolation_kwh_per_m2_day})"
    )
    typer.echo(
        f"  Tier boundaries:    {ti.neutral_max:g} / {ti.near_neutral_max:g} / {ti.moderate_max:g}"
    )
    typer.echo(f"  Log level:          {config.logging.level}")
    typer.echo(f"  Debug mode:         {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("assess")
def assess(
    data_file: Optional[str] = typer.Option(
        None,
        "--data",
        "-d",
        help="Site CSV file. Defaults to config.data.data_file.",
    ),
    export_csv: Optional[str] = typer.Option(
        None,
        "--export-csv",
        help="Also write the assessed rows to this CSV path.",
    ),
    export_json: Optional[str] = typer.Option(
        None,
        "--export-json",
        help="Also write the assessed rows (with recommendations) to this JSON path.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Compute footprint, sink, gap, credits and solar land for every site."""
    from carbon_gap.engine.service import CarbonAccountingService
    from carbon_gap.reporting.export import (
        export_assessment_rows_csv,
        export_assessment_rows_json,
        flatten_assessments_for_export,
    )
    from carbon_gap.reporting.formatters import format_portfolio_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    records = _load_sites_or_exit(_data_path(data_file, config))
    assessments = CarbonAccountingService(config).assess_all(records)

    typer.echo(format_portfolio_table(assessments, config.credits))

    if export_csv:
        out = export_assessment_rows_csv(
            flatten_assessments_for_export(assessments), Path(export_csv)
        )
        typer.echo(f"\n  CSV written: {out}")
    if export_json:
        out = export_assessment_rows_json(
            flatten_assessments_for_export(assessments, include_recommendations=True),
            Path(export_json),
        )
        typer.echo(f"\n  JSON written: {out}")


@app.command("recommend")
def recommend(
    site: str = typer.Option(..., "--site", "-s", help="Name of the site to report on."),
    data_file: Optional[str] = typer.Option(
        None,
        "--data",
        "-d",
        help="Site CSV file. Defaults to config.data.data_file.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Print the full report and pathway recommendations for one site."""
    from carbon_gap.engine.service import CarbonAccountingService, find_record
    from carbon_gap.reporting.formatters import format_site_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    records = _load_sites_or_exit(_data_path(data_file, config))
    try:
        record = find_record(records, site)
    except KeyError:
        typer.echo(f"[ERROR] Site not found: '{site}'", err=True)
        raise typer.Exit(code=1)

    assessment = CarbonAccountingService(config).assess(record)
    typer.echo(format_site_report(assessment, config.credits))


@app.command("edit")
def edit(
    site: str = typer.Option(..., "--site", "-s", help="Name of the site to edit."),
    field: str = typer.Option(
        ...,
        "--field",
        "-f",
        help="Measurement to change, e.g. energyConsumption or energy_consumption.",
    ),
    value: str = typer.Option(
        ...,
        "--value",
        "-v",
        help="New value. Non-numeric input is stored as 0.",
    ),
    data_file: Optional[str] = typer.Option(
        None,
        "--data",
        "-d",
        help="Site CSV file. Defaults to config.data.data_file.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the updated site set here instead of over the data file.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show the recomputed report but do not write any file.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Change one measurement of one site and recompute that site.

    Only the edited site is recomputed; the full record set is then written
    back so the data file stays the single source of raw values.
    """
    from carbon_gap.engine.service import (
        CarbonAccountingService,
        find_record,
        replace_record,
    )
    from carbon_gap.reporting.export import write_site_csv
    from carbon_gap.reporting.formatters import format_site_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    data_path = _data_path(data_file, config)
    records = _load_sites_or_exit(data_path)
    try:
        record = find_record(records, site)
    except KeyError:
        typer.echo(f"[ERROR] Site not found: '{site}'", err=True)
        raise typer.Exit(code=1)

    try:
        assessment = CarbonAccountingService(config).apply_edit(record, field, value)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_site_report(assessment, config.credits))

    if dry_run:
        typer.echo("\n[DRY RUN] No file written.")
        return

    out_path = Path(output) if output else data_path
    write_site_csv(replace_record(records, assessment.record), out_path)
    typer.echo(f"\n[OK] Saved {len(records)} site(s) to {out_path}")


if __name__ == "__main__":
    app()
