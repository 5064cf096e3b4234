"""
CSV reader for per-site measurement records.

Format: comma delimited, with a header row.
Required column:
  name

Measurement columns (either the camelCase or snake_case spelling):
  excavation, transportation, equipmentUsage, energyConsumption,
  methaneEmission, afforestation, reclamation

Missing measurement columns and unparseable cells are read as ``0`` (see
``carbon_gap.models.site.coerce_measurement``).  Unknown columns are ignored.

Site names must be non-empty and unique.  All rows are checked before any are
returned; if any row fails, a single ``ValueError`` lists the first 10 failures.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from pydantic import ValidationError

from carbon_gap.models.site import MEASUREMENT_FIELDS, SiteRecord, resolve_field_name

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = frozenset({"name"})


def parse_site_csv(path: Path) -> list[SiteRecord]:
    """Parse a site CSV file into :class:`SiteRecord` objects, in file order.

    Args:
        path: Path to the CSV file (must exist).

    Returns:
        List of :class:`SiteRecord` instances.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the ``name`` column is missing, or any row has an empty
            or duplicate name.
    """
    if not path.exists():
        raise FileNotFoundError(f"Site CSV file not found: {path}")

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        actual_cols = {c.strip() for c in reader.fieldnames if c}
        missing = REQUIRED_CSV_COLUMNS - actual_cols
        if missing:
            raise ValueError(
                f"CSV missing required columns: {sorted(missing)}\n"
                f"Found columns: {sorted(actual_cols)}"
            )

        column_map = _measurement_columns(reader.fieldnames)
        absent = [f for f in MEASUREMENT_FIELDS if f not in column_map.values()]
        if absent:
            logger.info("Columns absent from %s, reading as 0: %s", path.name, absent)

        rows = list(reader)

    if not rows:
        logger.warning("Site CSV is empty (header only): %s", path)
        return []

    records: list[SiteRecord] = []
    errors: list[tuple[int, str]] = []
    seen: set[str] = set()

    for i, row in enumerate(rows):
        line_no = i + 2  # 1-based, skip header row
        try:
            record = _row_to_site_record(row, column_map)
        except ValidationError as exc:
            errors.append((line_no, _first_error(exc)))
            continue
        if record.name in seen:
            errors.append((line_no, f"Duplicate site name '{record.name}'."))
            continue
        seen.add(record.name)
        records.append(record)

    if errors:
        max_shown = 10
        detail = "\n".join(f"  Row {ln}: {msg}" for ln, msg in errors[:max_shown])
        suffix = f"\n  … and {len(errors) - max_shown} more" if len(errors) > max_shown else ""
        raise ValueError(
            f"{len(errors)} row(s) failed validation in {path.name}:\n{detail}{suffix}"
        )

    logger.info("Parsed %d sites from %s", len(records), path.name)
    return records


# ── Private helpers ────────────────────────────────────────────────────────────

def _measurement_columns(fieldnames: list[str]) -> dict[str, str]:
    """Map CSV header names to internal measurement field names."""
    mapping: dict[str, str] = {}
    for col in fieldnames:
        if not col or col.strip() == "name":
            continue
        try:
            mapping[col] = resolve_field_name(col.strip())
        except ValueError:
            logger.debug("Ignoring unknown column '%s'", col)
    return mapping


def _row_to_site_record(row: dict[str, str], column_map: dict[str, str]) -> SiteRecord:
    """Build a :class:`SiteRecord` from a CSV row; cells are passed through raw."""
    name = next((v for k, v in row.items() if k and k.strip() == "name"), "")
    values = {field: row.get(col) for col, field in column_map.items()}
    return SiteRecord(name=name or "", **values)


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    return str(err.get("msg", exc))
