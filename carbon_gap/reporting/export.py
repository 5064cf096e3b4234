"""
Assessment exports and the record-set sink.

``write_site_csv()`` persists raw ``SiteRecord`` values in the same column
layout ``parse_site_csv()`` reads, so an edited record set can be written back
over its source file.

``assess --export-csv`` and ``assess --export-json`` go through
``flatten_assessments_for_export()``, which turns each ``SiteAssessment`` into
one flat row (raw columns, derived columns, tier), and then
``export_assessment_rows_csv()`` or ``export_assessment_rows_json()``.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path

from carbon_gap.models.site import EXTERNAL_FIELD_NAMES, MEASUREMENT_FIELDS, SiteAssessment, SiteRecord

logger = logging.getLogger(__name__)

SITE_CSV_COLUMNS: list[str] = ["name"] + [EXTERNAL_FIELD_NAMES[f] for f in MEASUREMENT_FIELDS]

ASSESSMENT_COLUMNS: list[str] = SITE_CSV_COLUMNS + [
    "carbonFootprint", "carbonSink", "gap", "carbonCredits", "landForSolar", "tier",
]


def export_assessment_rows_csv(rows: list[dict], path: Path) -> Path:
    """Write assessment rows as a spreadsheet-ready CSV in ``ASSESSMENT_COLUMNS`` order.

    A ``recommendations`` key, if present, is dropped; pathway text is
    multi-line and belongs in the JSON export.  An empty portfolio still gets a
    header row so the file opens with the expected columns.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=ASSESSMENT_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)
    logger.info("Exported %d assessment row(s) to %s", len(rows), path)
    return path


def export_assessment_rows_json(rows: list[dict], path: Path) -> Path:
    """Write assessment rows as a JSON array, one object per site.

    Non-ASCII text (site names, the ``m²`` in pathway text) is written as-is.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Exported %d assessment row(s) to %s", len(rows), path)
    return path


def flatten_assessments_for_export(
    assessments: list[SiteAssessment],
    include_recommendations: bool = False,
) -> list[dict]:
    """Flatten assessments into one row per site, in input order.

    Args:
        assessments:             Output of ``CarbonAccountingService.assess_all()``.
        include_recommendations: Add a ``recommendations`` column holding the
                                 newline-joined pathway text.

    Returns:
        List of flat row dicts keyed by ``ASSESSMENT_COLUMNS``.
    """
    rows: list[dict] = []
    for a in assessments:
        row = a.to_row()
        if include_recommendations:
            row["recommendations"] = a.recommendation_text
        rows.append(row)
    return rows


def write_site_csv(records: list[SiteRecord], path: Path) -> Path:
    """Persist the full raw record set in the source CSV layout.

    Args:
        records: Site records in the order they should be written.
        path:    Destination file (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    rows = [r.to_external() for r in records]
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=SITE_CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)
    logger.info("Wrote %d site(s) to %s", len(rows), path)
    return path
