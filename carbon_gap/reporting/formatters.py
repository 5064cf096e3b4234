"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept assessments and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Portfolio table
---------------
``format_portfolio_table()`` lists every site with its derived metrics and
tier.  The site with the largest footprint is flagged with ``*`` so the
biggest emitter stands out without a chart.
"""

from __future__ import annotations

from carbon_gap.config import CreditConfig
from carbon_gap.models.site import FIELD_UNITS, MEASUREMENT_FIELDS, SiteAssessment

_FIELD_LABELS: dict[str, str] = {
    "excavation":         "Excavation",
    "transportation":     "Transportation",
    "equipment_usage":    "Equipment Usage",
    "energy_consumption": "Energy Consumption",
    "methane_emission":   "Methane Emission",
    "afforestation":      "Afforestation",
    "reclamation":        "Reclamation",
}


# ── Portfolio table ───────────────────────────────────────────────────────────


def format_portfolio_table(
    assessments: list[SiteAssessment],
    credits: CreditConfig | None = None,
) -> str:
    """Format all assessed sites as an ASCII table, in input order.

    ::

          Site                     Footprint        Sink         Gap     Credits    Land m²  Tier
          ------------------------------------------------------------------------------------
        * Ridge Quarry              11994.00      480.00    11514.00     $239.88      20.59  Significant

    Args:
        assessments: Output of ``CarbonAccountingService.assess_all()``.
        credits:     Credit config (currency symbol for the credits column).

    Returns:
        Multi-line string.
    """
    cur = (credits or CreditConfig()).currency_symbol
    lines: list[str] = []
    lines.append("")
    lines.append("=== Site Carbon Portfolio ===")
    lines.append("  Units: kg CO₂e (footprint, sink, gap), m² (land)")

    if not assessments:
        lines.append("")
        lines.append("  (no sites loaded; check the data file)")
        return "\n".join(lines)

    top = max(assessments, key=lambda a: a.metrics.carbon_footprint)

    lines.append("")
    header = (
        f"    {'Site':<24}  {'Footprint':>10}  {'Sink':>10}  {'Gap':>10}  "
        f"{'Credits':>10}  {'Land m²':>9}  {'Tier':<12}"
    )
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for a in assessments:
        m = a.metrics
        mark = "*" if a is top else " "
        lines.append(
            f"  {mark} {a.name[:24]:<24}  {m.carbon_footprint:>10.2f}  "
            f"{m.carbon_sink:>10.2f}  {m.gap:>10.2f}  "
            f"{cur + format(m.carbon_credits, '.2f'):>10}  "
            f"{m.land_for_solar:>9.2f}  {a.tier.label:<12}"
        )

    total_fp = sum(a.metrics.carbon_footprint for a in assessments)
    total_gap = sum(a.metrics.gap for a in assessments)
    lines.append("")
    lines.append(f"  Sites: {len(assessments)}   "
                 f"Total footprint: {total_fp:.2f}   Total gap: {total_gap:.2f}")
    lines.append(f"  * largest footprint: {top.name}")
    return "\n".join(lines)


# ── Single-site report ────────────────────────────────────────────────────────


def format_site_report(
    assessment: SiteAssessment,
    credits: CreditConfig | None = None,
) -> str:
    """Format the detailed report for one selected site.

    Sections: raw inputs with units, footprint / sink / gap, carbon-credit
    value at the configured rate, land required for solar, and the pathway
    recommendations.
    """
    cfg = credits or CreditConfig()
    m = assessment.metrics
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== {assessment.name} ===")

    lines.append("")
    lines.append("  Inputs")
    for field in MEASUREMENT_FIELDS:
        value = getattr(assessment.record, field)
        lines.append(
            f"    {_FIELD_LABELS[field]:<20} {value:>12.2f} {FIELD_UNITS[field]}"
        )

    lines.append("")
    lines.append("  Carbon balance")
    lines.append(f"    {'Carbon Footprint':<20} {m.carbon_footprint:>12.2f} kg CO₂e")
    lines.append(f"    {'Carbon Sink':<20} {m.carbon_sink:>12.2f} kg CO₂e")
    lines.append(f"    {'Gap':<20} {m.gap:>12.2f} kg CO₂e")
    lines.append(f"    {'Tier':<20} {assessment.tier.label:>12}")

    lines.append("")
    lines.append("  Offsets")
    lines.append(
        f"    Potential Carbon Credits: {cfg.currency_symbol}{m.carbon_credits:.2f} "
        f"at {cfg.currency_symbol}{cfg.rate_per_ton:g}/ton"
    )
    lines.append(f"    Land Required for Solar:  {m.land_for_solar:.2f} m²")

    lines.append("")
    lines.append("  Pathways to Carbon Neutrality")
    for rec in assessment.recommendations:
        lines.append(f"    {rec}" if rec else "")

    return "\n".join(lines)
