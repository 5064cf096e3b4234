"""
Pathway recommendations: gap → tier → ordered suggestion lines.

Tier selection and wording are kept apart:

  classify_gap(gap, boundaries)  → RecommendationTier   (rules only)
  render_recommendations(tier)   → list[str]            (lookup table only)

Rendering rules
---------------
NEUTRAL      : one congratulatory line and nothing else.
other tiers  : a headline, the tier's suggestions (most actionable first),
               then a blank line and the closing block shared by all
               non-neutral tiers.

The gap passed to ``classify_gap`` is the rounded value from
``compute_gap()``, so a gap of exactly 1000.00 stays in NEAR_NEUTRAL.
"""

from __future__ import annotations

from carbon_gap.config import TierBoundaries
from carbon_gap.taxonomy.tiers import RecommendationTier

NEUTRAL_MESSAGE = (
    "Congratulations! You've achieved carbon neutrality. "
    "Focus on maintaining and improving your current practices."
)

_TIER_RECOMMENDATIONS: dict[RecommendationTier, tuple[str, ...]] = {
    RecommendationTier.NEAR_NEUTRAL: (
        "You're close to carbon neutrality. Consider these options:",
        "Optimize energy efficiency in your operations.",
        "Increase afforestation efforts on available land.",
        "Invest in renewable energy sources like solar or wind power.",
    ),
    RecommendationTier.MODERATE: (
        "You have a moderate carbon gap. Here are some pathways to consider:",
        "Implement a comprehensive energy management system.",
        "Transition to electric or hydrogen-powered equipment where possible.",
        "Explore carbon capture and storage technologies.",
        "Increase investment in land reclamation and reforestation projects.",
    ),
    RecommendationTier.SIGNIFICANT: (
        "You have a significant carbon gap. Consider these major initiatives:",
        "Conduct a full carbon audit and develop a long-term reduction strategy.",
        "Invest in breakthrough technologies for carbon-neutral mining.",
        "Partner with environmental organizations for large-scale offset projects.",
        "Consider restructuring operations to prioritize low-carbon extraction methods.",
    ),
}

SHARED_CLOSING: tuple[str, ...] = (
    "",
    "Additional recommendations for all levels:",
    "Explore carbon credit markets to offset remaining emissions.",
    "Engage in industry collaborations to develop innovative carbon reduction solutions.",
)


def classify_gap(
    gap: float,
    boundaries: TierBoundaries | None = None,
) -> RecommendationTier:
    """Select the tier for ``gap``; each boundary belongs to the lower tier."""
    b = boundaries or TierBoundaries()
    if gap <= b.neutral_max:
        return RecommendationTier.NEUTRAL
    if gap <= b.near_neutral_max:
        return RecommendationTier.NEAR_NEUTRAL
    if gap <= b.moderate_max:
        return RecommendationTier.MODERATE
    return RecommendationTier.SIGNIFICANT


def render_recommendations(tier: RecommendationTier) -> list[str]:
    """Return the ordered recommendation lines for ``tier``."""
    if tier is RecommendationTier.NEUTRAL:
        return [NEUTRAL_MESSAGE]
    return [*_TIER_RECOMMENDATIONS[tier], *SHARED_CLOSING]


def generate_recommendations(
    gap: float,
    boundaries: TierBoundaries | None = None,
) -> list[str]:
    """``render_recommendations(classify_gap(gap))``."""
    return render_recommendations(classify_gap(gap, boundaries))


def format_recommendations(lines: list[str]) -> str:
    """Join recommendation lines; empty lines become paragraph breaks."""
    return "\n".join(lines)
