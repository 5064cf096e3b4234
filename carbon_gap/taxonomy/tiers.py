"""
Gap severity tiers.

A tier is selected purely from the (already rounded) net gap:

  gap <= 0                 → NEUTRAL
  0 < gap <= 1000          → NEAR_NEUTRAL
  1000 < gap <= 5000       → MODERATE
  gap > 5000               → SIGNIFICANT

Boundaries are configurable (``TierBoundaries``); the values above are the
defaults.  Each boundary is inclusive on the lower tier.

This module has NO imports from any other ``carbon_gap`` package.
"""

from enum import StrEnum


class RecommendationTier(StrEnum):
    """Severity classification of a site's net carbon gap."""

    NEUTRAL = "neutral"
    """Sink covers the footprint; nothing left to offset."""

    NEAR_NEUTRAL = "near_neutral"
    """Small residual gap; efficiency and afforestation close it."""

    MODERATE = "moderate"
    """Gap needs structural changes (equipment, energy management, CCS)."""

    SIGNIFICANT = "significant"
    """Large gap; requires a long-term reduction strategy."""

    @property
    def label(self) -> str:
        """Human-readable tier name, e.g. ``"Near-Neutral"``."""
        return self.value.replace("_", "-").title()
