"""
Domain exceptions for the carbon gap engine.

Invalid raw measurements are never raised: they are coerced to ``0`` where the
record is built (see ``carbon_gap.models.site``).  Only configuration problems
that would otherwise turn into ``inf``/``NaN`` or a meaningless tier are
surfaced to callers.
"""

from __future__ import annotations


class InvalidConfigurationError(ValueError):
    """A configured constant makes a derived metric undefined.

    Raised for zero or negative denominators (kg-to-ton divisor, annual solar
    yield per square meter), a negative credit rate, or gap-tier boundaries
    that are not strictly ascending.
    """
