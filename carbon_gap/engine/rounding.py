"""Two-decimal rounding applied wherever a derived metric is produced.

Exact ties round away from zero (``0.125 -> 0.13``, ``-0.125 -> -0.13``).
The tie test uses the float's exact binary value, so ``1.005`` (stored as
``1.00499999...``) still rounds down to ``1.0``.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

METRIC_DECIMALS = 2

_QUANTUM = Decimal(1).scaleb(-METRIC_DECIMALS)


def round_metric(value: float) -> float:
    """Round ``value`` to two decimals, ties away from zero; ``-0.0`` becomes ``0.0``."""
    if not math.isfinite(value):
        return value
    return float(Decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP)) + 0.0
