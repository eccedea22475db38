from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..schemas.app_settings import Progress

HOUR_PLACES = Decimal("0.01")
HUNDRED = Decimal(100)


def _quantize(value: Decimal) -> float:
    return float(value.quantize(HOUR_PLACES, rounding=ROUND_HALF_UP))


def build_progress(total_hours: float, target_hours: float) -> Progress:
    """Summarise logged hours against the target; percent is capped at 100."""
    total = Decimal(str(total_hours or 0))
    target = Decimal(str(target_hours))
    remaining = max(target - total, Decimal(0))
    percent = min(total / target * HUNDRED, HUNDRED) if target > 0 else Decimal(0)
    return Progress(
        total_hours=_quantize(total),
        target_hours=_quantize(target),
        remaining_hours=_quantize(remaining),
        percent=_quantize(percent),
    )
