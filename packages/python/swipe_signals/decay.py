import logging
from datetime import datetime

from swipe_core.config import DEFAULT_HALF_LIFE_HOURS
from swipe_core.factors import RecencyFactors
from swipe_core.types import InteractionKind
from swipe_logging.logger import get_logger, safe_warning

log = get_logger(__name__)


# non-negative age in hours; future timestamps count as "just now"
def age_hours(ts: datetime, now: datetime) -> float:
    return max(0.0, (now - ts).total_seconds() / 3600.0)


def half_life_for(
    kind: InteractionKind,
    recency: RecencyFactors,
    logger: logging.Logger | None = log,
) -> float:
    """Configured half-life for a kind, else the completeView one, else 48h."""
    table = recency.half_life_hours
    h = table.get(kind.value)
    if h is None:
        h = table.get(InteractionKind.COMPLETE_VIEW.value)
        if h is None:
            safe_warning(logger, "no half-life configured for %s; using %sh", kind.value, DEFAULT_HALF_LIFE_HOURS)
            return DEFAULT_HALF_LIFE_HOURS
    if h <= 0:
        safe_warning(logger, "non-positive half-life %s for %s; using %sh", h, kind.value, DEFAULT_HALF_LIFE_HOURS)
        return DEFAULT_HALF_LIFE_HOURS
    return float(h)


# exponential half-life decay: 1.0 at age 0, halves every half_life hours
def hdecay(age_h: float, half_life_h: float) -> float:
    return 0.5 ** (max(0.0, age_h) / half_life_h)
