import logging

from swipe_core.config import FALLBACK_INTERACTION_WEIGHTS
from swipe_core.factors import DEFAULT_WEIGHT_KEY, EngagementFactors
from swipe_core.types import InteractionKind
from swipe_logging.logger import get_logger, safe_warning

log = get_logger(__name__)


def interaction_weight(
    kind: InteractionKind,
    factors: EngagementFactors,
    logger: logging.Logger | None = log,
) -> float:
    """
    Base weight for an interaction kind. Lookup order:
      1. factors.interaction_weights[kind]
      2. factors.default_interaction_weights[kind]
      3. factors.default_interaction_weights["default"]
      4. built-in fallback table (kind, then "default")
    Negative weights (dislike, report, ...) are legal.
    """
    k = kind.value
    if k in factors.interaction_weights:
        return float(factors.interaction_weights[k])

    defaults = factors.default_interaction_weights
    if k in defaults:
        return float(defaults[k])
    if DEFAULT_WEIGHT_KEY in defaults:
        return float(defaults[DEFAULT_WEIGHT_KEY])

    safe_warning(logger, "no configured weight for %s; using built-in fallback", k)
    return FALLBACK_INTERACTION_WEIGHTS.get(k, FALLBACK_INTERACTION_WEIGHTS[DEFAULT_WEIGHT_KEY])
