import json
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from swipe_core.errors import ConfigError, MissingConfig
from swipe_core.factors import (
    DiversityFactors,
    EngagementFactors,
    FactorBundle,
    NoveltyFactors,
    QualityFactors,
    RecencyFactors,
)
from swipe_logging.logger import configure_logging, get_logger

log = get_logger(__name__)

NEUTRAL_SCORE = 0.5
NO_HISTORY_SCORE = 0.4  # cluster is scorable but the user never touched it
DEFAULT_HALF_LIFE_HOURS = 48.0

# Last-resort weights when neither the configured nor the default table knows a kind
FALLBACK_INTERACTION_WEIGHTS: Dict[str, float] = {
    "partialView": 0.5,
    "completeView": 1.0,
    "like": 2.0,
    "likeComment": 2.5,
    "comment": 3.0,
    "share": 4.0,
    "save": 3.5,
    "dislike": -0.5,
    "report": -1.0,
    "showLessOften": -0.6,
    "click": 0.3,
    "default": 0.3,
}

# Module-level defaults
DEFAULT_ENGAGEMENT_FACTORS = EngagementFactors(
    recency=RecencyFactors(
        half_life_hours={
            "partialView": 24,
            "completeView": 48,
            "like": 168,
            "likeComment": 192,
            "comment": 336,
            "share": 336,
            "save": 720,
        }
    ),
    interaction_weights={
        "partialView": 0.5,
        "completeView": 1.0,
        "like": 2.0,
        "likeComment": 2.5,
        "comment": 3.0,
        "share": 4.0,
    },
    default_interaction_weights=FALLBACK_INTERACTION_WEIGHTS,
    time_decay_factor=0.9,
    max_interactions_per_user=100,
    normalization_factor=0.1,
)

DEFAULT_QUALITY_FACTORS = QualityFactors(
    cohesion_weight=0.4,
    size_weight=0.2,
    density_weight=0.2,
    stability_weight=0.2,
    min_optimal_size=5,
    max_optimal_size=50,
)

DEFAULT_NOVELTY_FACTORS = NoveltyFactors()
DEFAULT_DIVERSITY_FACTORS = DiversityFactors()

DEFAULT_FACTORS = FactorBundle(
    engagement=DEFAULT_ENGAGEMENT_FACTORS,
    quality=DEFAULT_QUALITY_FACTORS,
    novelty=DEFAULT_NOVELTY_FACTORS,
    diversity=DEFAULT_DIVERSITY_FACTORS,
)


class ScoringSettings(BaseSettings):
    # JSON file with any of: engagement, quality, novelty, diversity
    factors_file: Path | None = None
    log_level: str = "WARNING"
    model_config = SettingsConfigDict(env_prefix="SWIPE_", env_file=".env", extra="ignore")


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as exc:
        raise MissingConfig(f"factors file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"factors file is not valid JSON: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"factors file must hold a JSON object: {path}")
    return data


def factors_from_dict(data: Dict[str, Any]) -> FactorBundle:
    """Build a bundle from raw config; absent sections keep the defaults."""
    payload = {
        "engagement": data.get("engagement", DEFAULT_ENGAGEMENT_FACTORS),
        "quality": data.get("quality", DEFAULT_QUALITY_FACTORS),
        "novelty": data.get("novelty", DEFAULT_NOVELTY_FACTORS),
        "diversity": data.get("diversity", DEFAULT_DIVERSITY_FACTORS),
    }
    unknown = set(data) - set(payload)
    if unknown:
        raise ConfigError(f"unknown factor sections: {', '.join(sorted(unknown))}")
    try:
        return FactorBundle.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid scoring factors: {exc}") from exc


def load_factors(settings: ScoringSettings | None = None) -> FactorBundle:
    """Load factors once at startup. No file configured means the defaults."""
    settings = settings or ScoringSettings()
    if settings.factors_file is None:
        return DEFAULT_FACTORS
    return factors_from_dict(_read_json(settings.factors_file))


def init_scoring(settings: ScoringSettings | None = None) -> FactorBundle:
    """Process start: set the log level, then load and validate factors."""
    settings = settings or ScoringSettings()
    configure_logging(settings.log_level)
    factors = load_factors(settings)
    log.info("scoring factors loaded from %s", settings.factors_file or "defaults")
    return factors
