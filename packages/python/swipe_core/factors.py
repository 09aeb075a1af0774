from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from swipe_core.types import InteractionKind

DEFAULT_WEIGHT_KEY = "default"

_KINDS = {k.value for k in InteractionKind}


def _kind_keyed(d: Dict[str, float], *, allow_default: bool = False) -> Dict[str, float]:
    """Normalize keys to InteractionKind values; reject anything outside the enum."""
    if not isinstance(d, dict):
        return d  # let the field type reject it
    out: Dict[str, float] = {}
    for key, value in d.items():
        k = key.value if isinstance(key, InteractionKind) else str(key)
        if k not in _KINDS and not (allow_default and k == DEFAULT_WEIGHT_KEY):
            raise ValueError(f"unknown interaction kind: {k!r}")
        out[k] = value
    return out


class _Factors(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False, extra="forbid")


class RecencyFactors(_Factors):
    # hours until an interaction's contribution halves, per kind
    half_life_hours: Dict[str, float] = Field(default_factory=dict)

    @field_validator("half_life_hours", mode="before")
    @classmethod
    def _keys(cls, v):
        return _kind_keyed(v)

    @field_validator("half_life_hours")
    @classmethod
    def _positive(cls, v: Dict[str, float]) -> Dict[str, float]:
        bad = [k for k, h in v.items() if h <= 0]
        if bad:
            raise ValueError(f"half-life must be > 0 for: {', '.join(sorted(bad))}")
        return v


class EngagementFactors(_Factors):
    recency: RecencyFactors = Field(default_factory=RecencyFactors)
    interaction_weights: Dict[str, float] = Field(default_factory=dict)
    # may carry a "default" entry used for any unmapped kind
    default_interaction_weights: Dict[str, float] = Field(default_factory=dict)
    time_decay_factor: float = Field(default=1.0, ge=0)
    max_interactions_per_user: int = Field(default=100, ge=1)
    normalization_factor: float = Field(default=1.0, ge=0)

    @field_validator("interaction_weights", mode="before")
    @classmethod
    def _weight_keys(cls, v):
        return _kind_keyed(v)

    @field_validator("default_interaction_weights", mode="before")
    @classmethod
    def _default_weight_keys(cls, v):
        return _kind_keyed(v, allow_default=True)


class QualityFactors(_Factors):
    cohesion_weight: float = 0.25
    size_weight: float = 0.25
    density_weight: float = 0.25
    stability_weight: float = 0.25
    min_optimal_size: int = Field(default=10, ge=0)
    max_optimal_size: int = Field(default=50, ge=0)
    # legacy names, accepted and ignored
    min_cluster_size: int | None = None
    max_cluster_size: int | None = None

    @model_validator(mode="after")
    def _band(self) -> "QualityFactors":
        if self.min_optimal_size > self.max_optimal_size:
            raise ValueError("min_optimal_size must be <= max_optimal_size")
        return self

    @property
    def weight_sum(self) -> float:
        return self.size_weight + self.cohesion_weight + self.density_weight + self.stability_weight


class NoveltyFactors(_Factors):
    viewed_content_weight: float = 0.7
    topic_novelty_weight: float = 0.3
    novelty_decay_period_days: float = 30
    similar_content_discount: float = 0.5


class DiversityFactors(_Factors):
    topic_diversity_weight: float = 0.5
    creator_diversity_weight: float = 0.3
    format_diversity_weight: float = 0.2
    recent_clusters_to_consider: int = Field(default=10, ge=0)


class FactorBundle(_Factors):
    engagement: EngagementFactors
    quality: QualityFactors
    novelty: NoveltyFactors = Field(default_factory=NoveltyFactors)
    diversity: DiversityFactors = Field(default_factory=DiversityFactors)
