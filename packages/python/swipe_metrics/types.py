from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict


def clamp01(x: float) -> float:
    return 0.0 if x <= 0.0 else 1.0 if x >= 1.0 else x


@dataclass(frozen=True)
class FeatureContribution:
    feature: str  # "size", "cohesion", "density", "stability", "topic", ...
    value: float  # sub-score in [0, 1]
    weight: float  # weight used in this run
    contribution: float  # weight * value


@dataclass(frozen=True)
class ScoreBreakdown:
    features: Dict[str, FeatureContribution]  # keyed by feature name

    @classmethod
    def weighted(cls, parts: Dict[str, tuple[float, float]]) -> "ScoreBreakdown":
        """parts: {feature: (value, weight)}"""
        return cls(
            features={
                name: FeatureContribution(
                    feature=name, value=value, weight=weight, contribution=value * weight
                )
                for name, (value, weight) in parts.items()
            }
        )

    @property
    def total(self) -> float:
        return sum(fc.contribution for fc in self.features.values())

    @property
    def weight_sum(self) -> float:
        return sum(fc.weight for fc in self.features.values())

    def weighted_average(self, neutral: float = 0.5) -> float:
        """total / weight_sum clamped to [0, 1]; neutral when no weight is active."""
        ws = self.weight_sum
        if ws == 0:
            return neutral
        return clamp01(self.total / ws)


@dataclass(frozen=True)
class EngagementMetrics:
    total_interactions: int = 0
    interactions_by_type: Dict[str, int] = field(default_factory=dict)
    engagement_rate: float = 0.0  # relevant interactions per cluster member
    retention_rate: float = 0.0  # share of users who came back, in [0, 1]
    unique_users: int = 0


@dataclass(frozen=True)
class QualityMetrics:
    size_score: float
    cohesion_score: float
    density_score: float
    stability_score: float
    overall_quality: float


@dataclass(frozen=True)
class NoveltyMetrics:
    content_novelty: float
    topic_novelty: float
    overall_novelty: float


@dataclass(frozen=True)
class DiversityMetrics:
    topic_diversity: float
    creator_diversity: float
    format_diversity: float
    overall_diversity: float
