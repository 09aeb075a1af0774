from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Sequence

from swipe_core.factors import FactorBundle
from swipe_core.types import ClusterInfo, Interaction, UserProfile
from swipe_metrics.diversity import calculate_detailed_diversity_metrics, calculate_diversity_score
from swipe_metrics.engagement import (
    calculate_detailed_engagement_metrics,
    calculate_engagement_score,
)
from swipe_metrics.geometry import ClusterGeometryProvider
from swipe_metrics.novelty import calculate_detailed_novelty_metrics, calculate_novelty_score
from swipe_metrics.quality import calculate_detailed_quality_metrics, calculate_quality_score
from swipe_metrics.types import (
    DiversityMetrics,
    EngagementMetrics,
    NoveltyMetrics,
    QualityMetrics,
)


@dataclass(frozen=True)
class ClusterScoreCard:
    """Every signal for one cluster, unblended. Ranking happens downstream."""

    cluster_id: str
    engagement: float
    quality: float
    novelty: float
    diversity: float
    engagement_metrics: EngagementMetrics
    quality_metrics: QualityMetrics
    novelty_metrics: NoveltyMetrics
    diversity_metrics: DiversityMetrics | None = None  # needs a profile

    def to_dict(self) -> dict[str, float | str]:
        return {
            "cluster_id": self.cluster_id,
            "engagement": self.engagement,
            "quality": self.quality,
            "novelty": self.novelty,
            "diversity": self.diversity,
        }


def score_cluster(
    cluster: ClusterInfo,
    interactions: Sequence[Interaction],
    factors: FactorBundle,
    *,
    now: datetime,
    profile: UserProfile | None = None,
    geometry: ClusterGeometryProvider | None = None,
    logger: logging.Logger | None = None,
) -> ClusterScoreCard:
    return ClusterScoreCard(
        cluster_id=cluster.id,
        engagement=calculate_engagement_score(
            cluster, interactions, factors.engagement, now=now, logger=logger
        ),
        quality=calculate_quality_score(cluster, factors.quality, geometry=geometry),
        novelty=calculate_novelty_score(cluster, interactions, factors.novelty),
        diversity=calculate_diversity_score(cluster, profile, factors.diversity),
        engagement_metrics=calculate_detailed_engagement_metrics(cluster, interactions),
        quality_metrics=calculate_detailed_quality_metrics(
            cluster, factors.quality, geometry=geometry
        ),
        novelty_metrics=calculate_detailed_novelty_metrics(
            cluster, interactions, factors.novelty
        ),
        diversity_metrics=(
            calculate_detailed_diversity_metrics(cluster, profile, factors.diversity)
            if profile is not None
            else None
        ),
    )


def score_clusters(
    clusters: Iterable[ClusterInfo],
    interactions: Sequence[Interaction],
    factors: FactorBundle,
    *,
    now: datetime,
    profile: UserProfile | None = None,
    geometry: ClusterGeometryProvider | None = None,
    logger: logging.Logger | None = None,
) -> List[ClusterScoreCard]:
    """One card per cluster, in input order. Calls share no state."""
    return [
        score_cluster(
            c,
            interactions,
            factors,
            now=now,
            profile=profile,
            geometry=geometry,
            logger=logger,
        )
        for c in clusters
    ]
