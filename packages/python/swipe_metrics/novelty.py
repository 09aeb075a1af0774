from __future__ import annotations

from typing import Sequence

from swipe_core.config import DEFAULT_NOVELTY_FACTORS, NEUTRAL_SCORE
from swipe_core.factors import NoveltyFactors
from swipe_core.types import ClusterInfo, Interaction
from swipe_metrics.types import NoveltyMetrics, ScoreBreakdown

SATURATION_INTERACTIONS = 100  # history size at which content novelty bottoms out
MIN_CONTENT_NOVELTY = 0.3


def content_novelty(interactions: Sequence[Interaction]) -> float:
    # the longer the history, the likelier the user has seen this content already
    n = len(interactions)
    if n == 0:
        return 1.0
    return max(MIN_CONTENT_NOVELTY, 1.0 - n / SATURATION_INTERACTIONS)


def topic_novelty(cluster: ClusterInfo) -> float:
    """Broader clusters have more room to surprise: 0.4 at <=2 topics, 0.9 at >=10."""
    n = len(cluster.topics)
    if n == 0:
        return NEUTRAL_SCORE
    if n <= 2:
        return 0.4
    if n >= 10:
        return 0.9
    return 0.4 + (n - 2) * 0.5 / 8


def _breakdown(
    cluster: ClusterInfo, interactions: Sequence[Interaction], factors: NoveltyFactors
) -> ScoreBreakdown:
    return ScoreBreakdown.weighted(
        {
            "content": (content_novelty(interactions), factors.viewed_content_weight),
            "topic": (topic_novelty(cluster), factors.topic_novelty_weight),
        }
    )


def calculate_novelty_score(
    cluster: ClusterInfo,
    interactions: Sequence[Interaction] | None,
    factors: NoveltyFactors,
) -> float:
    """Novelty (0-1) of a cluster for a user; 1.0 when there is no history at all."""
    if not interactions:
        return 1.0
    return _breakdown(cluster, interactions, factors).weighted_average(neutral=NEUTRAL_SCORE)


def calculate_detailed_novelty_metrics(
    cluster: ClusterInfo,
    interactions: Sequence[Interaction],
    factors: NoveltyFactors | None = None,
) -> NoveltyMetrics:
    b = _breakdown(cluster, interactions or [], factors or DEFAULT_NOVELTY_FACTORS)
    return NoveltyMetrics(
        content_novelty=b.features["content"].value,
        topic_novelty=b.features["topic"].value,
        overall_novelty=b.weighted_average(neutral=NEUTRAL_SCORE),
    )
