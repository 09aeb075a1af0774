from __future__ import annotations

from swipe_core.config import DEFAULT_DIVERSITY_FACTORS, NEUTRAL_SCORE
from swipe_core.factors import DiversityFactors
from swipe_core.types import ClusterInfo, UserProfile
from swipe_metrics.types import DiversityMetrics, ScoreBreakdown

IDEAL_NEW_TOPIC_SHARE = 0.7
MIN_TOPIC_UTILITY = 0.3
PLACEHOLDER_CREATOR_DIVERSITY = 0.6  # needs creator data per member
PLACEHOLDER_FORMAT_DIVERSITY = 0.5


def topic_diversity(cluster: ClusterInfo, profile: UserProfile) -> float:
    """
    Share of cluster topics outside the user's interests, scored by a tent
    utility peaking at 70% new topics: too familiar and too foreign both lose.
    """
    if not cluster.topics or profile.interests is None:
        return NEUTRAL_SCORE

    interests = {i.lower() for i in profile.interests}
    topics = [t.lower() for t in cluster.topics]
    new_share = sum(1 for t in topics if t not in interests) / len(topics)

    utility = 1.0 - abs(new_share - IDEAL_NEW_TOPIC_SHARE) / IDEAL_NEW_TOPIC_SHARE
    return max(MIN_TOPIC_UTILITY, utility)


def _breakdown(
    cluster: ClusterInfo, profile: UserProfile, factors: DiversityFactors
) -> ScoreBreakdown:
    return ScoreBreakdown.weighted(
        {
            "topic": (topic_diversity(cluster, profile), factors.topic_diversity_weight),
            "creator": (PLACEHOLDER_CREATOR_DIVERSITY, factors.creator_diversity_weight),
            "format": (PLACEHOLDER_FORMAT_DIVERSITY, factors.format_diversity_weight),
        }
    )


def calculate_diversity_score(
    cluster: ClusterInfo,
    profile: UserProfile | None,
    factors: DiversityFactors,
) -> float:
    """Diversity (0-1) a cluster adds for a user; 0.5 without a profile."""
    if profile is None:
        return NEUTRAL_SCORE
    return _breakdown(cluster, profile, factors).weighted_average(neutral=NEUTRAL_SCORE)


def calculate_detailed_diversity_metrics(
    cluster: ClusterInfo,
    profile: UserProfile,
    factors: DiversityFactors | None = None,
) -> DiversityMetrics:
    b = _breakdown(cluster, profile, factors or DEFAULT_DIVERSITY_FACTORS)
    return DiversityMetrics(
        topic_diversity=b.features["topic"].value,
        creator_diversity=b.features["creator"].value,
        format_diversity=b.features["format"].value,
        overall_diversity=b.weighted_average(neutral=NEUTRAL_SCORE),
    )
