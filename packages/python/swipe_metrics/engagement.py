"""
Engagement metrics for clusters.

Scores a user's recent, weighted affinity toward a cluster from the
interactions they had with its members. Each interaction contributes its kind
weight, halved for every half-life of age, and the sum is squashed into
[0, 1] around a neutral 0.5:

    score = 0.5 + 0.5 * tanh(sum(weight * decay * time_decay_factor) * normalization_factor)

Negative weights (dislike, report, showLessOften) pull the score below 0.5.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Sequence

from swipe_core.config import NEUTRAL_SCORE, NO_HISTORY_SCORE
from swipe_core.factors import EngagementFactors
from swipe_core.types import ClusterInfo, Interaction, InteractionKind, as_utc
from swipe_logging.logger import get_logger, safe_debug, safe_warning
from swipe_metrics.types import EngagementMetrics, clamp01
from swipe_signals.decay import age_hours, half_life_for, hdecay
from swipe_signals.reducers import count_by_kind, count_by_user, most_recent
from swipe_signals.weights import interaction_weight

log = get_logger(__name__)


def squash(raw_sum: float, normalization_factor: float) -> float:
    """Monotonic map of an unbounded sum into [0, 1]; 0 maps to 0.5."""
    x = raw_sum * normalization_factor
    if math.isnan(x):  # inf * 0
        return NEUTRAL_SCORE
    return clamp01(0.5 + 0.5 * math.tanh(x))


def interaction_contribution(
    interaction: Interaction,
    factors: EngagementFactors,
    now: datetime,
    logger: logging.Logger | None = log,
) -> float:
    kind = interaction.type
    if kind is InteractionKind.VIEW:
        safe_warning(logger, "unclassified view %s scored with raw view weight", interaction.id)

    weight = interaction_weight(kind, factors, logger)
    half_life = half_life_for(kind, factors.recency, logger)
    decay = hdecay(age_hours(interaction.timestamp, now), half_life)
    return weight * decay * factors.time_decay_factor


def calculate_engagement_score(
    cluster: ClusterInfo,
    interactions: Sequence[Interaction],
    factors: EngagementFactors,
    *,
    now: datetime,
    logger: logging.Logger | None = None,
) -> float:
    """
    Engagement score (0-1) of one user's interactions with a cluster.

    - 0.5 when the cluster has no members or there are no interactions
    - 0.4 when none of the interactions touch the cluster
    - otherwise the squashed, decayed, weighted sum over the most recent
      `max_interactions_per_user` relevant interactions
    """
    logger = logger or log
    now = as_utc(now)

    if not cluster.member_ids:
        return NEUTRAL_SCORE
    if not interactions:
        return NEUTRAL_SCORE

    relevant = cluster.relevant(interactions)
    if not relevant:
        return NO_HISTORY_SCORE

    # order matters: truncation keeps the newest
    kept = most_recent(relevant, factors.max_interactions_per_user)

    raw_sum = 0.0
    for it in kept:
        raw_sum += interaction_contribution(it, factors, now, logger)

    score = squash(raw_sum, factors.normalization_factor)
    safe_debug(
        logger,
        "cluster=%s relevant=%d kept=%d raw_sum=%.4f score=%.4f",
        cluster.id,
        len(relevant),
        len(kept),
        raw_sum,
        score,
    )
    return score


def calculate_detailed_engagement_metrics(
    cluster: ClusterInfo,
    interactions: Sequence[Interaction],
) -> EngagementMetrics:
    if not cluster.member_ids:
        return EngagementMetrics()

    relevant = cluster.relevant(interactions)
    total = len(relevant)
    per_user = count_by_user(relevant)
    unique_users = len(per_user)

    cluster_size = len(cluster.member_ids)
    engagement_rate = total / cluster_size if cluster_size > 0 else 0.0

    # users with more than one interaction count as returning
    returning = sum(1 for n in per_user.values() if n > 1)
    retention_rate = min(1.0, returning / unique_users) if unique_users > 0 else 0.0

    return EngagementMetrics(
        total_interactions=total,
        interactions_by_type=count_by_kind(relevant),
        engagement_rate=engagement_rate,
        retention_rate=retention_rate,
        unique_users=unique_users,
    )
