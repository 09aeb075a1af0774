from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from swipe_core.factors import EngagementFactors, QualityFactors, RecencyFactors
from swipe_core.types import ClusterInfo, Interaction, InteractionKind

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def hours_ago(h: float) -> datetime:
    return NOW - timedelta(hours=h)


def make_interaction(
    entity_id: Any,
    kind: InteractionKind = InteractionKind.LIKE,
    *,
    age_h: float = 1.0,
    user_id: Any = 123,
    iid: str = "interaction-1",
    **extra: Any,
) -> Interaction:
    return Interaction(
        id=iid,
        user_id=user_id,
        entity_id=entity_id,
        entity_type="post",
        type=kind,
        timestamp=hours_ago(age_h),
        **extra,
    )


class ExplodingLogger:
    """Logger stand-in whose every call fails."""

    def log(self, *_, **__):
        raise RuntimeError("log sink down")


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def cluster() -> ClusterInfo:
    return ClusterInfo(
        id="cluster-456",
        name="Technology Cluster",
        centroid=[0.2] * 8,
        members=["post-1", "post-2", "post-3"],
        member_ids=["post-1", "post-2", "post-3"],
        radius=0.5,
        density=0.8,
        size=25,
        topics=["technology", "AI", "programming"],
        created_at=NOW - timedelta(days=3),
        updated_at=NOW,
    )


@pytest.fixture()
def interactions() -> list[Interaction]:
    return [
        make_interaction("post-1", InteractionKind.LIKE, age_h=1, iid="interaction-1"),
        make_interaction("post-2", InteractionKind.COMMENT, age_h=2, iid="interaction-2"),
        make_interaction("post-4", InteractionKind.SHARE, age_h=3, iid="interaction-3"),
    ]


@pytest.fixture()
def engagement_factors() -> EngagementFactors:
    return EngagementFactors(
        recency=RecencyFactors(
            half_life_hours={
                "partialView": 12,
                "completeView": 24,
                "like": 48,
                "likeComment": 48,
                "comment": 72,
                "share": 96,
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
        default_interaction_weights={
            "save": 3.5,
            "dislike": -0.5,
            "report": -1.0,
            "showLessOften": -0.6,
            "click": 0.3,
            "default": 0.3,
        },
        time_decay_factor=0.5,
        max_interactions_per_user=100,
        normalization_factor=1.0,
    )


@pytest.fixture()
def quality_factors() -> QualityFactors:
    return QualityFactors(
        cohesion_weight=0.25,
        size_weight=0.25,
        density_weight=0.25,
        stability_weight=0.25,
        min_optimal_size=10,
        max_optimal_size=50,
    )
