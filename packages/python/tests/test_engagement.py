import logging
import math
from datetime import datetime, timezone

import pytest

from swipe_core.factors import EngagementFactors, RecencyFactors
from swipe_core.types import Interaction, InteractionKind
from swipe_metrics.engagement import (
    calculate_detailed_engagement_metrics,
    calculate_engagement_score,
    squash,
)
from swipe_metrics.types import EngagementMetrics

from conftest import ExplodingLogger, make_interaction


def _score(cluster, interactions, factors, now, **kw):
    return calculate_engagement_score(cluster, interactions, factors, now=now, **kw)


# ---------- Neutral and no-history short-circuits ----------
def test_score_in_range_with_valid_data(cluster, interactions, engagement_factors, now):
    score = _score(cluster, interactions, engagement_factors, now)
    assert 0.0 <= score <= 1.0


def test_no_interactions_is_neutral(cluster, engagement_factors, now):
    assert _score(cluster, [], engagement_factors, now) == 0.5


@pytest.mark.parametrize("member_ids", [None, []])
def test_cluster_without_members_is_neutral(
    cluster, interactions, engagement_factors, now, member_ids
):
    empty = cluster.model_copy(update={"member_ids": member_ids})
    assert _score(empty, interactions, engagement_factors, now) == 0.5


def test_no_relevant_interactions_is_slightly_below_neutral(
    cluster, engagement_factors, now
):
    outside = [
        make_interaction("post-9", InteractionKind.SHARE, iid="a"),
        make_interaction("post-10", InteractionKind.LIKE, iid="b"),
    ]
    assert _score(cluster, outside, engagement_factors, now) == 0.4


# ---------- Scoring ----------
def test_only_member_like_counts(cluster, engagement_factors, now):
    like_member = make_interaction("post-1", InteractionKind.LIKE, age_h=1, iid="a")
    share_outside = make_interaction("post-99", InteractionKind.SHARE, age_h=3, iid="b")

    score = _score(cluster, [like_member, share_outside], engagement_factors, now)

    contribution = 2.0 * 0.5 ** (1 / 48) * 0.5
    assert score == pytest.approx(0.5 + 0.5 * math.tanh(contribution))
    assert 0.5 < score < 1.0
    assert score == _score(cluster, [like_member], engagement_factors, now)


MONO_FACTORS = [
    (0.5, 1.0),
    (1.0, 0.01),
    (1.0, 100.0),
    (0.01, 1.0),
    (10.0, 0.1),
    (0.0, 1.0),
]


def _mono_factors(tdf, nf):
    return EngagementFactors(
        recency=RecencyFactors(half_life_hours={"like": 48, "share": 96, "partialView": 24}),
        interaction_weights={"partialView": 0.5, "like": 2.0, "share": 4.0},
        time_decay_factor=tdf,
        normalization_factor=nf,
    )


@pytest.mark.parametrize("tdf,nf", MONO_FACTORS)
def test_recent_interaction_scores_at_least_as_high(cluster, now, tdf, nf):
    factors = _mono_factors(tdf, nf)
    recent = [make_interaction("post-1", InteractionKind.LIKE, age_h=1)]
    old = [make_interaction("post-1", InteractionKind.LIKE, age_h=200)]

    assert _score(cluster, recent, factors, now) >= _score(cluster, old, factors, now)


@pytest.mark.parametrize("tdf,nf", MONO_FACTORS)
def test_share_scores_at_least_partial_view(cluster, now, tdf, nf):
    factors = _mono_factors(tdf, nf)
    share = [make_interaction("post-2", InteractionKind.SHARE, age_h=5)]
    partial = [make_interaction("post-2", InteractionKind.PARTIAL_VIEW, age_h=5)]

    assert _score(cluster, share, factors, now) >= _score(cluster, partial, factors, now)


def test_negative_weights_pull_below_neutral(cluster, engagement_factors, now):
    reports = [
        make_interaction("post-1", InteractionKind.REPORT, iid="a"),
        make_interaction("post-2", InteractionKind.DISLIKE, iid="b"),
    ]
    score = _score(cluster, reports, engagement_factors, now)
    assert 0.0 <= score < 0.5


def test_truncation_keeps_newest(cluster, engagement_factors, now):
    # input order is oldest first; the scorer must sort before truncating
    interactions = [
        make_interaction("post-1", InteractionKind.SHARE, age_h=5, iid="old-share"),
        make_interaction("post-2", InteractionKind.DISLIKE, age_h=1, iid="new-dislike"),
    ]
    only_newest = engagement_factors.model_copy(update={"max_interactions_per_user": 1})

    assert _score(cluster, interactions, only_newest, now) < 0.5
    assert _score(cluster, interactions, engagement_factors, now) > 0.5


def test_unmapped_kind_uses_default_weight(cluster, engagement_factors, now):
    click = [make_interaction("post-1", InteractionKind.CLICK, age_h=0)]
    score = _score(cluster, click, engagement_factors, now)
    # click: 0.3 from the default table, half-life falls back to completeView
    assert score == pytest.approx(0.5 + 0.5 * math.tanh(0.3 * 0.5))


def test_missing_half_life_falls_back_and_warns(cluster, now, caplog):
    factors = EngagementFactors(
        interaction_weights={"like": 2.0},
        time_decay_factor=1.0,
        normalization_factor=1.0,
    )
    like = [make_interaction("post-1", InteractionKind.LIKE, age_h=48)]
    logger = logging.getLogger("tests.engagement")

    with caplog.at_level(logging.WARNING, logger="tests.engagement"):
        score = _score(cluster, like, factors, now, logger=logger)

    # default 48h half-life: one half-life old
    assert score == pytest.approx(0.5 + 0.5 * math.tanh(1.0))
    assert "no half-life configured for like" in caplog.text


def test_future_timestamp_counts_as_fresh(cluster, engagement_factors, now):
    future = [make_interaction("post-1", InteractionKind.LIKE, age_h=-10)]
    fresh = [make_interaction("post-1", InteractionKind.LIKE, age_h=0)]
    assert _score(cluster, future, engagement_factors, now) == _score(
        cluster, fresh, engagement_factors, now
    )


@pytest.mark.parametrize("weight", [1e300, -1e300, 0.0])
def test_adversarial_weights_stay_bounded(cluster, now, weight):
    factors = EngagementFactors(
        recency=RecencyFactors(half_life_hours={"like": 1}),
        interaction_weights={"like": weight},
        normalization_factor=1e6,
    )
    many = [make_interaction("post-1", InteractionKind.LIKE, iid=str(i)) for i in range(50)]
    assert 0.0 <= _score(cluster, many, factors, now) <= 1.0


def test_zero_normalization_with_overflowing_sum_is_neutral():
    assert squash(math.inf, 0.0) == 0.5


def test_big_integer_ids_match_exactly(cluster, engagement_factors, now):
    big = 2**70 + 1
    c = cluster.model_copy(update={"member_ids": [big]})
    hit = [make_interaction(big, InteractionKind.LIKE)]
    near_miss = [make_interaction(2**70, InteractionKind.LIKE)]

    assert _score(c, hit, engagement_factors, now) > 0.5
    assert _score(c, near_miss, engagement_factors, now) == 0.4


def test_string_and_int_ids_are_interchangeable(cluster, engagement_factors, now):
    c = cluster.model_copy(update={"member_ids": ["42"]})
    assert _score(c, [make_interaction(42)], engagement_factors, now) > 0.5


def test_scoring_is_idempotent(cluster, interactions, engagement_factors, now):
    first = _score(cluster, interactions, engagement_factors, now)
    assert _score(cluster, interactions, engagement_factors, now) == first
    assert [i.type for i in interactions] == [
        InteractionKind.LIKE,
        InteractionKind.COMMENT,
        InteractionKind.SHARE,
    ]


def test_broken_logger_never_aborts_scoring(cluster, now):
    factors = EngagementFactors(interaction_weights={"like": 2.0})
    like = [make_interaction("post-1", InteractionKind.LIKE)]
    score = _score(cluster, like, factors, now, logger=ExplodingLogger())
    assert 0.5 < score <= 1.0


# ---------- Naive timestamps ----------
def _naive_like(iid="naive", hour=11):
    return Interaction(
        id=iid,
        user_id=123,
        entity_id="post-1",
        type=InteractionKind.LIKE,
        timestamp=datetime(2025, 6, 1, hour, 0),
    )


def test_naive_timestamp_is_read_as_utc():
    assert _naive_like().timestamp.tzinfo == timezone.utc


def test_naive_and_aware_timestamps_score_alike(cluster, engagement_factors, now):
    aware = [make_interaction("post-1", InteractionKind.LIKE, age_h=1)]
    naive = [_naive_like()]
    assert _score(cluster, naive, engagement_factors, now) == pytest.approx(
        _score(cluster, aware, engagement_factors, now)
    )


def test_naive_now_is_read_as_utc(cluster, engagement_factors, now):
    like = [make_interaction("post-1", InteractionKind.LIKE, age_h=1)]
    naive_now = now.replace(tzinfo=None)
    assert _score(cluster, like, engagement_factors, naive_now) == pytest.approx(
        _score(cluster, like, engagement_factors, now)
    )


def test_mixed_timestamps_sort_before_truncation(cluster, engagement_factors, now):
    interactions = [
        _naive_like(iid="old-naive", hour=1),
        make_interaction("post-2", InteractionKind.DISLIKE, age_h=1, iid="new-aware"),
    ]
    only_newest = engagement_factors.model_copy(update={"max_interactions_per_user": 1})
    assert _score(cluster, interactions, only_newest, now) < 0.5


# ---------- Detailed metrics ----------
def test_detailed_metrics(cluster):
    interactions = [
        make_interaction("post-1", InteractionKind.LIKE, user_id=123, iid="a"),
        make_interaction("post-2", InteractionKind.COMMENT, user_id=123, iid="b"),
        make_interaction("post-3", InteractionKind.SAVE, user_id=456, iid="c"),
        make_interaction("post-77", InteractionKind.SHARE, user_id=789, iid="d"),
    ]
    m = calculate_detailed_engagement_metrics(cluster, interactions)

    assert m.total_interactions == 3
    assert m.interactions_by_type == {"like": 1, "comment": 1, "save": 1}
    assert m.unique_users == 2
    assert m.engagement_rate == pytest.approx(1.0)
    assert m.retention_rate == pytest.approx(0.5)


def test_detailed_metrics_without_members(cluster, interactions):
    empty = cluster.model_copy(update={"member_ids": None})
    assert calculate_detailed_engagement_metrics(empty, interactions) == EngagementMetrics()


def test_detailed_metrics_no_relevant_interactions(cluster):
    m = calculate_detailed_engagement_metrics(cluster, [make_interaction("post-9")])
    assert m.total_interactions == 0
    assert m.interactions_by_type == {}
    assert m.engagement_rate == 0.0
    assert m.retention_rate == 0.0
