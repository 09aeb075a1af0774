from __future__ import annotations

from typing import Any

from swipe_core.types import Interaction, InteractionKind, InteractionMetadata

COMPLETE_VIEW_MIN_SECONDS = 30.0
COMPLETE_VIEW_MIN_FRACTION = 0.8


def determine_view_type(duration_seconds: float, percent_watched: float) -> InteractionKind:
    """
    Classify a view. Complete when watched for at least 30s OR at least 80%
    of the content (both thresholds inclusive), partial otherwise.
    """
    if duration_seconds >= COMPLETE_VIEW_MIN_SECONDS or percent_watched >= COMPLETE_VIEW_MIN_FRACTION:
        return InteractionKind.COMPLETE_VIEW
    return InteractionKind.PARTIAL_VIEW


def _with_metadata(base: Interaction, kind: InteractionKind, **fields: Any) -> Interaction:
    meta = base.metadata or InteractionMetadata()
    return base.model_copy(update={"type": kind, "metadata": meta.model_copy(update=fields)})


def process_view_interaction(
    base: Interaction, duration_seconds: float, percent_watched: float
) -> Interaction:
    view_type = determine_view_type(duration_seconds, percent_watched)
    return _with_metadata(
        base,
        view_type,
        duration_seconds=duration_seconds,
        watch_percentage=percent_watched,
        view_type=view_type,
    )


def process_comment_like_interaction(base: Interaction, comment_id: str) -> Interaction:
    return _with_metadata(
        base, InteractionKind.LIKE_COMMENT, comment_id=comment_id, target_type="comment"
    )


def process_save_interaction(base: Interaction, reason: str | None = None) -> Interaction:
    fields: dict[str, Any] = {"target_type": "content"}
    if reason is not None:
        fields["save_reason"] = reason
    return _with_metadata(base, InteractionKind.SAVE, **fields)


def _watched_fraction(meta: InteractionMetadata) -> float:
    # capture clients report either a 0-1 fraction or a 0-100 percentage
    v = meta.watch_percentage if meta.watch_percentage is not None else meta.percent_watched
    if v is None:
        return 0.0
    return v / 100.0 if v > 1.0 else v


def classify_interaction(raw: Interaction) -> Interaction:
    """Resolve raw views into partial/complete views; other kinds pass through."""
    if raw.type is not InteractionKind.VIEW:
        return raw
    meta = raw.metadata or InteractionMetadata()
    duration = meta.duration_seconds if meta.duration_seconds is not None else meta.engagement_time
    return process_view_interaction(raw, float(duration or 0.0), _watched_fraction(meta))
