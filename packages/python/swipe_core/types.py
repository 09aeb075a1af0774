from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Upstream ids are 64/128-bit integers or opaque strings. Python ints are
# arbitrary precision, so nothing here ever goes through float.
EntityId = int | str


def id_key(entity_id: EntityId) -> str:
    """Comparison key for ids: 123 and "123" name the same entity."""
    return str(entity_id)


def as_utc(ts: datetime | None) -> datetime | None:
    """Naive datetimes are taken to be UTC so every timestamp compares."""
    if ts is None or ts.tzinfo is not None:
        return ts
    return ts.replace(tzinfo=timezone.utc)


class InteractionKind(str, Enum):
    VIEW = "view"  # raw, must be classified before scoring
    PARTIAL_VIEW = "partialView"
    COMPLETE_VIEW = "completeView"
    LIKE = "like"
    LIKE_COMMENT = "likeComment"
    COMMENT = "comment"
    SHARE = "share"
    SAVE = "save"
    DISLIKE = "dislike"
    REPORT = "report"
    SHOW_LESS_OFTEN = "showLessOften"
    CLICK = "click"


class InteractionMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    engagement_time: float | None = None
    percent_watched: float | None = None
    duration_seconds: float | None = None
    watch_percentage: float | None = None  # 0-1
    view_type: InteractionKind | None = None
    comment_id: str | None = None
    target_type: str | None = None  # 'comment' | 'content'
    save_reason: str | None = None


class Interaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: EntityId
    entity_id: EntityId
    entity_type: str = "post"
    type: InteractionKind
    timestamp: datetime
    metadata: InteractionMetadata | None = None

    @field_validator("timestamp")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return as_utc(v)


class ClusterInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    centroid: list[float] = Field(default_factory=list)
    members: list[EntityId] = Field(default_factory=list)
    # authoritative membership for relevance filtering
    member_ids: list[EntityId] | None = None
    radius: float | None = None
    density: float | None = None
    size: int | None = None
    topics: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    def member_keys(self) -> set[str]:
        return {id_key(m) for m in self.member_ids or []}

    def relevant(self, interactions: Iterable[Interaction]) -> List[Interaction]:
        """Interactions whose entity belongs to this cluster, in input order."""
        keys = self.member_keys()
        return [it for it in interactions if id_key(it.entity_id) in keys]


class UserProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: EntityId
    interests: list[str] | None = None
