from collections import Counter
from typing import Iterable

from swipe_core.types import Interaction, id_key


def most_recent(interactions: Iterable[Interaction], limit: int) -> list[Interaction]:
    """Newest first, truncated to limit. Stable: equal timestamps keep input order."""
    ordered = sorted(interactions, key=lambda it: it.timestamp, reverse=True)
    return ordered[: max(0, limit)]


def count_by_kind(interactions: Iterable[Interaction]) -> dict[str, int]:
    return dict(Counter(it.type.value for it in interactions))


def count_by_user(interactions: Iterable[Interaction]) -> dict[str, int]:
    return dict(Counter(id_key(it.user_id) for it in interactions))
