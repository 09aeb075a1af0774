from __future__ import annotations

import hashlib
from typing import Protocol

from swipe_core.types import ClusterInfo

PLACEHOLDER_COHESION = 0.7
PLACEHOLDER_DENSITY = 0.8
PLACEHOLDER_STABILITY = 0.5  # no temporal tracking yet
SIMULATED_DENSITY_RANGE = (0.6, 1.0)


class ClusterGeometryProvider(Protocol):
    def cohesion(self, cluster: ClusterInfo) -> float: ...

    def density(self, cluster: ClusterInfo) -> float: ...

    def stability(self, cluster: ClusterInfo) -> float: ...


def _unit_from_id(cluster_id: str) -> float:
    """Stable pseudo-random value in [0, 1) derived from the cluster id."""
    digest = hashlib.sha256(cluster_id.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") / 2**64


class PlaceholderGeometry:
    """
    Stand-in until cohesion/density/stability are computed from embeddings.

    A supplied density collapses to 0.8 whatever its value; this mirrors the
    current behavior and is pending product confirmation. Without a density
    the value is simulated in [0.6, 1.0], seeded by the cluster id so repeated
    calls agree.
    """

    def cohesion(self, cluster: ClusterInfo) -> float:
        return PLACEHOLDER_COHESION

    def density(self, cluster: ClusterInfo) -> float:
        if cluster.density is not None:
            return PLACEHOLDER_DENSITY
        lo, hi = SIMULATED_DENSITY_RANGE
        return lo + (hi - lo) * _unit_from_id(cluster.id)

    def stability(self, cluster: ClusterInfo) -> float:
        return PLACEHOLDER_STABILITY


DEFAULT_GEOMETRY = PlaceholderGeometry()
