"""
Quality metrics for clusters.

Intrinsic, user-independent quality of a cluster from its structure:
size against an optimal band, cohesion, density and stability. The four
sub-scores are combined with the configured weights and normalized by their
sum, so weights need not add up to 1.
"""

from __future__ import annotations

from swipe_core.config import NEUTRAL_SCORE
from swipe_core.factors import QualityFactors
from swipe_core.types import ClusterInfo
from swipe_metrics.geometry import DEFAULT_GEOMETRY, ClusterGeometryProvider
from swipe_metrics.types import QualityMetrics, ScoreBreakdown, clamp01

OVERSIZE_FLOOR = 0.3


def calculate_size_score(cluster: ClusterInfo, factors: QualityFactors) -> float:
    """
    1.0 inside [min_optimal_size, max_optimal_size]; a linear ramp from 0
    below it; above it a penalty that decays toward, but never reaches, 0.3.
    """
    size = cluster.size or 0
    lo, hi = factors.min_optimal_size, factors.max_optimal_size

    if lo <= size <= hi:
        return 1.0

    if size < lo:
        return clamp01(size / lo) if lo > 0 else 0.0

    over_ratio = (size - hi) / max(hi, 1)
    return OVERSIZE_FLOOR + (1.0 - OVERSIZE_FLOOR) / (1.0 + over_ratio)


def _breakdown(
    cluster: ClusterInfo,
    factors: QualityFactors,
    geometry: ClusterGeometryProvider,
) -> ScoreBreakdown:
    return ScoreBreakdown.weighted(
        {
            "size": (calculate_size_score(cluster, factors), factors.size_weight),
            "cohesion": (clamp01(geometry.cohesion(cluster)), factors.cohesion_weight),
            "density": (clamp01(geometry.density(cluster)), factors.density_weight),
            "stability": (clamp01(geometry.stability(cluster)), factors.stability_weight),
        }
    )


def calculate_quality_score(
    cluster: ClusterInfo,
    factors: QualityFactors,
    *,
    geometry: ClusterGeometryProvider | None = None,
) -> float:
    """Quality score (0-1); 0.5 when every weight is zero."""
    breakdown = _breakdown(cluster, factors, geometry or DEFAULT_GEOMETRY)
    return breakdown.weighted_average(neutral=NEUTRAL_SCORE)


def calculate_detailed_quality_metrics(
    cluster: ClusterInfo,
    factors: QualityFactors,
    *,
    geometry: ClusterGeometryProvider | None = None,
) -> QualityMetrics:
    breakdown = _breakdown(cluster, factors, geometry or DEFAULT_GEOMETRY)
    f = breakdown.features
    return QualityMetrics(
        size_score=f["size"].value,
        cohesion_score=f["cohesion"].value,
        density_score=f["density"].value,
        stability_score=f["stability"].value,
        overall_quality=breakdown.weighted_average(neutral=NEUTRAL_SCORE),
    )
