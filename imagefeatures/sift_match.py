"""Nearest-neighbour matching of SIFT keypoints by descriptor distance."""

from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np

from .sift_descriptor import Keypoint, SiftParameters

_FAR = 1000000000000.0
_USHORT_RANGE = 65536

Distance = Callable[[Keypoint, Keypoint, float, SiftParameters], float]


def _within_radius(k1: Keypoint, k2: Keypoint, params: SiftParameters) -> bool:
    return (
        abs(k1.x - k2.x) <= params.match_x_radius
        and abs(k1.y - k2.y) <= params.match_y_radius
    )


def _as_ushort(vec: np.ndarray) -> np.ndarray:
    return np.trunc(np.asarray(vec, dtype=np.float64)).astype(np.int64) % _USHORT_RANGE


def dist_squared(
    k1: Keypoint, k2: Keypoint, tdist: float, params: SiftParameters
) -> float:
    """Squared Euclidean distance between descriptors.

    Summation stops as soon as the partial sum exceeds tdist, and that
    partial sum is returned. Keypoints farther apart than the match radii
    give tdist itself.
    """
    if not _within_radius(k1, k2, params):
        return tdist
    if tdist < 0:
        return 0.0
    diff = np.asarray(k1.vec, dtype=np.float64) - np.asarray(k2.vec, dtype=np.float64)
    if diff.size == 0:
        return 0.0
    partial = np.cumsum(diff * diff)
    over = np.nonzero(partial > tdist)[0]
    return float(partial[over[0]] if over.size else partial[-1])


def dist_l1(k1: Keypoint, k2: Keypoint, tdist: float, params: SiftParameters) -> float:
    """L1 distance between descriptors taken as 16-bit unsigned integers.

    Keypoints farther apart than the match radii give tdist itself.
    """
    if not _within_radius(k1, k2, params):
        return tdist
    a = _as_ushort(k1.vec)
    b = _as_ushort(k2.vec)
    return float(int(np.abs(a - b).sum()) % _USHORT_RANGE)


def _best_two(
    key: Keypoint,
    klist: Sequence[Keypoint],
    params: SiftParameters,
    distance: Distance,
) -> tuple[float, int | None]:
    best_dist = second_dist = _FAR
    best: int | None = None
    for j, candidate in enumerate(klist):
        dsq = distance(key, candidate, second_dist, params)
        if dsq < best_dist:
            second_dist = best_dist
            best_dist = dsq
            best = j
        elif dsq < second_dist:
            second_dist = dsq
    if second_dist == 0.0:
        return math.nan, best
    return best_dist / second_dist, best


def check_for_match(
    key: Keypoint, klist: Sequence[Keypoint], params: SiftParameters
) -> tuple[float, int | None]:
    """Ratio of the closest to the second closest L1 distance, and the index
    of the closest keypoint in klist (None if no candidate was in range)."""
    return _best_two(key, klist, params, dist_l1)


def compute_sift_matches(
    keys1: Sequence[Keypoint],
    keys2: Sequence[Keypoint],
    params: SiftParameters | None = None,
) -> list[tuple[Keypoint, Keypoint]]:
    """Pairs (k1, k2) where k2 is the clear nearest neighbour of k1.

    A match is kept when the distance ratio is below match_ratio squared.
    """
    if params is None:
        params = SiftParameters()
    threshold = params.match_ratio * params.match_ratio
    matches: list[tuple[Keypoint, Keypoint]] = []
    for key in keys1:
        ratio, best = check_for_match(key, keys2, params)
        if best is not None and ratio < threshold:
            matches.append((key, keys2[best]))
    return matches