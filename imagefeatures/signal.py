"""Elementary operations on one-dimensional float signals."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

LUT_MAX = 30
LUT_PRECISION = 1000.0


def _as_vector(values: Sequence[float] | np.ndarray) -> np.ndarray:
    array = np.asarray(values, dtype=np.float64).ravel()
    if array.size == 0:
        raise ValueError("signal is empty")
    return array


def fill_exp_lut(size: int) -> np.ndarray:
    """Table of exp(-i / LUT_PRECISION) for i in range(size)."""
    if size < 0:
        raise ValueError("size must be non-negative")
    return np.exp(-np.arange(size, dtype=np.float64) / LUT_PRECISION)


def slut(dif: float, lut: Sequence[float] | np.ndarray) -> float:
    """Look up exp(-dif) in a table from fill_exp_lut, interpolating linearly."""
    if dif >= LUT_MAX:
        return 0.0
    if dif < 0:
        raise ValueError("dif must be non-negative")
    scaled = dif * LUT_PRECISION
    x = math.floor(scaled)
    if x + 1 >= len(lut):
        raise ValueError("lookup table is too short for this value")
    y1 = float(lut[x])
    y2 = float(lut[x + 1])
    return y1 + (y2 - y1) * (scaled - x)


def max_with_index(values: Sequence[float] | np.ndarray) -> tuple[float, int]:
    """Largest value and the index of its first occurrence."""
    array = _as_vector(values)
    index = int(np.argmax(array))
    return float(array[index]), index


def min_with_index(values: Sequence[float] | np.ndarray) -> tuple[float, int]:
    """Smallest value and the index of its first occurrence."""
    array = _as_vector(values)
    index = int(np.argmin(array))
    return float(array[index]), index


def mean(values: Sequence[float] | np.ndarray) -> float:
    """Arithmetic mean."""
    return float(_as_vector(values).mean())


def var(values: Sequence[float] | np.ndarray) -> float:
    """Population variance computed as E[u^2] - E[u]^2."""
    array = _as_vector(values)
    m = array.mean()
    m2 = (array * array).mean()
    return float(m2 - m * m)


def median(values: Sequence[float] | np.ndarray) -> float:
    """Median; the mean of the two middle values for an even length."""
    ordered = np.sort(_as_vector(values))
    size = ordered.size
    if size % 2 == 1:
        return float(ordered[size // 2])
    return float((ordered[size // 2] + ordered[size // 2 - 1]) / 2)


def normalize(values: Sequence[float] | np.ndarray) -> np.ndarray:
    """Divide by the sum of the values; raises ValueError if it is zero."""
    array = np.asarray(values, dtype=np.float64).ravel()
    total = array.sum()
    if total == 0.0:
        raise ValueError("normalization equals zero")
    return array / total


def nearest(values: Sequence[float] | np.ndarray, value: float) -> tuple[float, int]:
    """Element closest to value and its index (first one on ties)."""
    array = _as_vector(values)
    index = int(np.argmin(np.abs(value - array)))
    return float(array[index]), index


def binarize(
    values: Sequence[float] | np.ndarray, value: float, inverse: bool = False
) -> np.ndarray:
    """255 where values >= value (or <= value when inverse), 0 elsewhere."""
    array = np.asarray(values, dtype=np.float64)
    mask = array <= value if inverse else array >= value
    return np.where(mask, 255.0, 0.0)


def gauss(std: float, size: int | None = None) -> np.ndarray:
    """Normalized symmetric 1-D Gaussian kernel of standard deviation std.

    Without an explicit size the kernel covers the range where the
    Gaussian is above 1e-4 of its peak.
    """
    if size is None:
        prec = 4.0
        n = 1 + 2 * math.ceil(std * math.sqrt(prec * 2.0 * math.log(10.0)))
    else:
        n = size
    if n < 1:
        raise ValueError("kernel size must be positive")
    if n == 1:
        return np.ones(1)
    if std <= 0:
        raise ValueError("std must be positive")
    shift = 0.5 * (n - 1)
    positions = (np.arange(n, dtype=np.float64) - shift) / std
    kernel = np.exp(-0.5 * positions * positions)
    # enforce exact symmetry, mirroring the first half
    half = (n + 1) // 2
    kernel[n - half:] = kernel[:half][::-1]
    return normalize(kernel)


def sort_with_companions(
    values: Sequence[float] | np.ndarray, companions: Sequence[float] | np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """Sort values increasingly, moving companion elements along with them."""
    array = np.asarray(values, dtype=np.float64).ravel()
    other = np.asarray(companions).ravel()
    if array.size != other.size:
        raise ValueError("values and companions must have the same length")
    order = np.argsort(array, kind="stable")
    return array[order], other[order]


def histogram(
    values: Sequence[float] | np.ndarray,
    minimum: float | None = None,
    maximum: float | None = None,
    bins: int | None = None,
    step: float | None = None,
) -> tuple[np.ndarray, int, float]:
    """Histogram of values given either a number of bins or a bin width.

    Returns the counts, the number of bins and the bin width. Values
    outside the range go into the first or last bin.
    """
    if (bins is None) == (step is None):
        raise ValueError("give exactly one of bins or step")
    array = _as_vector(values)
    lo = float(array.min()) if minimum is None else float(minimum)
    hi = float(array.max()) if maximum is None else float(maximum)

    if bins is not None:
        num = int(bins)
        if num < 1:
            raise ValueError("bins must be positive")
        width = (hi - lo) / num
    else:
        width = float(step)
        if width <= 0:
            raise ValueError("step must be positive")
        num = int(0.5 + (hi - lo) / width)
        if num < 1:
            raise ValueError("range is too small for this step")

    counts = np.zeros(num)
    if width == 0.0:
        counts[0] = array.size
        return counts, num, width
    cells = np.floor((array - lo) / width).astype(np.int64)
    cells = np.clip(cells, 0, num - 1)
    np.add.at(counts, cells, 1.0)
    return counts, num, width