"""Spline interpolation kernels and the inverse B-spline prefilter."""

from __future__ import annotations

import math

import numpy as np

_POLES: dict[int, tuple[float, ...]] = {
    2: (-0.17157288,),
    3: (-0.26794919,),
    4: (-0.361341, -0.0137254),
    5: (-0.430575, -0.0430963),
    6: (-0.488295, -0.0816793, -0.00141415),
    7: (-0.53528, -0.122555, -0.00914869),
    8: (-0.574687, -0.163035, -0.0236323, -0.000153821),
    9: (-0.607997, -0.201751, -0.0432226, -0.00212131),
    10: (-0.636551, -0.238183, -0.065727, -0.00752819, -0.0000169828),
    11: (-0.661266, -0.27218, -0.0897596, -0.0166696, -0.000510558),
}


def _init_causal(lines: np.ndarray, z: float) -> np.ndarray:
    n = lines.shape[1]
    k = np.arange(1, n - 1, dtype=np.float64)
    weights = np.power(z, k) + np.power(z, 2 * n - 2 - k)
    z_last = z ** (n - 1)
    total = lines[:, 0] + z_last * lines[:, n - 1] + lines[:, 1:n - 1] @ weights
    return total / (1.0 - z_last * z_last)


def _init_anticausal(lines: np.ndarray, z: float) -> np.ndarray:
    return (z / (z * z - 1.0)) * (z * lines[:, -2] + lines[:, -1])


def _invspline_lines(lines: np.ndarray, poles: tuple[float, ...]) -> None:
    """Apply the 1-D inverse spline filter to every row of lines, in place."""
    size = lines.shape[1]
    gain = 1.0
    for z in poles:
        gain *= (1.0 - z) * (1.0 - 1.0 / z)
    lines *= gain

    for z in poles:
        lines[:, 0] = _init_causal(lines, z)
        for n in range(1, size):
            lines[:, n] += z * lines[:, n - 1]
        lines[:, size - 1] = _init_anticausal(lines, z)
        for n in range(size - 2, -1, -1):
            lines[:, n] = z * (lines[:, n + 1] - lines[:, n])


def finvspline(image: np.ndarray, order: int) -> np.ndarray:
    """B-spline coefficients of the given order (2..11) interpolating image.

    image is a 2-D array indexed [row, column].
    """
    if order not in _POLES:
        raise ValueError("order should be in 2..11")
    data = np.array(image, dtype=np.float64)
    if data.ndim != 2:
        raise ValueError("image must be two-dimensional")
    if min(data.shape) < 2:
        raise ValueError("image must be at least 2x2")
    poles = _POLES[order][: order // 2]

    _invspline_lines(data, poles)
    columns = np.ascontiguousarray(data.T)
    _invspline_lines(columns, poles)
    return np.ascontiguousarray(columns.T)


def pixel_value(image: np.ndarray, x: int, y: int, bg: float) -> float:
    """Value at column x, row y, or bg outside the image."""
    height, width = np.shape(image)
    if x < 0 or x >= width or y < 0 or y >= height:
        return bg
    return float(image[y][x])


def keys(t: float, a: float) -> list[float]:
    """Coefficients of Keys' cubic interpolant at offsets t+1, t, t-1, t-2."""
    t2 = t * t
    at = a * t
    return [
        a * t2 * (1.0 - t),
        (2.0 * a + 3.0 - (a + 2.0) * t) * t2 - at,
        ((a + 2.0) * t - a - 3.0) * t2 + 1.0,
        a * (t - 2.0) * t2 + at,
    ]


def spline3(t: float) -> list[float]:
    """Coefficients of the cubic B-spline interpolant."""
    tmp = 1.0 - t
    return [
        0.1666666666 * t * t * t,
        0.6666666666 - 0.5 * tmp * tmp * (1.0 + t),
        0.6666666666 - 0.5 * t * t * (2.0 - t),
        0.1666666666 * tmp * tmp * tmp,
    ]


def init_splinen(n: int) -> list[float]:
    """Precomputed coefficients (n + 2 of them) for a spline of order n."""
    if n < 0:
        raise ValueError("order must be non-negative")
    first = 1.0 / math.factorial(n)
    coeffs = [first]
    for k in range(1, n + 2):
        coeffs.append(-coeffs[k - 1] * (n + 2 - k) / k)
    return coeffs


def ipow(x: float, n: int) -> float:
    """x to the non-negative integer power n by repeated squaring."""
    if n < 0:
        raise ValueError("exponent must be non-negative")
    result = 1.0
    while n:
        if n & 1:
            result *= x
        x *= x
        n >>= 1
    return result


def splinen(t: float, a: list[float], n: int) -> list[float]:
    """Coefficients (n + 1 of them) of the order-n B-spline interpolant."""
    if len(a) < n + 1:
        raise ValueError("not enough precomputed coefficients for this order")
    coeffs = [0.0] * (n + 1)
    for k in range(n + 2):
        xn = ipow(t + k, n)
        for i in range(k, n + 1):
            coeffs[i] += a[i - k] * xn
    return coeffs