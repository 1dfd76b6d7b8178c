"""Linear and non-linear filters on 2-D float images indexed [row, column]."""

from __future__ import annotations

import enum
import math

import numpy as np

from .signal import gauss

PI = 3.14159

# neighbour offsets (dx, dy) in the order the outlier test visits them
_NEIGHBOURS = [
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if dx != 0 or dy != 0
]


class Boundary(enum.IntEnum):
    """How values outside the image are obtained."""

    ZERO = 0
    SYMMETRIC = 1


def _as_image(image: np.ndarray) -> np.ndarray:
    array = np.array(image, dtype=np.float64)
    if array.ndim != 2:
        raise ValueError("image must be two-dimensional")
    return array


def _as_kernel(kernel: np.ndarray) -> np.ndarray:
    array = np.asarray(kernel, dtype=np.float64).ravel()
    if array.size == 0:
        raise ValueError("kernel is empty")
    return array


def directional_gauss_filter(xsigma: float, ysigma: float, angle: float) -> np.ndarray:
    """Normalized anisotropic 2-D Gaussian rotated by angle degrees."""
    if xsigma <= 0 or ysigma <= 0:
        raise ValueError("sigmas must be positive")
    ksize = int(2.0 * 2.0 * max(xsigma, ysigma) + 1.0)
    half = ksize // 2
    offsets = np.arange(-half, half + 1, dtype=np.float64)
    y, x = np.meshgrid(offsets, offsets, indexing="ij")
    a = angle * PI / 180.0
    sina, cosa = math.sin(a), math.cos(a)
    ax = x * cosa + y * sina
    ay = -x * sina + y * cosa
    kernel = np.exp(-(ax * ax) / (2.0 * xsigma * xsigma) - (ay * ay) / (2.0 * ysigma * ysigma))
    return kernel / kernel.sum()


def convol(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Correlate image with an odd-sized 2-D kernel; zero outside the image."""
    u = _as_image(image)
    k = np.asarray(kernel, dtype=np.float64)
    if k.ndim != 2:
        raise ValueError("kernel must be two-dimensional")
    kheight, kwidth = k.shape
    if kheight % 2 == 0 or kwidth % 2 == 0:
        raise ValueError("kernel dimensions must be odd")
    l2, k2 = kheight // 2, kwidth // 2
    height, width = u.shape
    padded = np.pad(u, ((l2, l2), (k2, k2)))
    out = np.zeros_like(u)
    for row in range(kheight):
        for col in range(kwidth):
            out += k[row, col] * padded[row:row + height, col:col + width]
    return out


def median_filter(image: np.ndarray, radius: float, niter: int) -> np.ndarray:
    """Iterated median over a disc of the given radius (upper median)."""
    u = _as_image(image)
    iradius = int(radius + 1.0)
    offsets = [
        (i, j)
        for i in range(-iradius, iradius + 1)
        for j in range(-iradius, iradius + 1)
        if i * i + j * j <= iradius * iradius
    ]
    height, width = u.shape
    for _ in range(niter):
        padded = np.pad(u, iradius, constant_values=np.nan)
        stack = np.stack(
            [
                padded[iradius + j:iradius + j + height, iradius + i:iradius + i + width]
                for i, j in offsets
            ]
        )
        stack.sort(axis=0)
        count = np.sum(~np.isnan(stack), axis=0)
        u = np.take_along_axis(stack, (count // 2)[None, :, :], axis=0)[0]
    return u


def remove_outliers(image: np.ndarray) -> np.ndarray:
    """Replace pixels above or below all 8 neighbours by the closest neighbour.

    Neighbour values are truncated to integers; border pixels are kept.
    """
    u = _as_image(image)
    height, width = u.shape
    out = u.copy()
    if height < 3 or width < 3:
        return out
    center = u[1:-1, 1:-1]
    neighbours = np.trunc(
        np.stack([u[1 + dy:height - 1 + dy, 1 + dx:width - 1 + dx] for dx, dy in _NEIGHBOURS])
    )
    count_max = np.sum(center > neighbours, axis=0)
    count_min = np.sum(center < neighbours, axis=0)
    closest = np.argmin(np.abs(neighbours - center), axis=0)
    green = np.take_along_axis(neighbours, closest[None, :, :], axis=0)[0]
    total = len(_NEIGHBOURS)
    outlier = (count_min == total) | (count_max == total)
    out[1:-1, 1:-1] = np.where(outlier, green, center)
    return out


def _boundary_indices(
    positions: np.ndarray, size: int, boundary: Boundary
) -> tuple[np.ndarray, np.ndarray]:
    if boundary is Boundary.ZERO:
        valid = (positions >= 0) & (positions < size)
        return np.clip(positions, 0, size - 1), valid
    period = 2 * size
    s = positions % period
    s = np.where(s >= size, period - 1 - s, s)
    return s, np.ones_like(positions, dtype=bool)


def _convolve_rows(u: np.ndarray, kernel: np.ndarray, boundary: Boundary) -> np.ndarray:
    width = u.shape[1]
    origin = kernel.size // 2
    x = np.arange(width)
    out = np.zeros_like(u)
    for i, weight in enumerate(kernel):
        index, valid = _boundary_indices(x - i + origin, width, boundary)
        out += weight * np.where(valid, u[:, index], 0.0)
    return out


def separable_convolution(
    image: np.ndarray,
    xkernel: np.ndarray,
    ykernel: np.ndarray,
    boundary: Boundary | int = Boundary.SYMMETRIC,
) -> np.ndarray:
    """Convolve along rows with xkernel then along columns with ykernel."""
    u = _as_image(image)
    mode = Boundary(boundary)
    tmp = _convolve_rows(u, _as_kernel(xkernel), mode)
    return _convolve_rows(tmp.T, _as_kernel(ykernel), mode).T.copy()


def buffer_convolution(buffer: np.ndarray, kernel: np.ndarray, size: int) -> np.ndarray:
    """First size values of the correlation of buffer with kernel."""
    buf = np.asarray(buffer, dtype=np.float64).ravel()
    k = _as_kernel(kernel)
    if size < 0 or buf.size < size + k.size - 1:
        raise ValueError("buffer is too short for this size and kernel")
    if size == 0:
        return np.zeros(0)
    windows = np.lib.stride_tricks.sliding_window_view(buf, k.size)[:size]
    return windows @ k


def _pad_rows(u: np.ndarray, half: int, boundary: Boundary) -> np.ndarray:
    if half > u.shape[1]:
        raise ValueError("kernel is too large for the image")
    if boundary is Boundary.SYMMETRIC:
        left = u[:, :half][:, ::-1]
        right = u[:, u.shape[1] - half:][:, ::-1]
    else:
        left = np.zeros((u.shape[0], half))
        right = np.zeros((u.shape[0], half))
    return np.hstack([left, u, right])


def horizontal_convolution(
    image: np.ndarray, kernel: np.ndarray, boundary: Boundary | int = Boundary.SYMMETRIC
) -> np.ndarray:
    """Correlate each row with a 1-D kernel, padding by symmetry or zeros."""
    u = _as_image(image)
    k = _as_kernel(kernel)
    width = u.shape[1]
    padded = _pad_rows(u, k.size // 2, Boundary(boundary))
    out = np.zeros_like(u)
    for offset, weight in enumerate(k):
        out += weight * padded[:, offset:offset + width]
    return out


def vertical_convolution(
    image: np.ndarray, kernel: np.ndarray, boundary: Boundary | int = Boundary.SYMMETRIC
) -> np.ndarray:
    """Correlate each column with a 1-D kernel, padding by symmetry or zeros."""
    u = _as_image(image)
    return horizontal_convolution(u.T, kernel, boundary).T.copy()


def fast_separable_convolution(
    image: np.ndarray,
    xkernel: np.ndarray,
    ykernel: np.ndarray,
    boundary: Boundary | int = Boundary.SYMMETRIC,
) -> np.ndarray:
    """Horizontal then vertical padded convolution."""
    rows = horizontal_convolution(image, xkernel, boundary)
    return vertical_convolution(rows, ykernel, boundary)


def gaussian_convolution(
    image: np.ndarray, sigma: float, ksize: int | None = None
) -> np.ndarray:
    """Gaussian blur with symmetric boundaries.

    Without ksize the kernel has the odd size ceil(8*sigma + 1) (rounded up).
    """
    if ksize is None:
        ksize = math.ceil(2.0 * 4.0 * sigma + 1.0)
        if ksize % 2 == 0:
            ksize += 1
    kernel = gauss(sigma, ksize)
    return fast_separable_convolution(image, kernel, kernel, Boundary.SYMMETRIC)


def heat(image: np.ndarray, step: float, niter: int, sigma: float) -> np.ndarray:
    """Explicit heat-equation iterations.

    With sigma > 0 the Laplacian is approximated by Gaussian blur minus the
    image; otherwise by the 5-point stencil with mirrored borders.
    """
    u = _as_image(image)
    kernel = gauss(sigma) if sigma > 0.0 else None
    if kernel is None and niter > 0 and min(u.shape) < 2:
        raise ValueError("image must be at least 2x2")
    for _ in range(niter):
        if kernel is not None:
            laplacian = separable_convolution(u, kernel, kernel, Boundary.SYMMETRIC) - u
        else:
            p = np.pad(u, 1, mode="reflect")
            laplacian = (
                -4.0 * u + p[1:-1, :-2] + p[1:-1, 2:] + p[:-2, 1:-1] + p[2:, 1:-1]
            )
        u = u + step * laplacian
    return u