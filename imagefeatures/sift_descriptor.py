"""SIFT keypoint records, parameters and the 128-bin gradient descriptor."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

PI = 3.14159

ORI_SIZE = 8
INDEX_SIZE = 4
VEC_LENGTH = INDEX_SIZE * INDEX_SIZE * ORI_SIZE


@dataclass
class SiftParameters:
    """Tuning parameters of SIFT detection, description and matching."""

    octave_max: int = 100000
    double_im_size: bool = False
    order: int = 3
    init_sigma: float = 1.6
    border_dist: int = 5
    scales: int = 3
    peak_thresh: float = 255.0 * 0.04 / 3.0
    edge_thresh: float = 0.06
    edge_thresh1: float = 0.08
    ori_bins: int = 36
    ori_sigma: float = 1.5
    ori_hist_thresh: float = 0.8
    max_index_val: float = 0.2
    mag_factor: int = 3
    index_sigma: float = 1.0
    ignore_grad_sign: bool = False
    match_ratio: float = 0.73
    match_x_radius: float = 1000000.0
    match_y_radius: float = 1000000.0
    noncorrectly_localized: int = 0


@dataclass(eq=False)
class Keypoint:
    """Position, scale, orientation and descriptor of a SIFT keypoint."""

    x: float
    y: float
    scale: float
    angle: float
    vec: np.ndarray = field(default_factory=lambda: np.zeros(VEC_LENGTH))


def normalize_vec(vec: np.ndarray) -> np.ndarray:
    """Scale a vector to unit Euclidean length."""
    array = np.asarray(vec, dtype=np.float64).ravel()
    length = math.sqrt(float(np.dot(array, array)))
    if length == 0.0:
        raise ValueError("cannot normalize a zero vector")
    return array / length


def _period(params: SiftParameters) -> float:
    return PI if params.ignore_grad_sign else 2.0 * PI


def _floor_index(values: np.ndarray) -> np.ndarray:
    # round down for non-negative values, one below truncation for negative ones
    return np.where(values >= 0.0, values, values - 1.0).astype(np.int64)


def _accumulate(
    index: np.ndarray,
    mag: np.ndarray,
    ori: np.ndarray,
    rx: np.ndarray,
    cx: np.ndarray,
    params: SiftParameters,
) -> None:
    oval = ORI_SIZE * ori / _period(params)
    ri = _floor_index(rx)
    ci = _floor_index(cx)
    oi = _floor_index(oval)
    rfrac = rx - ri
    cfrac = cx - ci
    ofrac = oval - oi

    for dr in (0, 1):
        rindex = ri + dr
        rvalid = (rindex >= 0) & (rindex < INDEX_SIZE)
        rweight = mag * ((1.0 - rfrac) if dr == 0 else rfrac)
        for dc in (0, 1):
            cindex = ci + dc
            valid = rvalid & (cindex >= 0) & (cindex < INDEX_SIZE)
            cweight = rweight * ((1.0 - cfrac) if dc == 0 else cfrac)
            for do in (0, 1):
                oindex = oi + do
                oindex = np.where(oindex >= ORI_SIZE, 0, oindex)
                weight = cweight * ((1.0 - ofrac) if do == 0 else ofrac)
                np.add.at(
                    index,
                    (rindex[valid], cindex[valid], oindex[valid]),
                    weight[valid],
                )


def place_in_index(
    index: np.ndarray,
    mag: float,
    ori: float,
    rx: float,
    cx: float,
    params: SiftParameters,
) -> None:
    """Spread one gradient sample over the 8 neighbouring bins of index, in place.

    index has shape (INDEX_SIZE, INDEX_SIZE, ORI_SIZE); (rx, cx) is the
    sample position in index coordinates and ori its relative orientation.
    """
    if np.shape(index) != (INDEX_SIZE, INDEX_SIZE, ORI_SIZE):
        raise ValueError("index has the wrong shape")
    oval = ORI_SIZE * ori / _period(params)
    ri = int(rx if rx >= 0.0 else rx - 1.0)
    oi = int(oval if oval >= 0.0 else oval - 1.0)
    rfrac = rx - ri
    if not (-1 <= ri < INDEX_SIZE and 0 <= oi <= ORI_SIZE and 0.0 <= rfrac <= 1.0):
        raise ValueError("sample lies outside the index")
    _accumulate(
        index,
        np.array([mag], dtype=np.float64),
        np.array([ori], dtype=np.float64),
        np.array([rx], dtype=np.float64),
        np.array([cx], dtype=np.float64),
        params,
    )


def _wrap_orientation(values: np.ndarray, period: float) -> np.ndarray:
    above = values > period
    values = np.where(above, values - period * np.ceil((values - period) / period), values)
    below = values < 0.0
    return np.where(below, values + period * np.ceil(-values / period), values)


def key_sample_vec(
    angle: float,
    grad: np.ndarray,
    ori: np.ndarray,
    scale: float,
    row: float,
    col: float,
    params: SiftParameters,
) -> np.ndarray:
    """Raw (unnormalized) 128-value descriptor around (row, col).

    grad and ori are gradient magnitude and orientation images indexed
    [row, column]; angle is the keypoint orientation in radians.
    """
    grad = np.asarray(grad, dtype=np.float64)
    ori = np.asarray(ori, dtype=np.float64)
    if grad.ndim != 2 or grad.shape != ori.shape:
        raise ValueError("grad and ori must be 2-D images of the same shape")
    spacing = scale * params.mag_factor
    if spacing <= 0.0:
        raise ValueError("scale and magnification factor must be positive")
    height, width = grad.shape

    irow = int(row + 0.5)
    icol = int(col + 0.5)
    sine = math.sin(angle)
    cosine = math.cos(angle)

    radius = 1.414 * spacing * (INDEX_SIZE + 1) / 2.0
    iradius = int(radius + 0.5)
    offsets = np.arange(-iradius, iradius + 1)
    ii, jj = np.meshgrid(offsets, offsets, indexing="ij")

    rpos = ((cosine * ii - sine * jj) - (row - irow)) / spacing
    cpos = ((sine * ii + cosine * jj) - (col - icol)) / spacing
    rx = rpos + INDEX_SIZE / 2.0 - 0.5
    cx = cpos + INDEX_SIZE / 2.0 - 0.5
    r = irow + ii
    c = icol + jj

    inside = (
        (rx > -1.0) & (rx < INDEX_SIZE) & (cx > -1.0) & (cx < INDEX_SIZE)
        & (r >= 0) & (r < height) & (c >= 0) & (c < width)
    )
    rpos, cpos, rx, cx = rpos[inside], cpos[inside], rx[inside], cx[inside]
    r, c = r[inside], c[inside]

    sigma = params.index_sigma * 0.5 * INDEX_SIZE
    weight = np.exp(-(rpos * rpos + cpos * cpos) / (2.0 * sigma * sigma))
    mag = weight * grad[r, c]
    relative = _wrap_orientation(ori[r, c] - angle, _period(params))

    index = np.zeros((INDEX_SIZE, INDEX_SIZE, ORI_SIZE))
    _accumulate(index, mag, relative, rx, cx, params)
    return index.ravel()


def make_keypoint(
    grad: np.ndarray,
    ori: np.ndarray,
    oct_size: float,
    oct_scale: float,
    oct_row: float,
    oct_col: float,
    angle: float,
    params: SiftParameters,
) -> Keypoint:
    """Build a keypoint with its quantized descriptor (values 0..255).

    The descriptor is normalized, clipped at max_index_val, renormalized
    and scaled by 512. A descriptor with no gradient at all stays zero.
    """
    vec = key_sample_vec(angle, grad, ori, oct_scale, oct_row, oct_col, params)
    if np.any(vec != 0.0):
        vec = normalize_vec(vec)
        if np.any(vec > params.max_index_val):
            vec = normalize_vec(np.minimum(vec, params.max_index_val))
        vec = np.minimum(255.0, np.trunc(512.0 * vec))
    return Keypoint(
        x=oct_size * oct_col,
        y=oct_size * oct_row,
        scale=oct_size * oct_scale,
        angle=angle,
        vec=vec,
    )