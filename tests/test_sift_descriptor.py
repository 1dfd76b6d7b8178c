import math

import numpy as np
import pytest

from imagefeatures.sift_descriptor import (
    INDEX_SIZE,
    ORI_SIZE,
    PI,
    VEC_LENGTH,
    Keypoint,
    SiftParameters,
    key_sample_vec,
    make_keypoint,
    normalize_vec,
    place_in_index,
)


def _empty_index():
    return np.zeros((INDEX_SIZE, INDEX_SIZE, ORI_SIZE))


def _uniform(value, shape=(40, 40)):
    return np.full(shape, float(value))


def test_normalize_vec_unit_length_and_direction():
    vec = np.array([3.0, 4.0, 0.0])
    result = normalize_vec(vec)
    assert np.linalg.norm(result) == pytest.approx(1.0)
    assert result == pytest.approx(vec / 5.0)


def test_normalize_vec_zero_raises():
    with pytest.raises(ValueError):
        normalize_vec(np.zeros(VEC_LENGTH))


def test_place_in_index_exact_position():
    index = _empty_index()
    place_in_index(index, 2.0, 0.0, 1.0, 2.0, SiftParameters())
    assert index[1, 2, 0] == pytest.approx(2.0)
    assert index.sum() == pytest.approx(2.0)


def test_place_in_index_splits_between_rows():
    index = _empty_index()
    place_in_index(index, 1.0, 0.0, 1.5, 2.0, SiftParameters())
    assert index[1, 2, 0] == pytest.approx(0.5)
    assert index[2, 2, 0] == pytest.approx(0.5)
    assert index.sum() == pytest.approx(1.0)


def test_place_in_index_drops_weight_outside():
    index = _empty_index()
    place_in_index(index, 1.0, 0.0, -0.5, 1.0, SiftParameters())
    assert index.sum() == pytest.approx(0.5)
    assert index[0, 1, 0] == pytest.approx(0.5)


def test_place_in_index_orientation_wraps_to_first_bin():
    index = _empty_index()
    ori = 2.0 * PI * 7.5 / ORI_SIZE
    place_in_index(index, 1.0, ori, 1.0, 1.0, SiftParameters())
    assert index[1, 1, 7] == pytest.approx(0.5)
    assert index[1, 1, 0] == pytest.approx(0.5)


def test_place_in_index_rejects_far_sample():
    with pytest.raises(ValueError):
        place_in_index(_empty_index(), 1.0, 0.0, -2.5, 1.0, SiftParameters())


def test_place_in_index_rejects_bad_shape():
    with pytest.raises(ValueError):
        place_in_index(np.zeros((2, 2, 2)), 1.0, 0.0, 1.0, 1.0, SiftParameters())


def test_key_sample_vec_zero_gradient():
    vec = key_sample_vec(0.0, _uniform(0.0), _uniform(0.0), 1.6, 20.0, 20.0, SiftParameters())
    assert vec.shape == (VEC_LENGTH,)
    assert not vec.any()


def test_key_sample_vec_aligned_gradient_fills_first_orientation_bin():
    vec = key_sample_vec(0.0, _uniform(1.0), _uniform(0.0), 1.6, 20.0, 20.0, SiftParameters())
    cube = vec.reshape(INDEX_SIZE, INDEX_SIZE, ORI_SIZE)
    assert np.all(cube[:, :, 0] > 0.0)
    assert np.allclose(cube[:, :, 1:], 0.0)


def test_key_sample_vec_is_rotation_relative():
    params = SiftParameters()
    base = key_sample_vec(0.0, _uniform(1.0), _uniform(0.0), 1.6, 20.0, 20.0, params)
    turned = key_sample_vec(
        PI / 2, _uniform(1.0), _uniform(PI / 2), 1.6, 20.0, 20.0, params
    )
    assert np.allclose(turned.reshape(4, 4, 8)[:, :, 1:], 0.0)
    assert turned.sum() == pytest.approx(base.sum(), rel=1e-6)


def test_key_sample_vec_symmetric_for_uniform_gradient():
    vec = key_sample_vec(0.0, _uniform(1.0), _uniform(0.0), 1.6, 20.0, 20.0, SiftParameters())
    plane = vec.reshape(INDEX_SIZE, INDEX_SIZE, ORI_SIZE)[:, :, 0]
    assert np.allclose(plane, plane[::-1, :])
    assert np.allclose(plane, plane[:, ::-1])


def test_key_sample_vec_ignore_grad_sign_folds_opposite_orientations():
    params = SiftParameters(ignore_grad_sign=True)
    forward = key_sample_vec(0.0, _uniform(1.0), _uniform(0.0), 1.6, 20.0, 20.0, params)
    backward = key_sample_vec(0.0, _uniform(1.0), _uniform(PI), 1.6, 20.0, 20.0, params)
    assert np.allclose(forward, backward)


def test_key_sample_vec_shape_mismatch_raises():
    with pytest.raises(ValueError):
        key_sample_vec(0.0, _uniform(1.0), _uniform(0.0, (30, 30)), 1.6, 20.0, 20.0, SiftParameters())


def test_make_keypoint_position_and_descriptor():
    rng = np.random.default_rng(3)
    grad = rng.uniform(0.0, 10.0, (40, 40))
    ori = rng.uniform(-math.pi, math.pi, (40, 40))
    key = make_keypoint(grad, ori, 2.0, 1.6, 20.0, 18.0, 0.3, SiftParameters())
    assert isinstance(key, Keypoint)
    assert key.x == pytest.approx(36.0)
    assert key.y == pytest.approx(40.0)
    assert key.scale == pytest.approx(3.2)
    assert key.angle == pytest.approx(0.3)
    assert key.vec.shape == (VEC_LENGTH,)
    assert np.all(key.vec >= 0.0) and np.all(key.vec <= 255.0)
    assert np.all(key.vec == np.trunc(key.vec))
    assert key.vec.sum() > 0.0


def test_make_keypoint_zero_gradient_gives_zero_descriptor():
    key = make_keypoint(_uniform(0.0), _uniform(0.0), 1.0, 1.6, 20.0, 20.0, 0.0, SiftParameters())
    assert not key.vec.any()
    assert key.x == pytest.approx(20.0)