import math
import statistics

import numpy as np
import pytest

from imagefeatures import signal


def test_exp_lut_first_entries():
    lut = signal.fill_exp_lut(5)
    assert len(lut) == 5
    assert lut[0] == 1.0
    assert lut[3] == pytest.approx(math.exp(-3 / 1000.0))


def test_slut_exact_and_interpolated():
    lut = signal.fill_exp_lut(10)
    assert signal.slut(0.0, lut) == 1.0
    assert signal.slut(0.0005, lut) == pytest.approx((lut[0] + lut[1]) / 2)


def test_slut_beyond_lut_max_is_zero():
    lut = signal.fill_exp_lut(10)
    assert signal.slut(30.0, lut) == 0.0


def test_slut_rejects_negative():
    with pytest.raises(ValueError):
        signal.slut(-1.0, signal.fill_exp_lut(10))


def test_max_and_min_first_occurrence():
    assert signal.max_with_index([1.0, 3.0, 3.0, 2.0]) == (3.0, 1)
    assert signal.min_with_index([4.0, 0.5, 0.5, 2.0]) == (0.5, 1)


def test_max_empty_raises():
    with pytest.raises(ValueError):
        signal.max_with_index([])


def test_mean_and_var_match_statistics():
    data = [1.0, 2.0, 4.0, 7.0, 11.0]
    assert signal.mean(data) == pytest.approx(statistics.fmean(data))
    assert signal.var(data) == pytest.approx(statistics.pvariance(data))


@pytest.mark.parametrize("data", [[5.0, 1.0, 3.0], [4.0, 1.0, 3.0, 2.0], [7.0]])
def test_median_matches_statistics(data):
    assert signal.median(data) == pytest.approx(statistics.median(data))


def test_normalize_sums_to_one():
    result = signal.normalize([1.0, 2.0, 5.0])
    assert result.sum() == pytest.approx(1.0)
    assert result[2] / result[0] == pytest.approx(5.0)


def test_normalize_zero_sum_raises():
    with pytest.raises(ValueError):
        signal.normalize([1.0, -1.0])


def test_nearest():
    assert signal.nearest([1.0, 5.0, 9.0], 6.0) == (5.0, 1)


def test_binarize_plain_and_inverse():
    data = [1.0, 5.0, 9.0]
    assert list(signal.binarize(data, 5.0, False)) == [0.0, 255.0, 255.0]
    assert list(signal.binarize(data, 5.0, True)) == [255.0, 255.0, 0.0]


def test_gauss_default_kernel_is_normalized_and_symmetric():
    kernel = signal.gauss(1.5)
    assert len(kernel) % 2 == 1
    assert kernel.sum() == pytest.approx(1.0)
    assert np.allclose(kernel, kernel[::-1])
    assert int(np.argmax(kernel)) == len(kernel) // 2


def test_gauss_fixed_size():
    kernel = signal.gauss(2.0, size=7)
    assert len(kernel) == 7
    assert kernel.sum() == pytest.approx(1.0)
    assert list(signal.gauss(2.0, size=1)) == [1.0]


def test_sort_with_companions():
    values, companions = signal.sort_with_companions([3.0, 1.0, 2.0], [0, 1, 2])
    assert list(values) == [1.0, 2.0, 3.0]
    assert list(companions) == [1, 2, 0]


def test_sort_with_companions_length_mismatch():
    with pytest.raises(ValueError):
        signal.sort_with_companions([1.0, 2.0], [0])


def test_histogram_by_bins():
    data = [0.0, 1.0, 2.0, 3.0, 4.0]
    counts, bins, step = signal.histogram(data, bins=4)
    assert bins == 4
    assert step == pytest.approx(1.0)
    assert counts.sum() == len(data)
    assert counts[-1] == 2.0


def test_histogram_by_step():
    data = [0.0, 0.5, 1.0, 1.5, 2.0]
    counts, bins, step = signal.histogram(data, step=0.5)
    assert step == 0.5
    assert bins == 4
    assert counts.sum() == len(data)


def test_histogram_requires_exactly_one_mode():
    with pytest.raises(ValueError):
        signal.histogram([1.0, 2.0])
    with pytest.raises(ValueError):
        signal.histogram([1.0, 2.0], bins=2, step=0.5)