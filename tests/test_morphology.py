import numpy as np

from camtrack.morphology import MorphologicalFilter, cross_element, diamond_element


def test_structuring_elements():
    np.testing.assert_array_equal(cross_element(1), [
        [0, 1, 0],
        [1, 1, 1],
        [0, 1, 0],
    ])
    np.testing.assert_array_equal(diamond_element(3), [
        [0, 0, 0, 1, 0, 0, 0],
        [0, 0, 1, 1, 1, 0, 0],
        [0, 1, 1, 1, 1, 1, 0],
        [1, 1, 1, 1, 1, 1, 1],
        [0, 1, 1, 1, 1, 1, 0],
        [0, 0, 1, 1, 1, 0, 0],
        [0, 0, 0, 1, 0, 0, 0],
    ])


def _blob(value=255):
    likelihood = np.zeros((100, 100), dtype=np.uint8)
    likelihood[40:60, 40:60] = value
    return likelihood


def test_apply_works_in_place():
    likelihood = _blob()
    out = MorphologicalFilter().apply(likelihood, None, 40, 3)
    assert out is likelihood


def test_threshold_is_strictly_above():
    f = MorphologicalFilter()
    assert not f.apply(_blob(40), None, 40, 3).any()
    out = f.apply(_blob(41), None, 40, 3)
    assert set(np.unique(out)) == {0, 255}


def test_mask_zeroes_excluded_pixels():
    mask = np.zeros((100, 100), dtype=np.uint8)
    assert not MorphologicalFilter().apply(_blob(), mask, 40, 3).any()


def test_speckle_removed():
    likelihood = np.zeros((100, 100), dtype=np.uint8)
    likelihood[10, 10] = 255
    likelihood[80, 30:32] = 255
    assert not MorphologicalFilter().apply(likelihood, None, 40, 3).any()


def test_blob_survives_and_grows():
    out = MorphologicalFilter().apply(_blob(), None, 40, 3)
    row = out[50]
    # erosion trims one pixel each side, the diamond dilation adds three back
    assert row[38] == 255 and row[37] == 0
    assert row[61] == 255 and row[62] == 0
    assert out[50, 50] == 255


def test_larger_median_kernel():
    out = MorphologicalFilter().apply(_blob(), None, 40, 7)
    assert out[50, 50] == 255
