"""core.image の `Image` をテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from shaderpass.core.image import Image


def test_image_flattens_and_freezes_pixels() -> None:
    arr = np.zeros((2, 3, 4), dtype=np.uint8)
    image = Image(width=3, height=2, pixels=arr)
    assert image.pixels.shape == (24,)
    assert image.pixels.dtype == np.uint8
    assert not image.pixels.flags.writeable
    # 呼び出し側の配列は凍結しない
    assert arr.flags.writeable


def test_image_rejects_length_mismatch() -> None:
    with pytest.raises(ValueError):
        Image(width=2, height=2, pixels=np.zeros(15, dtype=np.uint8))


def test_image_rejects_non_positive_dimensions() -> None:
    with pytest.raises(ValueError):
        Image(width=0, height=2, pixels=np.zeros(0, dtype=np.uint8))


def test_image_converts_float_input_to_float32() -> None:
    image = Image(width=1, height=1, pixels=np.array([0.0, 0.5, 1.0, 1.0], dtype=np.float64))
    assert image.is_float
    assert image.pixels.dtype == np.float32


def test_image_converts_integer_lists_to_uint8() -> None:
    image = Image(width=1, height=1, pixels=[255, 0, 0, 255])
    assert image.pixels.dtype == np.uint8
    assert image.pixels.tolist() == [255, 0, 0, 255]


def test_image_rejects_out_of_range_integers() -> None:
    with pytest.raises(ValueError):
        Image(width=1, height=1, pixels=[256, 0, 0, 255])


def test_image_array_roundtrip_keeps_row_order() -> None:
    arr = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
    image = Image.from_array(arr)
    assert (image.width, image.height) == (3, 2)
    assert np.array_equal(image.to_array(), arr)


def test_image_equality_compares_pixels() -> None:
    a = Image(width=1, height=1, pixels=[1, 2, 3, 4])
    b = Image(width=1, height=1, pixels=[1, 2, 3, 4])
    c = Image(width=1, height=1, pixels=[1, 2, 3, 5])
    assert a == b
    assert a != c
