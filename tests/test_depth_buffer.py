"""Tests for the per-pixel depth buffer."""

import numpy as np
import pytest

from depth_buffer import DepthBuffer


def test_new_buffer_is_zeroed() -> None:
    buf = DepthBuffer(8, 4)
    assert buf.buffer.shape == (32,)
    assert buf.values.shape == (4, 8)
    assert not buf.buffer.any()


def test_clear_touches_only_its_region() -> None:
    """[x1, x2) x [y1, y2) is cleared, every other pixel keeps its value."""
    buf = DepthBuffer(8, 6)
    buf.buffer.fill(7.0)
    buf.clear(2, 1, 5, 4)

    expected = np.full((6, 8), 7.0, dtype=np.float32)
    expected[1:4, 2:5] = 0.0
    np.testing.assert_array_equal(buf.values, expected)
    assert buf.at(2, 1) == 0.0
    assert buf.at(5, 1) == 7.0
    assert buf.at(2, 4) == 7.0


def test_clear_is_clamped_to_screen() -> None:
    buf = DepthBuffer(4, 4)
    buf.buffer.fill(1.0)
    buf.clear(-3, -3, 2, 100, value=0.5)
    assert buf.at(0, 3) == 0.5
    assert buf.at(2, 0) == 1.0
    buf.clear(10, 10, 20, 20)  # entirely off screen
    assert buf.at(3, 3) == 1.0


def test_index_is_row_major() -> None:
    buf = DepthBuffer(10, 5)
    assert buf.index(3, 2) == 23


def test_clear_all() -> None:
    buf = DepthBuffer(3, 3)
    buf.clear_all(2.0)
    assert (buf.buffer == 2.0).all()


def test_invalid_size() -> None:
    with pytest.raises(ValueError):
        DepthBuffer(0, 10)
