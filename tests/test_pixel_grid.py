"""
Tests for PixelGrid and the OpenCV backed image operations.
"""

import numpy as np
import pytest

from asciivid import PixelGrid
from asciivid import imaging


class TestPixelGrid:
    """Tests for PixelGrid construction and access."""

    def test_dimensions(self, gradient_grid):
        assert gradient_grid.width == 40
        assert gradient_grid.height == 20
        assert gradient_grid.aspect_ratio == 2.0
        assert gradient_grid.pixel(3, 2) == (18, 24, 128)

    def test_grayscale_expanded(self):
        grid = PixelGrid(np.full((2, 3), 77, dtype=np.uint8))
        assert grid.pixels.shape == (2, 3, 3)
        assert grid.pixel(2, 1) == (77, 77, 77)

    def test_alpha_dropped(self):
        grid = PixelGrid(np.full((2, 2, 4), 9, dtype=np.uint8))
        assert grid.pixels.shape == (2, 2, 3)

    def test_float_input_clipped(self):
        grid = PixelGrid(np.array([[[-10.0, 128.0, 300.0]]]))
        assert grid.pixel(0, 0) == (0, 128, 255)

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            PixelGrid(np.zeros((2, 2, 2), dtype=np.uint8))

    def test_immutable(self):
        """The grid owns a read-only copy of its pixels."""
        source = np.zeros((2, 2, 3), dtype=np.uint8)
        grid = PixelGrid(source)
        source[0, 0] = 255
        assert grid.pixel(0, 0) == (0, 0, 0)
        with pytest.raises(ValueError):
            grid.pixels[0, 0] = 1

    def test_from_bgr(self):
        bgr = np.array([[[1, 2, 3]]], dtype=np.uint8)
        assert PixelGrid.from_bgr(bgr).pixel(0, 0) == (3, 2, 1)

    def test_from_rows_and_equality(self):
        grid = PixelGrid.from_rows([[(1, 2, 3), (4, 5, 6)]])
        assert grid.width == 2 and grid.height == 1
        assert grid == PixelGrid(np.array([[[1, 2, 3], [4, 5, 6]]], dtype=np.uint8))
        assert grid != PixelGrid.filled(2, 1, (0, 0, 0))

    def test_repr(self):
        assert repr(PixelGrid.filled(4, 3, (0, 0, 0))) == "PixelGrid(width=4, height=3)"


class TestImaging:
    """Tests for resize, grayscale conversion and equalization."""

    def test_resize(self, gradient_grid):
        resized = imaging.resize(gradient_grid, 10, 5)
        assert (resized.width, resized.height) == (10, 5)

    def test_resize_same_size_returns_grid(self, gradient_grid):
        assert imaging.resize(gradient_grid, 40, 20) is gradient_grid

    def test_resize_uniform_color(self):
        grid = PixelGrid.filled(30, 20, (10, 100, 200))
        assert imaging.resize(grid, 7, 3) == PixelGrid.filled(7, 3, (10, 100, 200))

    def test_grayscale(self):
        gray = imaging.to_grayscale(PixelGrid.filled(2, 2, (255, 255, 255)))
        assert gray.shape == (2, 2)
        assert gray.dtype == np.uint8
        assert int(gray[0, 0]) == 255

    def test_equalize_spreads_range(self):
        """A low contrast image is stretched to the full range."""
        gray = np.tile(np.arange(100, 110, dtype=np.uint8), (4, 1))
        equalized = imaging.equalize_contrast(gray)
        assert int(equalized.min()) < 100
        assert int(equalized.max()) == 255
