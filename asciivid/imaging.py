"""Image operations used by the renderer, backed by OpenCV."""

from __future__ import annotations

import cv2
import numpy as np

from .pixel_grid import PixelGrid


def resize(grid: PixelGrid, width: int, height: int) -> PixelGrid:
    """
    Resample a grid with an area-averaging filter.

    :param grid: Source frame
    :param width: Target width in pixels (at least 1)
    :param height: Target height in pixels (at least 1)
    :return: Resized frame (the same object if no resize is needed)
    """
    width = max(1, int(width))
    height = max(1, int(height))
    if grid.width == width and grid.height == height:
        return grid
    resized = cv2.resize(grid.pixels, (width, height), interpolation=cv2.INTER_AREA)
    return PixelGrid(resized)


def to_grayscale(grid: PixelGrid) -> np.ndarray:
    """Convert an RGB grid to a 2D uint8 luminance array."""
    return cv2.cvtColor(grid.pixels, cv2.COLOR_RGB2GRAY)


def equalize_contrast(gray: np.ndarray) -> np.ndarray:
    """Spread a grayscale array over the full 0-255 range (histogram equalization)."""
    return cv2.equalizeHist(np.ascontiguousarray(gray, dtype=np.uint8))


__all__ = ["resize", "to_grayscale", "equalize_contrast"]
