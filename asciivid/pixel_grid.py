"""
PixelGrid - Immutable RGB frame passed from frame sources to the renderer.

Example:
    import numpy as np
    from asciivid import PixelGrid

    grid = PixelGrid(np.zeros((48, 64, 3), dtype=np.uint8))
    print(grid.width, grid.height)
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np


class PixelGrid:
    """
    Row-major grid of RGB triples backed by a read-only ``uint8`` array.

    Grayscale arrays are expanded to RGB and an alpha channel is dropped so
    that the renderer only ever sees ``(height, width, 3)`` data.
    """

    __slots__ = ("_pixels",)

    def __init__(self, pixels: np.ndarray):
        """
        Wrap an RGB pixel array.

        :param pixels: Array of shape (H, W), (H, W, 3) or (H, W, 4)
        """
        arr = np.asarray(pixels)
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        if arr.ndim == 2:
            arr = np.stack([arr, arr, arr], axis=-1)
        elif arr.ndim == 3 and arr.shape[2] == 4:
            arr = arr[:, :, :3]
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Unsupported pixel array shape: {arr.shape}")
        # Own a contiguous copy so callers can't mutate the frame behind our back
        arr = np.ascontiguousarray(arr).copy()
        arr.setflags(write=False)
        self._pixels = arr

    @classmethod
    def from_bgr(cls, pixels: np.ndarray) -> "PixelGrid":
        """Create a grid from an OpenCV style BGR array."""
        return cls(np.asarray(pixels)[:, :, 2::-1])

    @classmethod
    def filled(cls, width: int, height: int, rgb: Sequence[int]) -> "PixelGrid":
        """Create a grid of a single color."""
        arr = np.empty((height, width, 3), dtype=np.uint8)
        arr[:, :] = rgb
        return cls(arr)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Sequence[int]]]) -> "PixelGrid":
        """Create a grid from nested rows of RGB triples."""
        return cls(np.array([list(row) for row in rows], dtype=np.uint8))

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (H, W, 3) RGB array."""
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        if self.height == 0:
            return 1.0
        return self.width / self.height

    def pixel(self, x: int, y: int) -> tuple[int, int, int]:
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PixelGrid(width={self.width}, height={self.height})"


__all__ = ["PixelGrid"]
