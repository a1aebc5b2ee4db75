"""Brightness to character mapping."""

from __future__ import annotations

import numpy as np

# Character sets ordered from dark to bright (least to most ink)
ASCII_RAMP = " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"
ASCII_RAMP_SHORT = " .:-=+*#%@"


class GlyphMapper:
    """
    Map 8-bit brightness values to characters of a fixed ramp.

    The 256 entry lookup table is built once, so per-pixel mapping is a
    single index operation.
    """

    def __init__(self, ramp: str = ASCII_RAMP):
        """
        :param ramp: Characters ordered from least to most ink
        """
        if len(ramp) < 2:
            raise ValueError("Glyph ramp needs at least two characters")
        self.ramp = ramp
        last = len(ramp) - 1
        self._indices = [b * last // 255 for b in range(256)]
        self._table = [ramp[i] for i in self._indices]
        self._table_array = np.array(self._table, dtype="U1")

    def index_for_brightness(self, brightness: float) -> int:
        """Ramp position for a brightness value (clamped to 0-255)."""
        return self._indices[_clamp_byte(brightness)]

    def char_for_brightness(self, brightness: float) -> str:
        """Character for a brightness value (clamped to 0-255)."""
        return self._table[_clamp_byte(brightness)]

    def map_array(self, gray: np.ndarray) -> np.ndarray:
        """Map a 2D brightness array to a 2D array of characters."""
        indices = np.clip(np.asarray(gray), 0, 255).astype(np.uint8)
        return self._table_array[indices]

    def __len__(self) -> int:
        return len(self.ramp)


def _clamp_byte(value: float) -> int:
    value = int(value)
    if value < 0:
        return 0
    if value > 255:
        return 255
    return value


__all__ = ["ASCII_RAMP", "ASCII_RAMP_SHORT", "GlyphMapper"]
