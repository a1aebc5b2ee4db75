"""
ANSI color escapes with per-mode memoization.

Building an escape string for every pixel of every frame is the dominant
cost of colored output. ColorCodec computes each distinct escape once and
serves repeats from a cache partitioned by color mode.

Example:
    codec = ColorCodec()
    fg = codec.escape_for(ColorMode.TRUE_COLOR, 255, 128, 0)
    bg = codec.escape_for(ColorMode.INDEXED_256, 255, 128, 0, background=True)
    print(f"{codec.stats.hit_rate:.1f}%")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

# ANSI escape codes
ESC = "\033"
RESET = f"{ESC}[0m"

FOREGROUND = 38
BACKGROUND = 48


class ColorMode(Enum):
    """Color fidelity of the rendered output."""

    MONO = "mono"
    INDEXED_256 = "indexed_256"
    TRUE_COLOR = "true_color"

    def next(self) -> "ColorMode":
        """Following mode in the Mono -> 256 -> 24-bit -> Mono cycle."""
        modes = list(ColorMode)
        return modes[(modes.index(self) + 1) % len(modes)]

    @property
    def label(self) -> str:
        """Short name for the status line."""
        return _LABELS[self]

    @property
    def is_color(self) -> bool:
        return self is not ColorMode.MONO


_LABELS = {
    ColorMode.MONO: "MONO",
    ColorMode.INDEXED_256: "8BIT",
    ColorMode.TRUE_COLOR: "24BIT",
}


@dataclass
class CacheStats:
    """Hit/miss counters of the escape cache."""

    hits: int = 0
    misses: int = 0
    entries: int = 0

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Hit rate in percent (0.0 before the first lookup)."""
        total = self.hits + self.misses
        return self.hits / total * 100.0 if total else 0.0

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.entries = 0


def rgb_to_256(r: int, g: int, b: int) -> int:
    """
    Quantize an RGB color to the xterm 256-color palette.

    Pure grays use the 24 step grayscale band starting at 232, everything
    else the 6x6x6 color cube starting at 16.
    """
    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return int((r - 8) / 247.0 * 24) + 232
    ir = int(r / 255.0 * 5)
    ig = int(g / 255.0 * 5)
    ib = int(b / 255.0 * 5)
    return 16 + 36 * ir + 6 * ig + ib


def pack_rgb(r: int, g: int, b: int) -> int:
    return (r << 16) | (g << 8) | b


class ColorCodec:
    """
    Convert RGB triples to ANSI escape sequences, memoized per color mode.

    - One cache partition per color mode, keyed by (r, g, b, background)
    - A mode independent RGB -> 256-color index memo
    - CacheStats counting escape lookups (hits and misses)

    Partitions of inactive modes are dropped by activate() to bound memory.
    """

    def __init__(self) -> None:
        self._caches: dict[ColorMode, dict[tuple[int, int, int, bool], str]] = {
            ColorMode.INDEXED_256: {},
            ColorMode.TRUE_COLOR: {},
        }
        self._index_cache: dict[int, int] = {}
        self._stats = CacheStats()

    def escape_for(
        self,
        mode: ColorMode,
        r: int,
        g: int,
        b: int,
        background: bool = False,
    ) -> str:
        """
        Escape sequence selecting the given color.

        :param mode: Color mode (MONO always yields an empty string)
        :param r: Red 0-255
        :param g: Green 0-255
        :param b: Blue 0-255
        :param background: Set the background instead of the foreground color
        :return: ANSI escape string
        """
        if mode is ColorMode.MONO:
            return ""

        key = (_clamp(r), _clamp(g), _clamp(b), bool(background))
        cache = self._caches[mode]
        code = cache.get(key)
        if code is not None:
            self._stats.hits += 1
            return code

        self._stats.misses += 1
        r, g, b, background = key
        layer = BACKGROUND if background else FOREGROUND
        if mode is ColorMode.INDEXED_256:
            code = f"{ESC}[{layer};5;{self.quantize_256(r, g, b)}m"
        else:
            code = f"{ESC}[{layer};2;{r};{g};{b}m"
        cache[key] = code
        self._update_entries()
        return code

    def quantize_256(self, r: int, g: int, b: int) -> int:
        """256-color palette index for an RGB color, memoized per exact RGB."""
        rgb_key = pack_rgb(_clamp(r), _clamp(g), _clamp(b))
        index = self._index_cache.get(rgb_key)
        if index is None:
            index = rgb_to_256(rgb_key >> 16, (rgb_key >> 8) & 0xFF, rgb_key & 0xFF)
            self._index_cache[rgb_key] = index
        return index

    def activate(self, mode: ColorMode) -> None:
        """
        Make ``mode`` the active mode and release caches nothing uses anymore.

        Partitions of all other modes are cleared. The index memo is only
        needed by the 256-color mode and is cleared when leaving it. Stats
        are kept.
        """
        dropped = 0
        for cache_mode, cache in self._caches.items():
            if cache_mode is not mode:
                dropped += len(cache)
                cache.clear()
        if mode is not ColorMode.INDEXED_256:
            dropped += len(self._index_cache)
            self._index_cache.clear()
        self._update_entries()
        logger.debug(f"Activated color mode {mode.label}, dropped {dropped} cached entries")

    def reset(self) -> None:
        """Clear every cache partition and zero the statistics."""
        for cache in self._caches.values():
            cache.clear()
        self._index_cache.clear()
        self._stats.reset()
        logger.debug("Color caches reset")

    def cache_size(self, mode: ColorMode | None = None) -> int:
        """Number of cached escapes for a mode (or all modes, index memo included)."""
        if mode is None:
            return sum(len(c) for c in self._caches.values()) + len(self._index_cache)
        return len(self._caches.get(mode, ()))

    @property
    def index_cache_size(self) -> int:
        return len(self._index_cache)

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def _update_entries(self) -> None:
        self._stats.entries = self.cache_size()


def _clamp(value: int) -> int:
    value = int(value)
    return 0 if value < 0 else 255 if value > 255 else value


__all__ = [
    "ESC",
    "RESET",
    "ColorMode",
    "CacheStats",
    "ColorCodec",
    "rgb_to_256",
    "pack_rgb",
]
