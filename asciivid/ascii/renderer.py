"""
ASCII Frame Renderer - Convert frames to colored terminal text.

Supports two rendering styles:
- Glyph style: brightness mapped characters, colored via foreground escapes
- Block style: spaces colored via background escapes (color modes only)

and three color modes (monochrome, 256-color, 24-bit true color).

Example:
    from asciivid import PixelGrid
    from asciivid.ascii import ColorMode, FrameRenderer, RenderContext

    context = RenderContext(color_mode=ColorMode.TRUE_COLOR)
    renderer = FrameRenderer(context)
    print(renderer.render(grid, 80, 24), end="")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import numpy as np

from .. import imaging
from ..pixel_grid import PixelGrid
from .color import RESET, ColorCodec, ColorMode
from .glyphs import GlyphMapper
from .terminal import get_terminal_size

# Terminal character cells are roughly 2.2 times taller than wide
CHAR_ASPECT = 2.2

# Auto-sized output is limited to this box
MAX_WIDTH = 120
MAX_HEIGHT = 40

# Columns / rows kept free for the status line when auto-sizing
MARGIN_X = 2
MARGIN_Y = 3


class RenderStyle(Enum):
    """How a pixel is drawn."""

    GLYPH = "glyph"  # Brightness mapped character, foreground color
    BLOCK = "block"  # Space with background color

    def toggled(self) -> "RenderStyle":
        return RenderStyle.BLOCK if self is RenderStyle.GLYPH else RenderStyle.GLYPH


@dataclass
class RenderContext:
    """
    Rendering state shared between the renderer and the playback controls.

    Holds the active color mode and style together with the color codec
    (and thus its caches and statistics), so rendering is fully determined
    by the context and the frame.
    """

    color_mode: ColorMode = ColorMode.MONO
    style: RenderStyle = RenderStyle.GLYPH
    codec: ColorCodec = field(default_factory=ColorCodec)
    glyphs: GlyphMapper = field(default_factory=GlyphMapper)
    char_aspect: float = CHAR_ASPECT
    max_width: int = MAX_WIDTH
    max_height: int = MAX_HEIGHT
    terminal_size: Callable[[], tuple[int, int]] = get_terminal_size

    def set_color_mode(self, mode: ColorMode) -> None:
        """Switch color mode, releasing the caches of the other modes."""
        if mode is not self.color_mode:
            self.color_mode = mode
            self.codec.activate(mode)

    def cycle_color_mode(self) -> ColorMode:
        self.set_color_mode(self.color_mode.next())
        return self.color_mode

    def toggle_style(self) -> RenderStyle:
        self.style = self.style.toggled()
        return self.style

    @property
    def effective_style(self) -> RenderStyle:
        """Style actually drawn: block style needs a color mode."""
        if self.style is RenderStyle.BLOCK and self.color_mode.is_color:
            return RenderStyle.BLOCK
        return RenderStyle.GLYPH

    @property
    def mode_label(self) -> str:
        """E.g. ``8BIT-BLOCK`` for the status line."""
        if self.effective_style is RenderStyle.BLOCK:
            return f"{self.color_mode.label}-BLOCK"
        return self.color_mode.label


def fit_to_box(
    source_width: int,
    source_height: int,
    box_width: int,
    box_height: int,
    char_aspect: float = CHAR_ASPECT,
) -> tuple[int, int]:
    """
    Largest output size (columns, rows) keeping the source aspect ratio.

    :param source_width: Frame width in pixels
    :param source_height: Frame height in pixels
    :param box_width: Maximum columns
    :param box_height: Maximum rows
    :param char_aspect: Character cell height / width
    :return: (columns, rows), each between 1 and the box size
    """
    box_width = max(1, int(box_width))
    box_height = max(1, int(box_height))
    if source_width <= 0 or source_height <= 0:
        return box_width, box_height

    # Columns per row that reproduce the source shape on screen
    ratio = source_width / source_height * char_aspect

    width = box_width
    height = int(box_width / ratio)
    if height > box_height:
        height = box_height
        width = int(box_height * ratio)

    width = min(box_width, max(1, width))
    height = min(box_height, max(1, height))
    return width, height


class FrameRenderer:
    """
    Render PixelGrids as terminal text.

    Color escapes are elided: an escape is only emitted when the resolved
    escape string differs from the one active in the current row, so runs of
    equal (or equally quantized) colors cost a single escape. Every colored
    row ends with a reset so no color state leaks past the row.
    """

    def __init__(self, context: RenderContext | None = None):
        """
        :param context: Render state (a fresh monochrome context if None)
        """
        self.context = context or RenderContext()

    def target_box(self, target_width: int = 0, target_height: int = 0) -> tuple[int, int]:
        """Box to fit the frame into, derived from the terminal if unset."""
        if target_width and target_height:
            return max(1, target_width), max(1, target_height)
        ctx = self.context
        columns, lines = ctx.terminal_size()
        width = max(1, min(columns - MARGIN_X, ctx.max_width))
        height = max(1, min(lines - MARGIN_Y, ctx.max_height))
        return width, height

    def output_size(
        self, grid: PixelGrid, target_width: int = 0, target_height: int = 0
    ) -> tuple[int, int]:
        """Columns and rows the grid is rendered at."""
        box_w, box_h = self.target_box(target_width, target_height)
        return fit_to_box(grid.width, grid.height, box_w, box_h, self.context.char_aspect)

    def render(self, grid: PixelGrid, target_width: int = 0, target_height: int = 0) -> str:
        """
        Resize a frame to fit the target box and render it.

        :param grid: Frame to render
        :param target_width: Maximum columns (0 = derive from terminal)
        :param target_height: Maximum rows (0 = derive from terminal)
        :return: Newline terminated rows, with ANSI escapes in color modes
        """
        if grid.width == 0 or grid.height == 0:
            return ""
        width, height = self.output_size(grid, target_width, target_height)
        return self.render_cells(imaging.resize(grid, width, height))

    def render_cells(self, grid: PixelGrid) -> str:
        """Render one character cell per pixel, without resizing."""
        ctx = self.context
        if ctx.color_mode is ColorMode.MONO:
            return self._render_mono(grid)
        return self._render_color(grid, background=ctx.effective_style is RenderStyle.BLOCK)

    def _render_mono(self, grid: PixelGrid) -> str:
        """Equalized grayscale glyphs, no escapes at all."""
        gray = imaging.equalize_contrast(imaging.to_grayscale(grid))
        chars = self.context.glyphs.map_array(gray)
        return "".join("".join(row) + "\n" for row in chars.tolist())

    def _render_color(self, grid: PixelGrid, background: bool) -> str:
        ctx = self.context
        mode = ctx.color_mode
        escape_for = ctx.codec.escape_for
        pixels = grid.pixels

        if background:
            glyph_rows = None
        else:
            rgb = pixels.astype(np.float64)
            luminance = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
            glyph_rows = ctx.glyphs.map_array(luminance.astype(np.int32)).tolist()

        out: list[str] = []
        for y, row in enumerate(pixels.tolist()):
            last_pixel = None
            last_code = ""
            glyph_row = glyph_rows[y] if glyph_rows is not None else None
            for x, pixel in enumerate(row):
                if pixel != last_pixel:
                    code = escape_for(mode, pixel[0], pixel[1], pixel[2], background)
                    if code != last_code:
                        out.append(code)
                        last_code = code
                    last_pixel = pixel
                out.append(" " if glyph_row is None else glyph_row[x])
            out.append(RESET)
            out.append("\n")
        return "".join(out)


__all__ = [
    "CHAR_ASPECT",
    "MAX_WIDTH",
    "MAX_HEIGHT",
    "RenderStyle",
    "RenderContext",
    "FrameRenderer",
    "fit_to_box",
]
