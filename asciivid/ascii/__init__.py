"""ASCII rendering and playback components.

This module provides terminal-based ASCII art rendering and video playback:
- GlyphMapper: Map brightness to characters of a fixed ramp
- ColorCodec: Memoized ANSI color escapes (256-color and true color)
- FrameRenderer: Convert frames to colored ASCII text
- TerminalPlayer: Interactive terminal video player with keyboard controls
"""

from .color import CacheStats, ColorCodec, ColorMode
from .glyphs import ASCII_RAMP, GlyphMapper
from .renderer import FrameRenderer, RenderContext, RenderStyle, fit_to_box
from .terminal import KeyboardHandler, TerminalGuard, get_terminal_size
from .terminal_player import (
    FramePacer,
    HelpOverlay,
    PlaybackController,
    PlaybackSession,
    PlaybackState,
    PlayerConfig,
    StatusLineRenderer,
    TerminalPlayer,
)

__all__ = [
    # Rendering
    "ASCII_RAMP",
    "GlyphMapper",
    "ColorMode",
    "ColorCodec",
    "CacheStats",
    "RenderStyle",
    "RenderContext",
    "FrameRenderer",
    "fit_to_box",
    # Terminal
    "KeyboardHandler",
    "TerminalGuard",
    "get_terminal_size",
    # Player
    "PlayerConfig",
    "TerminalPlayer",
    "PlaybackController",
    "PlaybackSession",
    "PlaybackState",
    "FramePacer",
    "StatusLineRenderer",
    "HelpOverlay",
]
