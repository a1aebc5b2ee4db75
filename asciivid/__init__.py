"""asciivid - play videos and camera feeds as colored ASCII art in the terminal."""

from .errors import InvalidSelectionError, SourceOpenError
from .pixel_grid import PixelGrid
from .ascii import (
    ColorCodec,
    ColorMode,
    FrameRenderer,
    GlyphMapper,
    PlayerConfig,
    RenderContext,
    RenderStyle,
    TerminalPlayer,
)
from .streams import CameraStream, FrameSource, GeneratorStream, VideoStream

__version__ = "1.0.0"

__all__ = [
    "PixelGrid",
    "SourceOpenError",
    "InvalidSelectionError",
    "ColorMode",
    "ColorCodec",
    "GlyphMapper",
    "RenderStyle",
    "RenderContext",
    "FrameRenderer",
    "PlayerConfig",
    "TerminalPlayer",
    "FrameSource",
    "VideoStream",
    "CameraStream",
    "GeneratorStream",
]
