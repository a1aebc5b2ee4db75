"""Base frame source classes for asciivid.

This module defines the FrameSource abstract base class shared by video
files, cameras and callback driven generators, plus the SourceMeta record
describing a source.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from asciivid.pixel_grid import PixelGrid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceMeta:
    """Properties reported by a frame source.

    ``fps`` and ``frame_count`` are 0 when the source does not know them
    (live cameras, broken containers).
    """

    fps: float = 0.0
    frame_count: int = 0
    width: int = 0
    height: int = 0

    @property
    def duration(self) -> float:
        """Length in seconds, 0.0 if unknown."""
        if self.fps > 0 and self.frame_count > 0:
            return self.frame_count / self.fps
        return 0.0


class FrameSource(ABC):
    """Base class for all frame sources.

    Sources are pulled: the player calls read_frame() once per iteration
    and receives the next frame or None. A None result means end of stream
    for files and a dropped frame for live sources.

    Example:
        with VideoStream("movie.mp4") as source:
            while (frame := source.read_frame()) is not None:
                show(frame)
    """

    def __init__(self) -> None:
        self._opened: bool = False
        self._frames_read: int = 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @abstractmethod
    def open(self) -> None:
        """Open the underlying decoder.

        :raises SourceOpenError: If the source is unavailable
        """
        ...

    @abstractmethod
    def read_frame(self) -> "PixelGrid | None":
        """Read the next frame.

        :return: The frame, or None at end of stream / on read failure
        """
        ...

    def close(self) -> None:
        """Release the underlying decoder."""
        self._opened = False

    def rewind(self) -> bool:
        """Restart from the first frame.

        :return: True if the source supports rewinding
        """
        return False

    def __enter__(self) -> "FrameSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def meta(self) -> SourceMeta:
        """Frame rate, frame count and dimensions."""
        ...

    @property
    def is_opened(self) -> bool:
        return self._opened

    @property
    def is_live(self) -> bool:
        """Whether the source is a live feed (no pause, no progress)."""
        return False

    @property
    def frames_read(self) -> int:
        """Number of frames returned since open (or the last rewind)."""
        return self._frames_read

    @property
    def name(self) -> str:
        """Human readable source name for status output."""
        return type(self).__name__
