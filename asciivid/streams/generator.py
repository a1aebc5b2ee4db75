"""Generator source implementation.

This module provides GeneratorStream for procedural/on-demand frame generation.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from ..pixel_grid import PixelGrid
from .base import FrameSource, SourceMeta

FrameHandler = Callable[[int], "PixelGrid | np.ndarray | None"]


class GeneratorStream(FrameSource):
    """Frame generation via a callback.

    The handler receives the zero based frame index and returns a
    PixelGrid, an RGB numpy array, or None to end the stream. With a
    non-zero frame_count the stream also ends after that many frames.

    Example:
        def render(index: int) -> np.ndarray:
            return make_gradient(64, 48, shift=index)

        stream = GeneratorStream(render, frame_count=100, fps=25.0)
    """

    def __init__(
        self,
        handler: FrameHandler,
        *,
        frame_count: int = 0,
        fps: float = 30.0,
        width: int = 0,
        height: int = 0,
        live: bool = False,
    ) -> None:
        """Initialize generator stream.

        :param handler: Callback producing the frame for an index
        :param frame_count: Number of frames (0 = unbounded)
        :param fps: Reported frame rate
        :param width: Reported frame width
        :param height: Reported frame height
        :param live: Report the source as a live feed (camera-like)
        """
        super().__init__()
        self._handler = handler
        self._meta = SourceMeta(fps=fps, frame_count=frame_count, width=width, height=height)
        self._live = live

    def open(self) -> None:
        self._frames_read = 0
        self._opened = True

    def read_frame(self) -> PixelGrid | None:
        if not self._opened:
            return None
        count = self._meta.frame_count
        if count > 0 and self._frames_read >= count:
            return None
        result = self._handler(self._frames_read)
        if result is None:
            return None
        self._frames_read += 1
        if isinstance(result, PixelGrid):
            return result
        return PixelGrid(result)

    def rewind(self) -> bool:
        self._frames_read = 0
        return True

    @property
    def meta(self) -> SourceMeta:
        return self._meta

    @property
    def is_live(self) -> bool:
        return self._live
