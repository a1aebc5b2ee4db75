"""Video file source implementation.

This module provides VideoStream for reading video files frame by frame.
"""

from __future__ import annotations

import logging
from pathlib import Path

import cv2

from ..errors import SourceOpenError
from ..pixel_grid import PixelGrid
from .base import FrameSource, SourceMeta

logger = logging.getLogger(__name__)


class VideoStream(FrameSource):
    """Sequential video file playback.

    Frames are decoded in order with OpenCV and converted from BGR to RGB.
    Pacing is left to the caller, the stream never drops or skips frames.

    Example:
        stream = VideoStream('/path/to/video.mp4')
        stream.open()
        frame = stream.read_frame()
        stream.close()

    Attributes:
        path: Path of the video file
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize video stream.

        :param path: Path to video file
        """
        super().__init__()
        self.path = Path(path)
        self._cap: cv2.VideoCapture | None = None
        self._meta = SourceMeta()

    def open(self) -> None:
        """Open the video capture and read its properties."""
        if self._cap is not None and self._cap.isOpened():
            return

        if not self.path.exists():
            raise SourceOpenError(str(self.path), "file not found")

        cap = cv2.VideoCapture(str(self.path))
        if not cap.isOpened():
            cap.release()
            raise SourceOpenError(str(self.path), "cannot decode")

        self._cap = cap
        self._meta = SourceMeta(
            fps=float(cap.get(cv2.CAP_PROP_FPS) or 0.0),
            frame_count=max(0, int(cap.get(cv2.CAP_PROP_FRAME_COUNT))),
            width=int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        self._frames_read = 0
        self._opened = True
        logger.info(
            f"Opened {self.path.name}: {self._meta.width}x{self._meta.height} "
            f"@ {self._meta.fps:.2f}fps, {self._meta.frame_count} frames"
        )

    def close(self) -> None:
        """Release the video capture."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info(f"Closed {self.path.name} after {self._frames_read} frames")
        super().close()

    def read_frame(self) -> PixelGrid | None:
        """Decode the next frame, None at end of file or on decode failure."""
        if self._cap is None:
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None or frame.size == 0:
            return None
        self._frames_read += 1
        return PixelGrid.from_bgr(frame)

    def rewind(self) -> bool:
        """Seek back to the first frame (used for looping)."""
        if self._cap is None:
            return False
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
        self._frames_read = 0
        logger.debug(f"Rewound {self.path.name}")
        return True

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def meta(self) -> SourceMeta:
        return self._meta

    @property
    def name(self) -> str:
        return self.path.name
