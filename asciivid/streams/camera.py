"""Camera/webcam source implementation.

This module provides CameraStream for live camera capture.
"""

from __future__ import annotations

import logging

import cv2

from ..errors import SourceOpenError
from ..pixel_grid import PixelGrid
from .base import FrameSource, SourceMeta

logger = logging.getLogger(__name__)


class CameraStream(FrameSource):
    """Live camera/webcam capture.

    Unlike VideoStream, cameras have no frame count and a failed read is a
    transient drop-out rather than the end of the stream.

    Example:
        with CameraStream(0) as camera:
            frame = camera.read_frame()

    Attributes:
        device: Camera device index (0, 1, etc.)
    """

    def __init__(
        self,
        device: int = 0,
        *,
        width: int | None = None,
        height: int | None = None,
    ) -> None:
        """Initialize camera stream.

        :param device: Camera device index (0 = first camera)
        :param width: Requested capture width (None = camera default)
        :param height: Requested capture height (None = camera default)
        """
        super().__init__()
        self.device = device
        self._requested_width = width
        self._requested_height = height
        self._cap: cv2.VideoCapture | None = None
        self._meta = SourceMeta()
        self._dropped: int = 0

    def open(self) -> None:
        """Open the camera capture."""
        if self._cap is not None and self._cap.isOpened():
            return

        cap = cv2.VideoCapture(self.device)
        if not cap.isOpened():
            cap.release()
            raise SourceOpenError(self.device, "device unavailable")

        # Set requested resolution if specified
        if self._requested_width is not None:
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._requested_width)
        if self._requested_height is not None:
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._requested_height)

        self._cap = cap
        self._meta = SourceMeta(
            fps=float(cap.get(cv2.CAP_PROP_FPS) or 0.0),
            frame_count=0,
            width=int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        self._frames_read = 0
        self._dropped = 0
        self._opened = True
        logger.info(f"Opened camera {self.device}: {self._meta.width}x{self._meta.height}")

    def close(self) -> None:
        """Release the camera capture."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info(
                f"Closed camera {self.device} ({self._frames_read} frames, "
                f"{self._dropped} dropped)"
            )
        super().close()

    def read_frame(self) -> PixelGrid | None:
        """Grab the current camera image, None if the device dropped a frame."""
        if self._cap is None:
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None or frame.size == 0:
            self._dropped += 1
            logger.debug(f"Camera {self.device} dropped a frame")
            return None
        self._frames_read += 1
        return PixelGrid.from_bgr(frame)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def meta(self) -> SourceMeta:
        return self._meta

    @property
    def is_live(self) -> bool:
        """Cameras are live feeds."""
        return True

    @property
    def dropped_frames(self) -> int:
        return self._dropped

    @property
    def name(self) -> str:
        return f"Camera {self.device}"
