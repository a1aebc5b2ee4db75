"""asciivid frame sources.

This package provides the sources the terminal player pulls frames from:

- FrameSource: Abstract base class for all frame sources
- VideoStream: Video file playback (OpenCV)
- CameraStream: Live camera/webcam capture (OpenCV)
- GeneratorStream: On-demand frame generation via callback

Example:
    from asciivid.streams import VideoStream

    with VideoStream('movie.mp4') as video:
        print(video.meta.fps, video.meta.frame_count)
        frame = video.read_frame()
"""

from .base import FrameSource, SourceMeta
from .video import VideoStream
from .camera import CameraStream
from .generator import GeneratorStream

__all__ = [
    "FrameSource",
    "SourceMeta",
    "VideoStream",
    "CameraStream",
    "GeneratorStream",
]
