"""
Terminal Video Player - Interactive terminal-based video player.

Plays a video file or camera feed as colored ASCII art with keyboard
controls for pause, speed, color mode, render style and fullscreen.

Example:
    from asciivid.ascii import PlayerConfig, TerminalPlayer
    from asciivid.ascii.color import ColorMode

    # Simple usage
    player = TerminalPlayer("video.mp4")
    player.play()

    # With custom configuration
    config = PlayerConfig(source="video.mp4", color_mode=ColorMode.TRUE_COLOR, block=True)
    TerminalPlayer(config=config).play()

Controls:
    Space       - Play/Pause toggle (video only)
    Q / Escape  - Stop and exit
    + / -       - Speed control (x1.5 steps, 0.2x - 5x, video only)
    C           - Cycle color mode (mono, 256 colors, true color)
    B           - Toggle glyph / block style
    F           - Toggle fullscreen
    R           - Reset color caches
    S           - Toggle cache statistics
    H / ?       - Toggle help
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, TextIO

from blessed import Terminal

from ..pixel_grid import PixelGrid
from ..streams import CameraStream, FrameSource, VideoStream
from .color import RESET, ColorMode
from .renderer import CHAR_ASPECT, MAX_HEIGHT, MAX_WIDTH, FrameRenderer, RenderContext, RenderStyle
from .terminal import (
    CLEAR_SCREEN,
    CURSOR_HOME,
    ESC,
    KeyboardHandler,
    TerminalGuard,
    get_terminal_size,
)

logger = logging.getLogger(__name__)

# Speed control
SPEED_STEP = 1.5
MIN_SPEED = 0.2
MAX_SPEED = 5.0

# Frame rate assumed when the source reports none
DEFAULT_FPS = 30.0

# Fixed pacing of live sources (~33 ms)
CAMERA_INTERVAL = 1.0 / 30.0

# Camera output size used when no explicit size is given
CAMERA_SIZE = (80, 24)

# Rows/columns left free around the frame in fullscreen
FULLSCREEN_MARGIN_X = 2
FULLSCREEN_MARGIN_Y = 4


class PlaybackState(Enum):
    """Playback state machine."""

    PLAYING = "playing"
    PAUSED = "paused"
    TERMINATED = "terminated"


@dataclass
class PlayerConfig:
    """Configuration for TerminalPlayer."""

    # Video file path; None plays from the camera device instead
    source: str | None = None
    camera: int = 0

    # Output size in characters (0 = derive from terminal)
    width: int = 0
    height: int = 0

    loop: bool = False
    block: bool = False
    color_mode: ColorMode = ColorMode.MONO

    # Print source info and wait for Enter before playing
    show_info: bool = True

    max_width: int = MAX_WIDTH
    max_height: int = MAX_HEIGHT
    char_aspect: float = CHAR_ASPECT

    def __post_init__(self) -> None:
        self.width = max(0, int(self.width))
        self.height = max(0, int(self.height))
        if self.is_camera and not self.width and not self.height:
            self.width, self.height = CAMERA_SIZE

    @property
    def is_camera(self) -> bool:
        return self.source is None


@dataclass
class PlaybackSession:
    """Mutable playback state, created at playback start."""

    state: PlaybackState = PlaybackState.PLAYING
    speed: float = 1.0
    fullscreen: bool = False

    # Current output size (0 = derive from terminal)
    width: int = 0
    height: int = 0

    # Size requested at start, restored when leaving fullscreen
    requested_width: int = 0
    requested_height: int = 0

    frame_index: int = 0
    total_frames: int = 0

    show_stats: bool = False
    show_help: bool = False

    @classmethod
    def start(cls, width: int = 0, height: int = 0, total_frames: int = 0) -> "PlaybackSession":
        return cls(
            width=width,
            height=height,
            requested_width=width,
            requested_height=height,
            total_frames=total_frames,
        )

    @property
    def progress(self) -> int:
        """Progress in whole percent (0 if the frame count is unknown)."""
        if self.total_frames > 0:
            return self.frame_index * 100 // self.total_frames
        return 0


class PlaybackController:
    """
    Apply user commands to the playback session and render context.

    All state changes of a running player go through this class; the render
    loop only reads the resulting state.
    """

    def __init__(
        self,
        session: PlaybackSession,
        context: RenderContext,
        *,
        live: bool = False,
        terminal_size: Callable[[], tuple[int, int]] = get_terminal_size,
    ):
        """
        :param session: Session to mutate
        :param context: Render context (color mode, style, caches)
        :param live: Live source (no pause or speed control)
        :param terminal_size: Terminal size query used for fullscreen
        """
        self.session = session
        self.context = context
        self.live = live
        self._terminal_size = terminal_size

    @property
    def state(self) -> PlaybackState:
        return self.session.state

    @property
    def speed(self) -> float:
        return self.session.speed

    @property
    def is_paused(self) -> bool:
        return self.session.state is PlaybackState.PAUSED

    @property
    def is_terminated(self) -> bool:
        return self.session.state is PlaybackState.TERMINATED

    def quit(self) -> None:
        self.session.state = PlaybackState.TERMINATED

    def toggle_pause(self) -> None:
        """Swap playing and paused (ignored for live sources)."""
        if self.live:
            return
        if self.session.state is PlaybackState.PLAYING:
            self.session.state = PlaybackState.PAUSED
        elif self.session.state is PlaybackState.PAUSED:
            self.session.state = PlaybackState.PLAYING

    def set_speed(self, multiplier: float) -> None:
        """Set playback speed, clamped to the supported range."""
        self.session.speed = max(MIN_SPEED, min(MAX_SPEED, multiplier))

    def speed_up(self) -> None:
        if not self.live:
            self.set_speed(self.session.speed * SPEED_STEP)

    def speed_down(self) -> None:
        if not self.live:
            self.set_speed(self.session.speed / SPEED_STEP)

    def cycle_color_mode(self) -> ColorMode:
        mode = self.context.cycle_color_mode()
        logger.debug(f"Color mode -> {mode.label}")
        return mode

    def toggle_style(self) -> RenderStyle:
        return self.context.toggle_style()

    def toggle_fullscreen(self) -> None:
        """Fit the output to the whole terminal, or restore the requested size."""
        session = self.session
        session.fullscreen = not session.fullscreen
        if session.fullscreen:
            columns, lines = self._terminal_size()
            session.width = max(1, columns - FULLSCREEN_MARGIN_X)
            session.height = max(1, lines - FULLSCREEN_MARGIN_Y)
        else:
            session.width = session.requested_width
            session.height = session.requested_height

    def reset_cache(self) -> None:
        self.context.codec.reset()

    def toggle_stats(self) -> None:
        self.session.show_stats = not self.session.show_stats

    def toggle_help(self) -> None:
        self.session.show_help = not self.session.show_help

    def frame_interval(self, fps: float) -> float:
        """Seconds between two frames at the current speed."""
        if self.live:
            return CAMERA_INTERVAL
        base = 1.0 / fps if fps > 0 else 1.0 / DEFAULT_FPS
        return base / self.session.speed


class FramePacer:
    """Sleep away the rest of a frame interval since the last presented frame."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None

    def reset(self) -> None:
        self._last = self._clock()

    def wait(self, interval: float) -> float:
        """
        Block until ``interval`` seconds passed since the previous call.

        :return: Seconds slept
        """
        if self._last is None:
            self._last = self._clock()
            return 0.0
        remaining = interval - (self._clock() - self._last)
        slept = 0.0
        if remaining > 0:
            self._sleep(remaining)
            slept = remaining
        self._last = self._clock()
        return slept


class StatusLineRenderer:
    """Render the status and key hint lines below the frame."""

    VIDEO_HINTS = (
        "[Q]Quit [SPACE]Pause [+/-]Speed [C]Color [B]Block "
        "[F]Fullscreen [R]ClearCache [S]Stats [H]Help"
    )
    CAMERA_HINTS = "[Q]uit [C]olor [B]lock [F]ullscreen [S]tats [R]eset [H]elp"

    def render(self, controller: PlaybackController) -> str:
        session = controller.session
        context = controller.context
        stats = context.codec.stats

        mode = f"Mode: {context.mode_label}"
        if session.fullscreen:
            mode += " FULLSCREEN"
        cache = f"Cache: {stats.hit_rate:.1f}%"

        if controller.live:
            lines = [f"{mode} | {cache} | {self.CAMERA_HINTS}"]
        else:
            state = "PAUSED" if controller.is_paused else "PLAYING"
            lines = [
                f"[{state}] Frame: {session.frame_index}/{session.total_frames} "
                f"({session.progress}%) Speed: {session.speed:.1f}x {mode} | {cache}",
                self.VIDEO_HINTS,
            ]
        if session.show_stats:
            lines.append(
                f"Cache hits: {stats.hits} misses: {stats.misses} entries: {stats.entries}"
            )
        return "\n".join(lines)


class HelpOverlay:
    """Render a help overlay showing keyboard controls."""

    HELP_TEXT = """
╔══════════════════════════════════════════╗
║        ASCII Video Player - Help         ║
╠══════════════════════════════════════════╣
║  Space        Play / Pause               ║
║  Q / Escape   Stop and exit              ║
║  + / =        Speed up (x1.5)            ║
║  - / _        Slow down (/1.5)           ║
║  C            Cycle color mode           ║
║  B            Toggle block style         ║
║  F            Toggle fullscreen          ║
║  R            Reset color caches         ║
║  S            Toggle cache statistics    ║
║  H / ?        Toggle this help           ║
╚══════════════════════════════════════════╝
"""

    @classmethod
    def render(cls, term_w: int, term_h: int) -> str:
        """Render the help overlay centered on screen."""
        lines = cls.HELP_TEXT.strip().split("\n")
        box_width = max(len(line) for line in lines)

        start_y = max(1, (term_h - len(lines)) // 2)
        start_x = max(1, (term_w - box_width) // 2)

        output = []
        for i, line in enumerate(lines):
            output.append(f"{ESC}[{start_y + i};{start_x}H{line.ljust(box_width)}")
        output.append(RESET)
        return "".join(output)


class TerminalPlayer:
    """
    Interactive terminal player for video files and cameras.

    One thread polls the keyboard, reads a frame, renders it, writes the
    screen and sleeps for the rest of the frame interval, in that order.
    """

    def __init__(
        self,
        source: FrameSource | str | Path | None = None,
        *,
        config: PlayerConfig | None = None,
        context: RenderContext | None = None,
        terminal: Terminal | None = None,
        output: TextIO | None = None,
        input_fn: Callable[[str], str] = input,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        handle_signals: bool = True,
    ):
        """
        Initialize the terminal player.

        :param source: Frame source, video path, or None to use config.source
        :param config: Player configuration (defaults derived from source)
        :param context: Render context (created from config if None)
        :param terminal: blessed Terminal (created on play() if None)
        :param output: Output stream (default: sys.stdout)
        :param input_fn: Prompt function for the start screen
        :param clock: Monotonic clock in seconds
        :param sleep: Sleep function used for pacing
        :param handle_signals: Restore the terminal on SIGINT/SIGTERM/SIGQUIT
        """
        if config is None:
            if isinstance(source, (str, Path)):
                config = PlayerConfig(source=str(source))
            elif isinstance(source, FrameSource) and not source.is_live:
                config = PlayerConfig(source=source.name)
            else:
                config = PlayerConfig()
        self.config = config

        if isinstance(source, FrameSource):
            self.source = source
        elif isinstance(source, (str, Path)):
            self.source = VideoStream(source)
        elif config.is_camera:
            self.source = CameraStream(config.camera)
        else:
            self.source = VideoStream(config.source)

        if context is None:
            context = RenderContext(
                char_aspect=config.char_aspect,
                max_width=config.max_width,
                max_height=config.max_height,
            )
            context.set_color_mode(config.color_mode)
            if config.block:
                context.style = RenderStyle.BLOCK
        self.context = context
        self.renderer = FrameRenderer(context)

        self.output = output or sys.stdout
        self._terminal = terminal
        self._input = input_fn
        self._pacer = FramePacer(clock, sleep)
        self.handle_signals = handle_signals

        # Initialized in play()
        self.controller: PlaybackController | None = None
        self._keyboard: KeyboardHandler | None = None
        self._status = StatusLineRenderer()
        self._frame: PixelGrid | None = None

    @property
    def is_live(self) -> bool:
        return self.source.is_live

    def _setup_keyboard_bindings(self) -> None:
        """Set up keyboard bindings for the current source kind."""
        kb = self._keyboard
        ctl = self.controller
        if kb is None or ctl is None:
            return

        kb.bind_chars("qQ", ctl.quit)
        kb.bind("KEY_ESCAPE", ctl.quit)
        kb.bind_chars("cC", ctl.cycle_color_mode)
        kb.bind_chars("bB", ctl.toggle_style)
        kb.bind_chars("fF", ctl.toggle_fullscreen)
        kb.bind_chars("rR", ctl.reset_cache)
        kb.bind_chars("sS", ctl.toggle_stats)
        kb.bind_chars("hH?", ctl.toggle_help)

        if not self.is_live:
            kb.bind(" ", ctl.toggle_pause)
            kb.bind_chars("+=", ctl.speed_up)
            kb.bind_chars("-_", ctl.speed_down)

    def prepare(self, terminal: Terminal) -> None:
        """Create session, controller and key bindings for an opened source."""
        meta = self.source.meta
        session = PlaybackSession.start(
            width=self.config.width,
            height=self.config.height,
            total_frames=0 if self.is_live else meta.frame_count,
        )
        self.controller = PlaybackController(
            session,
            self.context,
            live=self.is_live,
            terminal_size=self.context.terminal_size,
        )
        self._keyboard = KeyboardHandler(terminal)
        self._setup_keyboard_bindings()
        self._frame = None
        self._pacer.reset()

    def show_info(self) -> None:
        """Print the source summary and wait for Enter."""
        meta = self.source.meta
        out = self.output
        if self.is_live:
            out.write(f"Camera feed started. Controls: {StatusLineRenderer.CAMERA_HINTS}\n")
            out.flush()
            return
        duration = meta.duration
        out.write(
            "Terminal Video Player\n"
            "============================================\n"
            "Video Info:\n"
            f"Resolution: {meta.width}x{meta.height}\n"
            f"FPS: {meta.fps:g}\n"
            f"Duration: {int(duration // 60)}:{int(duration) % 60:02d}\n"
            f"Frame Count: {meta.frame_count}\n"
            f"Color Mode: {self.context.color_mode.label}\n"
        )
        out.flush()
        self._input("Press Enter to start...")

    def play(self) -> bool:
        """
        Open the source and run the playback loop until quit or end of stream.

        :raises SourceOpenError: If the source cannot be opened (the loop is
            not entered and the terminal is left untouched)
        :return: True when playback ended normally
        """
        self.source.open()
        try:
            if self.config.show_info:
                self.show_info()

            terminal = self._terminal or Terminal()
            self._terminal = terminal
            self.prepare(terminal)

            with TerminalGuard(terminal, stream=self.output, handle_signals=self.handle_signals):
                try:
                    while self.step():
                        pass
                except KeyboardInterrupt:
                    self.controller.quit()
        finally:
            self.source.close()

        if not self.is_live:
            self.output.write("\n\nPlayback finished!\n")
            self.output.flush()
        logger.info(
            f"Playback of {self.source.name} ended, cache hit rate "
            f"{self.context.codec.stats.hit_rate:.1f}%"
        )
        return True

    def step(self) -> bool:
        """
        Run one loop iteration: input, frame, render, write, pace.

        :return: False once the session is terminated
        """
        ctl = self.controller
        if ctl is None or ctl.is_terminated:
            return False

        if self._keyboard is not None:
            self._keyboard.process(timeout=0)
        if ctl.is_terminated:
            return False

        session = ctl.session
        if not ctl.is_paused:
            frame = self._next_frame()
            if frame is None:
                if not self.is_live:
                    ctl.quit()
                    return False
                # Camera drop-out: keep polling, try again next iteration
                self._pacer.wait(ctl.frame_interval(self.source.meta.fps))
                return True
            self._frame = frame
            session.frame_index += 1

        if self._frame is not None:
            self.output.write(self.compose_screen(self._frame))
            self.output.flush()

        self._pacer.wait(ctl.frame_interval(self.source.meta.fps))
        return True

    def _next_frame(self) -> PixelGrid | None:
        frame = self.source.read_frame()
        if frame is None and self.config.loop and not self.is_live:
            if self.source.rewind():
                logger.debug(f"Looping {self.source.name}")
                self.controller.session.frame_index = 0
                frame = self.source.read_frame()
        return frame

    def compose_screen(self, frame: PixelGrid) -> str:
        """Clear screen, rendered frame, status line (and help) as one string."""
        ctl = self.controller
        session = ctl.session
        parts = [
            CLEAR_SCREEN,
            CURSOR_HOME,
            self.renderer.render(frame, session.width, session.height),
        ]
        if self.context.color_mode.is_color:
            parts.append(RESET)
        parts.append(self._status.render(ctl))
        if session.show_help:
            term_w, term_h = self.context.terminal_size()
            parts.append(HelpOverlay.render(term_w, term_h))
        return "".join(parts)


__all__ = [
    "PlaybackState",
    "PlayerConfig",
    "PlaybackSession",
    "PlaybackController",
    "FramePacer",
    "StatusLineRenderer",
    "HelpOverlay",
    "TerminalPlayer",
    "SPEED_STEP",
    "MIN_SPEED",
    "MAX_SPEED",
    "DEFAULT_FPS",
    "CAMERA_INTERVAL",
]
