"""
Command line entry point.

Usage:
    asciivid video.mp4 [--color|-c] [--truecolor|-t] [--width N|-w N]
                       [--height N|-h N] [--loop|-l] [--block|-b]
    asciivid --camera 0 --truecolor
    asciivid                      # interactive menu

Exit codes: 0 on normal completion or quit, 1 if the source cannot be
opened or an invalid menu choice was made.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Sequence, TextIO

from .ascii.color import ColorMode
from .ascii.terminal_player import PlayerConfig, TerminalPlayer
from .errors import InvalidSelectionError, SourceOpenError

logger = logging.getLogger(__name__)

COLOR_CHOICES = {
    "1": ColorMode.MONO,
    "2": ColorMode.INDEXED_256,
    "3": ColorMode.TRUE_COLOR,
}


def build_parser() -> argparse.ArgumentParser:
    # -h is the output height, so help is only available as --help
    parser = argparse.ArgumentParser(
        prog="asciivid",
        description="Terminal Video Player - Watch videos in colored ASCII art!",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        epilog="""
Controls:
  Space  Play/Pause          + / -  Speed up / down
  C      Cycle color mode    B      Toggle block style
  F      Toggle fullscreen   R      Reset color caches
  S      Cache statistics    Q/Esc  Quit

Examples:
  asciivid video.mp4                   # Monochrome, size from terminal
  asciivid video.mp4 -t -b             # True color blocks
  asciivid video.mp4 -c -w 100 -h 30   # 256 colors, 100x30 characters
  asciivid --camera 0 -t               # Webcam in true color
  asciivid                             # Interactive menu
        """,
    )
    parser.add_argument("path", nargs="?", help="Video file to play")
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument(
        "--color", "-c", action="store_true", help="256-color output (8-bit)"
    )
    parser.add_argument(
        "--truecolor", "-t", action="store_true", help="24-bit true color output"
    )
    parser.add_argument(
        "--width", "-w", type=int, default=0, help="Output width in characters (default: terminal)"
    )
    parser.add_argument(
        "--height", "-h", type=int, default=0, help="Output height in lines (default: terminal)"
    )
    parser.add_argument(
        "--loop", "-l", action="store_true", help="Restart the video when it ends"
    )
    parser.add_argument(
        "--block", "-b", action="store_true", help="Render colored blocks instead of characters"
    )
    parser.add_argument(
        "--camera", type=int, default=None, metavar="DEVICE", help="Play from a camera device"
    )
    parser.add_argument(
        "--skip-info", action="store_true", help="Start playing without the video info screen"
    )
    parser.add_argument("--log-file", default=None, help="Write log messages to this file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    return parser


def configure_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Send log records to a file, or stderr if none is given."""
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(fmt))
        root = logging.getLogger()
        root.addHandler(handler)
        root.setLevel(level)
    else:
        logging.basicConfig(level=level, format=fmt)


def config_from_args(args: argparse.Namespace) -> PlayerConfig:
    """Build a player config from parsed command line arguments."""
    color_mode = ColorMode.MONO
    if args.truecolor:
        color_mode = ColorMode.TRUE_COLOR
    elif args.color:
        color_mode = ColorMode.INDEXED_256

    return PlayerConfig(
        source=None if args.camera is not None else args.path,
        camera=args.camera or 0,
        width=args.width,
        height=args.height,
        loop=args.loop,
        block=args.block,
        color_mode=color_mode,
        show_info=not args.skip_info,
    )


def config_from_interactive(
    input_fn: Callable[[str], str] = input,
    out: TextIO | None = None,
) -> PlayerConfig:
    """
    Ask the user for a source and color mode.

    :param input_fn: Prompt function (defaults to input())
    :param out: Stream for menu text (default: sys.stdout)
    :raises InvalidSelectionError: For a source choice other than 1 or 2
    """
    out = out or sys.stdout
    out.write(
        "ASCII Video Player with Color Support\n"
        "====================================\n"
        "1. Play video file\n"
        "2. Play from camera\n"
    )
    out.flush()
    choice = input_fn("Choice (1/2): ").strip()

    if choice == "1":
        path = input_fn("Enter video file path: ").strip()
        loop_answer = input_fn("Enable auto-loop? (y/n): ").strip().lower()
        out.write(
            "Color mode:\n"
            "1. Monochrome\n"
            "2. 8-bit color (256 colors)\n"
            "3. 24-bit color (true color)\n"
        )
        out.flush()
        color = _color_choice(input_fn("Choice (1/2/3): "))
        return PlayerConfig(source=path, loop=loop_answer.startswith("y"), color_mode=color)

    if choice == "2":
        color = _color_choice(input_fn("Color mode (1=Mono, 2=8bit, 3=24bit): "))
        return PlayerConfig(source=None, color_mode=color)

    raise InvalidSelectionError("source menu", choice)


def _color_choice(answer: str) -> ColorMode:
    # Unknown answers fall back to monochrome
    return COLOR_CHOICES.get(answer.strip(), ColorMode.MONO)


def main(
    argv: Sequence[str] | None = None,
    *,
    input_fn: Callable[[str], str] = input,
    player_factory: Callable[[PlayerConfig], TerminalPlayer] | None = None,
) -> int:
    """Run the player, returning the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        if args.path is None and args.camera is None:
            config = config_from_interactive(input_fn)
        else:
            config = config_from_args(args)
    except InvalidSelectionError as e:
        logger.warning(str(e))
        print("Invalid choice.", file=sys.stderr)
        return 1

    factory = player_factory or (lambda cfg: TerminalPlayer(config=cfg, input_fn=input_fn))
    player = factory(config)
    try:
        player.play()
    except SourceOpenError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


__all__ = ["build_parser", "configure_logging", "config_from_args", "config_from_interactive", "main"]
