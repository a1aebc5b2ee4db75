"""
Terminal plumbing for the player: size queries, key polling and a scoped
guard restoring the terminal on every exit path.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from contextlib import ExitStack
from typing import Callable, TextIO

from blessed import Terminal

logger = logging.getLogger(__name__)

# ANSI escape codes
ESC = "\033"
CLEAR_SCREEN = f"{ESC}[2J"
CURSOR_HOME = f"{ESC}[H"
RESET = f"{ESC}[0m"

DEFAULT_SIZE = (80, 24)


def get_terminal_size() -> tuple[int, int]:
    """Get terminal size (columns, lines) with an 80x24 fallback."""
    try:
        size = os.get_terminal_size()
        return size.columns, size.lines
    except OSError:
        return DEFAULT_SIZE


class KeyboardHandler:
    """Dispatch single key presses to handlers using the blessed library."""

    def __init__(self, terminal: Terminal):
        self.terminal = terminal
        self._bindings: dict[str, Callable[[], None]] = {}
        self._char_bindings: dict[str, Callable[[], None]] = {}

    def bind(self, key: str, handler: Callable[[], None]) -> None:
        """Bind a handler to a key.

        Key can be a key name (e.g., 'KEY_ESCAPE') or a character.
        """
        if key.startswith("KEY_"):
            self._bindings[key] = handler
        else:
            self._char_bindings[key] = handler

    def bind_chars(self, chars: str, handler: Callable[[], None]) -> None:
        """Bind the same handler to each character of ``chars``."""
        for char in chars:
            self.bind(char, handler)

    def unbind(self, key: str) -> None:
        """Remove a key binding."""
        if key.startswith("KEY_"):
            self._bindings.pop(key, None)
        else:
            self._char_bindings.pop(key, None)

    def is_bound(self, key: str) -> bool:
        return key in self._bindings or key in self._char_bindings

    def dispatch(self, key) -> bool:
        """Run the handler bound to a blessed keystroke.

        :return: True if a handler was found
        """
        name = getattr(key, "name", None)
        if name and name in self._bindings:
            self._bindings[name]()
            return True
        char = str(key)
        if char in self._char_bindings:
            self._char_bindings[char]()
            return True
        return False

    def process(self, timeout: float = 0, max_keys: int = 32) -> int:
        """Handle all pending key presses without blocking.

        :param timeout: Seconds to wait for the first key (0 = poll)
        :param max_keys: Upper bound of keys handled per call
        :return: Number of keys read
        """
        count = 0
        while count < max_keys:
            key = self.terminal.inkey(timeout=timeout if count == 0 else 0)
            if not key:
                break
            count += 1
            self.dispatch(key)
        return count


class TerminalGuard:
    """
    Scoped raw terminal mode.

    Entering switches to the alternate screen, cbreak input and a hidden
    cursor. restore() undoes all of it exactly once and is called on normal
    exit, on exceptions, and from SIGINT/SIGTERM/SIGQUIT handlers before
    the process exits.

    Example:
        with TerminalGuard(Terminal()):
            run_player()
    """

    SIGNALS = ("SIGINT", "SIGTERM", "SIGQUIT")

    def __init__(
        self,
        terminal: Terminal,
        *,
        stream: TextIO | None = None,
        handle_signals: bool = True,
    ):
        """
        :param terminal: blessed Terminal to put into raw mode
        :param stream: Output stream for the final reset (default: sys.stdout)
        :param handle_signals: Install termination signal handlers
        """
        self.terminal = terminal
        self.stream = stream
        self.handle_signals = handle_signals
        self._stack: ExitStack | None = None
        self._previous_handlers: dict[int, object] = {}
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def __enter__(self) -> "TerminalGuard":
        stack = ExitStack()
        try:
            stack.enter_context(self.terminal.fullscreen())
            stack.enter_context(self.terminal.cbreak())
            stack.enter_context(self.terminal.hidden_cursor())
        except BaseException:
            stack.close()
            raise
        self._stack = stack
        self._active = True
        if self.handle_signals:
            self._install_signal_handlers()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        """Leave raw mode and restore signal handlers (idempotent)."""
        if not self._active:
            return
        self._active = False
        try:
            if self._stack is not None:
                self._stack.close()
                self._stack = None
        finally:
            out = self.stream or sys.stdout
            out.write(RESET)
            out.flush()
            self._restore_signal_handlers()
            logger.debug("Terminal restored")

    def _install_signal_handlers(self) -> None:
        for name in self.SIGNALS:
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            try:
                self._previous_handlers[signum] = signal.signal(signum, self._on_signal)
            except ValueError:
                # Not in the main thread; the with-block still restores the terminal
                logger.debug(f"Cannot install {name} handler outside the main thread")

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous_handlers.clear()

    def _on_signal(self, signum: int, _frame) -> None:
        logger.info(f"Received signal {signum}, restoring terminal")
        self.restore()
        raise SystemExit(128 + signum)


__all__ = [
    "CLEAR_SCREEN",
    "CURSOR_HOME",
    "KeyboardHandler",
    "TerminalGuard",
    "get_terminal_size",
]
