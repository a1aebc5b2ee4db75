"""
Tests for KeyboardHandler, TerminalGuard and terminal size detection.
"""

import io
import signal
from unittest.mock import MagicMock, patch

import pytest
from blessed.keyboard import Keystroke

from asciivid.ascii.terminal import (
    RESET,
    KeyboardHandler,
    TerminalGuard,
    get_terminal_size,
)


class TestGetTerminalSize:
    """Tests for terminal size detection."""

    def test_reports_os_size(self):
        with patch("os.get_terminal_size", return_value=MagicMock(columns=132, lines=50)):
            assert get_terminal_size() == (132, 50)

    def test_fallback(self):
        """Without a terminal the classic 80x24 is used."""
        with patch("os.get_terminal_size", side_effect=OSError):
            assert get_terminal_size() == (80, 24)


class TestKeyboardHandler:
    """Tests for key binding and dispatch."""

    def test_char_binding(self, mock_terminal, keys):
        handler = MagicMock()
        kb = KeyboardHandler(mock_terminal)
        kb.bind("q", handler)
        keys.push("q")
        assert kb.process() == 1
        handler.assert_called_once()

    def test_named_binding(self, mock_terminal, keys):
        """Named keys are matched by their blessed key name."""
        handler = MagicMock()
        kb = KeyboardHandler(mock_terminal)
        kb.bind("KEY_ESCAPE", handler)
        keys.push(Keystroke("\x1b", code=361, name="KEY_ESCAPE"))
        kb.process()
        handler.assert_called_once()

    def test_drains_all_pending_keys(self, mock_terminal, keys):
        """Several queued keys are handled in one call."""
        handler = MagicMock()
        kb = KeyboardHandler(mock_terminal)
        kb.bind_chars("+=", handler)
        keys.push("+", "=", "x", "+")
        assert kb.process() == 4
        assert handler.call_count == 3

    def test_max_keys(self, mock_terminal, keys):
        kb = KeyboardHandler(mock_terminal)
        keys.push(*"abcdef")
        assert kb.process(max_keys=2) == 2
        assert len(keys.pending) == 4

    def test_no_keys(self, mock_terminal):
        kb = KeyboardHandler(mock_terminal)
        assert kb.process() == 0

    def test_unbind(self, mock_terminal):
        kb = KeyboardHandler(mock_terminal)
        kb.bind(" ", MagicMock())
        kb.bind("KEY_ESCAPE", MagicMock())
        assert kb.is_bound(" ")
        kb.unbind(" ")
        kb.unbind("KEY_ESCAPE")
        assert not kb.is_bound(" ")
        assert not kb.is_bound("KEY_ESCAPE")

    def test_dispatch_unbound(self, mock_terminal):
        kb = KeyboardHandler(mock_terminal)
        assert kb.dispatch(Keystroke("z")) is False


class TestTerminalGuard:
    """Tests for raw mode entry and restoration."""

    def test_enters_and_restores(self, mock_terminal):
        """Raw mode contexts are entered and left, and colors are reset."""
        out = io.StringIO()
        with TerminalGuard(mock_terminal, stream=out, handle_signals=False) as guard:
            assert guard.active
            mock_terminal.fullscreen.return_value.__enter__.assert_called_once()
            mock_terminal.cbreak.return_value.__enter__.assert_called_once()
            mock_terminal.hidden_cursor.return_value.__enter__.assert_called_once()
        assert not guard.active
        mock_terminal.fullscreen.return_value.__exit__.assert_called_once()
        mock_terminal.cbreak.return_value.__exit__.assert_called_once()
        mock_terminal.hidden_cursor.return_value.__exit__.assert_called_once()
        assert out.getvalue() == RESET

    def test_restores_on_exception(self, mock_terminal):
        out = io.StringIO()
        with pytest.raises(RuntimeError):
            with TerminalGuard(mock_terminal, stream=out, handle_signals=False):
                raise RuntimeError("boom")
        mock_terminal.cbreak.return_value.__exit__.assert_called_once()
        assert out.getvalue() == RESET

    def test_restore_is_idempotent(self, mock_terminal):
        out = io.StringIO()
        guard = TerminalGuard(mock_terminal, stream=out, handle_signals=False)
        with guard:
            guard.restore()
            guard.restore()
        assert out.getvalue() == RESET
        mock_terminal.fullscreen.return_value.__exit__.assert_called_once()

    def test_signal_handlers_installed_and_restored(self, mock_terminal):
        """Termination signals are routed through the guard while active."""
        previous = signal.getsignal(signal.SIGTERM)
        out = io.StringIO()
        with TerminalGuard(mock_terminal, stream=out) as guard:
            assert signal.getsignal(signal.SIGTERM) == guard._on_signal
        assert signal.getsignal(signal.SIGTERM) == previous

    def test_signal_restores_then_exits(self, mock_terminal):
        """A signal restores the terminal before the process exits."""
        out = io.StringIO()
        guard = TerminalGuard(mock_terminal, stream=out)
        guard.__enter__()
        with pytest.raises(SystemExit) as exc_info:
            guard._on_signal(signal.SIGTERM, None)
        assert exc_info.value.code == 128 + signal.SIGTERM
        assert not guard.active
        assert out.getvalue() == RESET
        mock_terminal.cbreak.return_value.__exit__.assert_called_once()
