"""
Pytest fixtures for asciivid tests
"""

import numpy as np
import pytest
from blessed.keyboard import Keystroke
from unittest.mock import MagicMock

from asciivid import PixelGrid


@pytest.fixture
def gradient_grid() -> PixelGrid:
    """
    A 40x20 RGB gradient (red along x, green along y, constant blue).
    :return: The grid
    """
    pixels = np.zeros((20, 40, 3), dtype=np.uint8)
    for y in range(20):
        for x in range(40):
            pixels[y, x] = [int(x * 6), int(y * 12), 128]
    return PixelGrid(pixels)


class FakeClock:
    """Monotonic clock advanced only by sleep()."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


class KeyQueue:
    """Feeds queued keystrokes to a mocked blessed Terminal.inkey()."""

    def __init__(self):
        self.pending: list[Keystroke] = []

    def push(self, *keys) -> None:
        for key in keys:
            if isinstance(key, Keystroke):
                self.pending.append(key)
            else:
                self.pending.append(Keystroke(key))

    def inkey(self, timeout=None):
        if self.pending:
            return self.pending.pop(0)
        return Keystroke("")


@pytest.fixture
def keys() -> KeyQueue:
    return KeyQueue()


@pytest.fixture
def mock_terminal(keys) -> MagicMock:
    """A blessed Terminal stand-in whose inkey() reads from the key queue."""
    terminal = MagicMock()
    terminal.inkey.side_effect = keys.inkey
    return terminal
