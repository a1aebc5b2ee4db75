"""Exceptions raised by asciivid."""

from __future__ import annotations


class SourceOpenError(RuntimeError):
    """A video file or camera device could not be opened."""

    def __init__(self, source: str | int, reason: str = "") -> None:
        self.source = source
        self.reason = reason
        kind = "camera" if isinstance(source, int) else "video source"
        message = f"Failed to open {kind}: {source}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidSelectionError(ValueError):
    """An interactive menu answer was not one of the offered choices."""

    def __init__(self, prompt: str, answer: str) -> None:
        self.prompt = prompt
        self.answer = answer
        super().__init__(f"Invalid choice for {prompt}: {answer!r}")


__all__ = ["SourceOpenError", "InvalidSelectionError"]
