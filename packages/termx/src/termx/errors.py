"""
Error types raised by termx widgets and the terminal runtime.

Fatal errors (NotATerminalError, TerminalReadError) unwind out of a widget
after the terminal session has been restored. ValidationError is recoverable:
widgets show its message inline and keep running. CancellationError reports a
user abort (Escape / Ctrl-C); nothing is committed when it is raised.
"""
from __future__ import annotations


class TermxError(Exception):
    """Base class for every error raised by termx."""


class NotATerminalError(TermxError):
    """Raised when raw mode is requested on a descriptor that is not a TTY."""

    def __init__(self, fd: int, message: str | None = None) -> None:
        self.fd = fd
        super().__init__(message or f"file descriptor {fd} is not a terminal")


class TerminalReadError(TermxError, OSError):
    """Raised when the input stream is closed or cannot be read."""


class ValidationError(TermxError):
    """Raised by validators; the message is shown to the user inline."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CancellationError(TermxError):
    """Raised when the user aborts a widget with Escape or Ctrl-C."""

    def __init__(self, message: str = "cancelled") -> None:
        super().__init__(message)


class OutputBusyError(TermxError):
    """Raised when a thread writes while another thread owns the output."""

    def __init__(self, owner: str | None) -> None:
        self.owner = owner
        super().__init__(f"terminal output is owned by {owner or 'another thread'}")
