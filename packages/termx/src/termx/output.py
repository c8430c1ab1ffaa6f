"""
Output ownership token shared by a terminal session and its writers.

Only one thread may own the output at a time. The animation scheduler claims
the token for the whole time its thread runs; while it is held, writes coming
from any other thread raise OutputBusyError instead of interleaving escape
sequences with the animation. Unowned output is open to every thread, with
individual writes serialized by an internal lock.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from .errors import OutputBusyError


class OutputToken:
    def __init__(self) -> None:
        self._state_lock = threading.Lock()
        self._write_lock = threading.RLock()
        self._owner_ident: int | None = None
        self._owner_name: str | None = None
        self._depth = 0

    @property
    def owner(self) -> str | None:
        """Name of the owning thread, or None when the output is free."""
        with self._state_lock:
            return self._owner_name

    def held_by_current_thread(self) -> bool:
        with self._state_lock:
            return self._owner_ident == threading.get_ident()

    def claim(self) -> None:
        """Take ownership for the calling thread. Re-entrant for the owner."""
        ident = threading.get_ident()
        with self._state_lock:
            if self._owner_ident is not None and self._owner_ident != ident:
                raise OutputBusyError(self._owner_name)
            self._owner_ident = ident
            self._owner_name = threading.current_thread().name
            self._depth += 1

    def release(self) -> None:
        ident = threading.get_ident()
        with self._state_lock:
            if self._owner_ident != ident:
                raise RuntimeError("output token released by a thread that does not own it")
            self._depth -= 1
            if self._depth == 0:
                self._owner_ident = None
                self._owner_name = None

    @contextmanager
    def held(self) -> Iterator[None]:
        self.claim()
        try:
            yield
        finally:
            self.release()

    @contextmanager
    def writing(self) -> Iterator[None]:
        """Guard a single write: fails fast if another thread owns the output."""
        with self._state_lock:
            if self._owner_ident is not None and self._owner_ident != threading.get_ident():
                raise OutputBusyError(self._owner_name)
        with self._write_lock:
            yield
