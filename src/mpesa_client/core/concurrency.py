"""
Thread-safe storage for the initiator password.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

__all__ = ["ReadWriteLock", "SecretStore"]


class ReadWriteLock:
    """
    Many readers or a single writer, never both.

    Waiting writers block new readers so a steady stream of reads cannot
    starve a password update.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SecretStore:
    """
    A single string value guarded by a :class:`ReadWriteLock`.

    ``get`` returns a copy of the value and releases the lock before
    returning, so callers never hold it across network I/O.
    """

    def __init__(self, default: str, value: Optional[str] = None) -> None:
        self._default = default
        self._value = value
        self._lock = ReadWriteLock()

    def get(self) -> str:
        with self._lock.read_locked():
            value = self._value
        return self._default if value is None else value

    def set(self, value: str) -> None:
        with self._lock.write_locked():
            self._value = value

    def is_default(self) -> bool:
        with self._lock.read_locked():
            return self._value is None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<redacted>)"
