"""
Reader-writer access to the client's session.

Authenticated calls and transaction authorization only read the session and
may run concurrently. Creating, refreshing and ending the session replace it
and run exclusively.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from ..exceptions import NoActiveSessionError
from .models import Session


class ReadWriteLock:
    """Writer-preferring reader-writer lock."""

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._condition:
            while self._writer or self._waiting_writers:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if not self._readers:
                    self._condition.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._condition:
                self._writer = False
                self._condition.notify_all()


class SessionSlot:
    """Mutable view of the guarded session, handed out under the write lock."""

    def __init__(self, guard: "SessionGuard"):
        self._guard = guard

    @property
    def session(self) -> Optional[Session]:
        return self._guard._session

    @session.setter
    def session(self, value: Optional[Session]) -> None:
        self._guard._session = value

    def require(self) -> Session:
        if self._guard._session is None:
            raise NoActiveSessionError("No active session. Call new_session() first.")
        return self._guard._session


class SessionGuard:
    """
    Holds at most one session behind a reader-writer lock.

    Example:
        guard = SessionGuard()
        with guard.write() as slot:
            slot.session = session
        with guard.read() as session:
            ...  # shared access
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._session: Optional[Session] = None

    @contextmanager
    def read(self) -> Iterator[Session]:
        """
        Shared access to the active session.

        Raises:
            NoActiveSessionError: If there is no session
        """
        with self._lock.read_locked():
            if self._session is None:
                raise NoActiveSessionError("No active session. Call new_session() first.")
            yield self._session

    @contextmanager
    def write(self) -> Iterator[SessionSlot]:
        """Exclusive access for replacing or clearing the session."""
        with self._lock.write_locked():
            yield SessionSlot(self)

    def current(self) -> Optional[Session]:
        """The active session or None, without raising."""
        with self._lock.read_locked():
            return self._session

    @property
    def has_session(self) -> bool:
        return self.current() is not None
