import threading
from contextlib import contextmanager
from typing import Set

from packages.tia_core.errors import SessionBusyError


class SessionLockManager:
    """
    Serializes commands on the same session within this process.
    Enforces FAIL-FAST policy: if the session is already held, raise immediately.
    """
    def __init__(self):
        self._held: Set[str] = set()
        self._guard = threading.Lock()

    @contextmanager
    def acquire_lock(self, session_id: str):
        with self._guard:
            if session_id in self._held:
                raise SessionBusyError(session_id)
            self._held.add(session_id)
        try:
            yield
        finally:
            with self._guard:
                self._held.discard(session_id)

    def is_locked(self, session_id: str) -> bool:
        with self._guard:
            return session_id in self._held
