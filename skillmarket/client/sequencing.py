import threading
from typing import Callable


class RequestSequencer:
    """
    Tickets for overlapping calls of the same kind.

    Take a ticket before issuing a call; when its response arrives, store it
    through ``commit_if_latest(ticket, store)``. A slower, older response can
    then never replace a newer one.
    """

    def __init__(self):
        self._latest = 0
        self._lock = threading.Lock()

    def next_ticket(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_latest(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest

    def commit_if_latest(self, ticket: int, store: Callable[[], None]) -> bool:
        """Run ``store`` only if ``ticket`` is still the newest; check and store are atomic."""
        with self._lock:
            if ticket != self._latest:
                return False
            store()
            return True

    @property
    def latest(self) -> int:
        return self._latest
