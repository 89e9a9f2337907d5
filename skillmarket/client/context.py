"""Client-side session state, held explicitly instead of in module globals."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import BaseModel

from skillmarket.schemas import UserOut

logger = logging.getLogger(__name__)


class ClientSession(BaseModel):
    user: UserOut
    access_token: str
    expires_at: Optional[datetime] = None


SessionListener = Callable[[Optional[ClientSession]], None]


class AuthContext:
    """
    Current user/session for one client.

    Pass it to whatever needs the signed-in user. Interested parties call
    ``subscribe`` and get back a function that removes the listener.
    """

    def __init__(self, session: Optional[ClientSession] = None):
        self._session = session
        self._listeners: List[SessionListener] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> Optional[ClientSession]:
        return self._session

    @property
    def user(self) -> Optional[UserOut]:
        return self._session.user if self._session else None

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set_session(self, session: Optional[ClientSession]) -> None:
        with self._lock:
            self._session = session
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener %r failed", listener)

    def clear(self) -> None:
        self.set_session(None)
