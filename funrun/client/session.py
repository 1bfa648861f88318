import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class SessionContext:
    """
    Holds the admin bearer token for one client.

    Lifecycle is explicit: init(token) after login, clear() on logout or
    when the server rejects the token. Clearing a live session emits
    "session invalidated" to every subscriber; navigation is theirs to do.
    """

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token
        self._listeners: List[Listener] = []

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    def init(self, token: str) -> None:
        if not token:
            raise ValueError("empty token")
        self._token = token

    def clear(self) -> None:
        self._token = None

    def invalidate(self) -> None:
        """
        Server said the token is no good (401/403).
        """
        had_token = self._token is not None
        self._token = None
        logger.warning("Session invalidated by server")
        if had_token:
            for cb in list(self._listeners):
                cb()

    def on_invalidated(self, cb: Listener) -> Callable[[], None]:
        """
        Subscribe; returns an unsubscribe function.
        """
        self._listeners.append(cb)

        def _off() -> None:
            if cb in self._listeners:
                self._listeners.remove(cb)

        return _off

    def auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self._token}"} if self._token else {}
