"""
Client-side location.

Tracks where the user is: pages and the API client move the user by
calling `navigate`, and listeners (the router, the console) react to it.
"""

import logging
from typing import Callable, List

logger = logging.getLogger("hrms_portal.navigation")

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


def normalize_path(path: str) -> str:
    path = (path or "/").strip()
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/")
    return path


class Navigator:
    """Current route plus a history of visited routes."""

    def __init__(self, initial: str = "/"):
        self.location = normalize_path(initial)
        self.history: List[str] = [self.location]
        self._listeners: List[Callable[[str], None]] = []

    def navigate(self, path: str, replace: bool = False) -> str:
        path = normalize_path(path)
        if replace and self.history:
            self.history[-1] = path
        else:
            self.history.append(path)
        self.location = path
        for listener in list(self._listeners):
            try:
                listener(path)
            except Exception as e:
                logger.error(f"Navigation listener failed: {e}", exc_info=True)
        return path

    def redirect_to_login(self) -> str:
        """Forced navigation used when the session expires."""
        logger.info("Redirecting to login")
        return self.navigate(LOGIN_PATH, replace=True)

    def back(self) -> str:
        if len(self.history) > 1:
            self.history.pop()
        self.location = self.history[-1]
        return self.location

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
