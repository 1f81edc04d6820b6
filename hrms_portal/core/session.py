"""
Session state for the signed-in user.

The signed-in state is two values, `token` and `user`. They
live in a SessionStore (a JSON file by default) and are owned by a
SessionManager that is handed to the API client explicitly.
"""

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from hrms_portal.core.config import settings
from hrms_portal.schemas.auth import SessionUser

logger = logging.getLogger("hrms_portal.session")


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass
class Session:
    """Token plus the user record returned by the backend at login."""
    token: str
    user: SessionUser


class SessionStore:
    """Base class for session persistence backends."""

    def read(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        raise NotImplementedError

    def write(self, token: str, user: Dict[str, Any]) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    """In-process store; nothing survives the interpreter."""

    def __init__(self, token: Optional[str] = None, user: Optional[Dict[str, Any]] = None):
        self._token = token
        self._user = user

    def read(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        if self._token and self._user:
            return self._token, dict(self._user)
        return None

    def write(self, token: str, user: Dict[str, Any]) -> None:
        self._token = token
        self._user = dict(user)

    def clear(self) -> None:
        self._token = None
        self._user = None


class FileSessionStore(SessionStore):
    """
    JSON file store: `{"token": "...", "user": {...}}`.

    A missing, unreadable or half-written file reads as "no session".
    """

    def __init__(self, path: Optional[str] = None):
        self.path = os.path.expanduser(path or settings.SESSION_STORAGE_PATH)

    def read(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None

        token = data.get("token") if isinstance(data, dict) else None
        user = data.get("user") if isinstance(data, dict) else None
        if not token or not isinstance(user, dict):
            return None
        return token, user

    def write(self, token: str, user: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump({"token": token, "user": user}, fh, default=str)
        os.replace(tmp_path, self.path)
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            pass

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass


SessionListener = Callable[[SessionState, Optional[Session]], None]


class SessionManager:
    """
    Owns the Unauthenticated <-> Authenticated lifecycle.

    Only login, logout/invalidate and refresh_user write to the store.
    """

    def __init__(self, store: Optional[SessionStore] = None):
        self.store = store if store is not None else FileSessionStore()
        self._session: Optional[Session] = None
        self._listeners: List[SessionListener] = []

    # ============ State ============

    @property
    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self._session else SessionState.UNAUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def token(self) -> Optional[str]:
        return self._session.token if self._session else None

    @property
    def user(self) -> Optional[SessionUser]:
        return self._session.user if self._session else None

    # ============ Transitions ============

    def load(self) -> Optional[Session]:
        """Read the persisted session once, at startup."""
        stored = self.store.read()
        if stored is None:
            self._session = None
            return None

        token, user_data = stored
        try:
            user = SessionUser.model_validate(user_data)
        except PydanticValidationError as e:
            logger.warning(f"Discarding stored session with malformed user record: {e}")
            self.store.clear()
            self._session = None
            return None

        self._session = Session(token=token, user=user)
        self._notify()
        return self._session

    def login(self, token: str, user: Union[Dict[str, Any], SessionUser]) -> Session:
        """Persist token and user and move to Authenticated."""
        if not token:
            raise ValueError("Cannot start a session without a token")
        session_user = user if isinstance(user, SessionUser) else SessionUser.model_validate(user)
        self.store.write(token, session_user.to_storage())
        self._session = Session(token=token, user=session_user)
        logger.info(f"Session started for {session_user.email or session_user.id}")
        self._notify()
        return self._session

    def refresh_user(self, user: Union[Dict[str, Any], SessionUser]) -> None:
        """Replace the stored user (e.g. with fresh permissions from /auth/me)."""
        if not self._session:
            return
        session_user = user if isinstance(user, SessionUser) else SessionUser.model_validate(user)
        self.store.write(self._session.token, session_user.to_storage())
        self._session = Session(token=self._session.token, user=session_user)
        self._notify()

    def logout(self) -> None:
        """Explicit logout: clear storage and move to Unauthenticated."""
        self.store.clear()
        had_session = self._session is not None
        self._session = None
        if had_session:
            logger.info("Session cleared")
            self._notify()

    def invalidate(self) -> None:
        """Reactive logout after the backend rejected the token."""
        logger.warning("Session invalidated by authentication failure")
        self.logout()

    # ============ Authorization helpers ============

    def has_permission(self, permission: str) -> bool:
        user = self.user
        if not user or not user.permissions:
            return False
        return permission in user.permissions

    def has_any_permission(self, permissions: Iterable[str]) -> bool:
        user = self.user
        if not user or not user.permissions:
            return False
        return any(p in user.permissions for p in permissions)

    def has_role(self, *roles: str) -> bool:
        user = self.user
        if not user:
            return False
        return user.role_name in {r.lower() for r in roles}

    # ============ Listeners ============

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.state, self._session)
            except Exception as e:
                logger.error(f"Session listener failed: {e}", exc_info=True)
