"""
Session state: the current authenticated identity.

  Anonymous ──register/login──▶ Authenticated ──logout──▶ Anonymous

The identity is persisted as a JSON blob ({user, token}, password blanked)
under the auth key and restored once at startup without re-validating the
token. An expired token is only noticed on the next API call.
"""
import json
import logging
from enum import Enum
from typing import Optional, Dict, Any

from .api import TaskManagerAPI
from .schema import Account, ApiResponse
from .store import KeyValueStore, AUTH_KEY

logger = logging.getLogger(__name__)


class SessionState(Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class Session:
    """Holds the current user and token; owned by the view layer."""

    def __init__(self, api: TaskManagerAPI, store: KeyValueStore):
        self.api = api
        self.store = store
        self.state = SessionState.ANONYMOUS
        self.user: Optional[Account] = None
        self.token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    def _authenticate(self, user: Account, token: str) -> None:
        self.user = user.public()
        self.token = token
        self.state = SessionState.AUTHENTICATED

    def _clear(self) -> None:
        self.user = None
        self.token = None
        self.state = SessionState.ANONYMOUS

    def _persist(self) -> None:
        blob = {"user": self.user.to_dict(), "token": self.token}
        self.store.write_value(AUTH_KEY, json.dumps(blob, ensure_ascii=False))

    def _complete(self, response: ApiResponse) -> ApiResponse:
        """Adopt a successful register/login response as the current identity."""
        if response.success and response.data:
            self._authenticate(response.data["user"], response.data["token"])
            self._persist()
            logger.info(f"Signed in as {self.user.username}")
        return response

    def register(self, username: str, password: str) -> ApiResponse:
        try:
            return self._complete(self.api.register({"username": username, "password": password}))
        except Exception:
            logger.exception("Register error")
            return ApiResponse.fail("An unexpected error occurred")

    def login(self, username: str, password: str) -> ApiResponse:
        try:
            return self._complete(self.api.login({"username": username, "password": password}))
        except Exception:
            logger.exception("Login error")
            return ApiResponse.fail("An unexpected error occurred")

    def logout(self) -> None:
        """Drop the identity unconditionally and forget the persisted blob."""
        username = self.user.username if self.user else None
        self._clear()
        self.store.remove(AUTH_KEY)
        if username:
            logger.info(f"Signed out {username}")

    def restore_session(self) -> bool:
        """
        Rehydrate from the persisted blob; called once at startup.

        Returns True when a session was restored. A blob that does not parse
        is removed and the session stays anonymous.
        """
        raw = self.store.read_value(AUTH_KEY)
        if raw is None:
            return False
        try:
            blob = json.loads(raw)
            user = _parse_user(blob["user"])
            token = blob["token"]
            if not isinstance(token, str) or not token:
                raise ValueError("token missing")
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Error restoring session: {e}")
            self.store.remove(AUTH_KEY)
            self._clear()
            return False

        self._authenticate(user, token)
        logger.info(f"Restored session for {user.username}")
        return True


def _parse_user(data: Dict[str, Any]) -> Account:
    if not isinstance(data, dict) or not data.get("id") or not data.get("username"):
        raise ValueError("user record incomplete")
    return Account.from_dict(data)
