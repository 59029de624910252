"""
Authentication session cache.

Lifecycle: ``init()`` -> anonymous | authenticated -> ``logout()``.

The session keeps the bearer token, the signed-in user and the token expiry
in a caller-supplied mapping (``st.session_state`` in the app). The API
client never sees this object, only ``bearer_token`` as a callable.
"""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Mapping, MutableMapping, Optional
from urllib.parse import unquote

from core.logging_setup import get_logger

from .errors import ApiError, TransportError
from .models import User

log = get_logger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "user_data"
EXPIRES_KEY = "auth_expires_at"

ANONYMOUS = "anonymous"
AUTHENTICATED = "authenticated"

# restore() retries a just-created account that the backend cannot see yet
RESTORE_RETRIES = 3
_FRESH_USER_MARKER = "no rows in result set"


def _token_prefix(token: str) -> str:
    return token[:8] + "..." if len(token) > 8 else "***"


class AuthSession:
    def __init__(
        self,
        storage: MutableMapping[str, Any],
        *,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self._storage = storage
        self._ttl = ttl_seconds
        self._clock = clock
        self._initialized = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def init(self) -> str:
        """Re-synchronize from storage. A corrupt cached user is dropped, the token kept."""
        user = self._storage.get(USER_KEY)
        if user is not None and not isinstance(user, User):
            try:
                self._storage[USER_KEY] = User.model_validate(user)
            except ValueError:
                log.info("Dropping unreadable cached user data")
                self._storage.pop(USER_KEY, None)
        self._initialized = True
        return self.state

    @property
    def state(self) -> str:
        return AUTHENTICATED if self.token and self.user is not None else ANONYMOUS

    @property
    def token(self) -> Optional[str]:
        token = self._storage.get(TOKEN_KEY)
        if not token:
            return None
        expires_at = self._storage.get(EXPIRES_KEY)
        if expires_at is not None and self._clock() >= expires_at:
            log.info("Session token expired")
            self.logout()
            return None
        return token

    @property
    def user(self) -> Optional[User]:
        return self._storage.get(USER_KEY)

    def bearer_token(self) -> Optional[str]:
        """Token provider handed to ``ApiClient``."""
        return self.token

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def login(self, token: str, user: User) -> None:
        if not token:
            raise ValueError("token must be non-empty")
        self._storage[TOKEN_KEY] = token
        self._storage[USER_KEY] = user
        self._storage[EXPIRES_KEY] = self._clock() + self._ttl
        log.info("Signed in as %s (token %s)", user.email, _token_prefix(token))

    def logout(self) -> None:
        for key in (TOKEN_KEY, USER_KEY, EXPIRES_KEY):
            self._storage.pop(key, None)
        log.info("Session cleared")

    def restore(self, api: Any, *, sleep: Callable[[float], None] = time.sleep) -> str:
        """
        Fetch the user for a stored token that has no cached user.

        HTTP 500 with the "no rows in result set" body (first login, backend
        still committing) and transport errors are retried with 1s/2s/3s
        back-off; anything else ends the session.
        """
        token = self.token
        if token is None or self.user is not None:
            return self.state

        for attempt in range(RESTORE_RETRIES + 1):
            try:
                user = api.get_me()
            except TransportError as exc:
                retryable = True
                reason = str(exc)
            except ApiError as exc:
                retryable = exc.status_code == 500 and _FRESH_USER_MARKER in str(exc)
                reason = str(exc)
            else:
                self._storage[USER_KEY] = user
                log.info("Restored session for %s", user.email)
                return self.state

            if not retryable or attempt == RESTORE_RETRIES:
                log.warning("Could not restore session: %s", reason)
                self.logout()
                return self.state
            delay = float(attempt + 1)
            log.info("Retrying user lookup (attempt %d/%d) in %.0fs", attempt + 1, RESTORE_RETRIES, delay)
            sleep(delay)

        return self.state

    def handle_callback(self, params: Mapping[str, str]) -> str:
        """
        Consume the OAuth redirect query parameters sent back by the backend.

        Returns "authenticated", "oauth_failed", "parse_failed" or "no_token".
        """
        if params.get("error"):
            log.warning("OAuth error from backend: %s", params.get("error"))
            return "oauth_failed"

        token = params.get("token")
        user_raw = params.get("user")
        if not token or not user_raw:
            return "no_token"
        try:
            user = User.model_validate(json.loads(unquote(user_raw)))
        except ValueError:
            log.warning("Could not parse user data from OAuth callback")
            return "parse_failed"
        self.login(token, user)
        return AUTHENTICATED
