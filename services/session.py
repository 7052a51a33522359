"""Session state manager.

Single owner of the client's authentication identity. Screens and the
gateway only read the session; every change goes through this manager,
which persists it and publishes the new ``Session`` to all subscribers in
order. Nothing here raises: a malformed or expired token simply reads as
unauthenticated.
"""

import base64
import json
import logging
import time
from typing import Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from config.settings import LOG_FORMAT, get_settings
from core.models import Session, User
from services.storage import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)
if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(logging.INFO)

SessionListener = Callable[[Session], None]


def decode_token_expiry(token: Optional[str]) -> Optional[float]:
    """Return the ``exp`` claim of a JWT as epoch seconds, or None if unreadable."""
    if not token or not isinstance(token, str):
        return None
    try:
        segment = token.split(".")[1]
        padded = segment + "=" * (-len(segment) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        exp = payload["exp"]
        if isinstance(exp, bool):
            return None
        return float(exp)
    except (IndexError, KeyError, TypeError, ValueError, OverflowError, RecursionError):
        return None


class SessionManager:
    """Holds, persists and publishes the current session."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        token_key: Optional[str] = None,
        user_key: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        storage = get_settings().storage
        self._store = store if store is not None else JsonFileStore(storage.path)
        self._token_key = token_key or storage.token_key
        self._user_key = user_key or storage.user_key
        self._clock = clock
        self._state = Session()
        self._listeners: List[SessionListener] = []

    # ── Reading ──────────────────────────────────────────────────────

    @property
    def state(self) -> Session:
        return self._state

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def current_user(self) -> Optional[User]:
        return self._state.user

    def token(self) -> Optional[str]:
        return self._safe_get(self._token_key)

    def is_authenticated(self) -> bool:
        """True while the stored token's expiry claim lies in the future."""
        expiry = decode_token_expiry(self.token())
        if expiry is None:
            return False
        return expiry > self._clock()

    def valid_token(self) -> Optional[str]:
        """Return the token if it is still valid; otherwise clear the session.

        Returns:
            The bearer token, or None when there is no usable credential.
        """
        token = self.token()
        if token and self.is_authenticated():
            return token
        if token or self._state.is_authenticated:
            logger.info("Stored token is expired or malformed; clearing session")
            self.clear_session()
        return None

    # ── Transitions ──────────────────────────────────────────────────

    def initialize(self) -> Session:
        """Publish the persisted session, if a token and user were stored."""
        token = self.token()
        user = self._stored_user()
        if token and user is not None:
            return self._publish(Session(user=user, is_authenticated=True))
        return self._publish(Session())

    def set_session(self, user: User, token: str) -> Session:
        self._safe_set(self._token_key, token)
        self._safe_set(self._user_key, user.model_dump_json(by_alias=True))
        return self._publish(Session(user=user, is_authenticated=True))

    def update_user(self, user: User) -> Session:
        """Replace the user record after a profile fetch; the token is unchanged."""
        self._safe_set(self._user_key, user.model_dump_json(by_alias=True))
        return self._publish(
            Session(user=user, is_authenticated=self._state.is_authenticated)
        )

    def clear_session(self) -> Session:
        self._safe_remove(self._token_key)
        self._safe_remove(self._user_key)
        return self._publish(Session())

    # ── Observers ────────────────────────────────────────────────────

    def subscribe(self, listener: SessionListener, replay: bool = True) -> Callable[[], None]:
        """Register *listener* for every published session.

        Args:
            listener: Called with each new ``Session`` in publish order.
            replay: Deliver the current session immediately on subscription.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)
        if replay:
            self._notify(listener, self._state)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: Session) -> Session:
        self._state = state
        for listener in list(self._listeners):
            self._notify(listener, state)
        return state

    def _notify(self, listener: SessionListener, state: Session) -> None:
        try:
            listener(state)
        except Exception:
            logger.exception("Session listener %r failed", listener)

    # ── Persistence ──────────────────────────────────────────────────

    def _stored_user(self) -> Optional[User]:
        raw = self._safe_get(self._user_key)
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except PydanticValidationError as exc:
            logger.warning("Discarding unreadable stored user: %s", exc)
            return None

    def _safe_get(self, key: str) -> Optional[str]:
        try:
            return self._store.get(key)
        except OSError as exc:
            logger.error("Failed to read %s from session store: %s", key, exc)
            return None

    def _safe_set(self, key: str, value: str) -> None:
        try:
            self._store.set(key, value)
        except OSError as exc:
            logger.error("Failed to persist %s: %s", key, exc)

    def _safe_remove(self, key: str) -> None:
        try:
            self._store.remove(key)
        except OSError as exc:
            logger.error("Failed to remove %s from session store: %s", key, exc)
