"""Session lifecycle: login, signup, logout and startup restoration."""
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from ..shared.dto import UserDTO
from ..shared.logging_config import configure_logging
from .api import APIClient
from .config import LOG_DIR
from .errors import APIError, TransportFailure, Unauthorized
from .storage import LocalStorage
from .store import ReceiveCurrentUser, RemoveCurrentUser, Store

logger = configure_logging("roomchat_client", "client.log", LOG_DIR)


class SessionState(Enum):
    ANONYMOUS = "anonymous"
    RESTORING = "restoring"
    AUTHENTICATED = "authenticated"


TRANSITIONS = {
    SessionState.ANONYMOUS: {SessionState.ANONYMOUS, SessionState.RESTORING, SessionState.AUTHENTICATED},
    SessionState.RESTORING: {SessionState.ANONYMOUS, SessionState.AUTHENTICATED},
    SessionState.AUTHENTICATED: {SessionState.ANONYMOUS, SessionState.AUTHENTICATED},
}


class InvalidTransition(RuntimeError):
    pass


class SessionManager:
    """Finite-state machine reconciling the local session belief with the server."""

    def __init__(self, api: APIClient, store: Store, storage: LocalStorage):
        self.api = api
        self.store = store
        self.storage = storage
        self.state = SessionState.ANONYMOUS

    def _transition(self, new_state: SessionState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise InvalidTransition(f"Cannot move from {self.state.value} to {new_state.value}")
        if new_state is not self.state:
            logger.info("SESSION_STATE from=%s to=%s", self.state.value, new_state.value)
        self.state = new_state

    def _load_snapshot(self) -> Optional[Dict[str, Any]]:
        if not self.storage.has_session_snapshot():
            return None
        try:
            return UserDTO.model_validate(self.storage.get_user()).to_state()
        except ValidationError:
            logger.warning("SNAPSHOT_INVALID action=discard")
            self.storage.clear_user()
            return None

    def _start_session(self, user: UserDTO) -> Dict[str, Any]:
        record = user.to_state()
        self.storage.store_user(user.to_wire())
        self.store.dispatch(ReceiveCurrentUser(record))
        self._transition(SessionState.AUTHENTICATED)
        logger.info("SESSION_START user_id=%s", user.id)
        return record

    def end_session(self, reason: str = "logout") -> None:
        """Forget the current user locally and in the persisted snapshot."""
        user_id = self.store.state.current_user_id
        self.storage.clear_user()
        if user_id is not None:
            self.store.dispatch(RemoveCurrentUser(user_id))
        self._transition(SessionState.ANONYMOUS)
        logger.info("SESSION_END user_id=%s reason=%s", user_id, reason)

    def start(self, render: Callable[[], Any]) -> Any:
        """Settle the startup session and call ``render`` for the first paint.

        With a persisted user and token the session is trusted for the first
        paint and confirmed right after it. Without them, restoration finishes
        before ``render`` so an authenticated visitor never sees a signed-out
        screen first.
        """
        snapshot = self._load_snapshot()
        if snapshot is not None:
            self.store.dispatch(ReceiveCurrentUser(snapshot))
            self._transition(SessionState.AUTHENTICATED)
            logger.info("SESSION_OPTIMISTIC user_id=%s", snapshot["id"])
            rendered = render()
            self.restore_session()
            return rendered

        self._transition(SessionState.RESTORING)
        try:
            self.restore_session()
        finally:
            rendered = render()
        return rendered

    def restore_session(self) -> Optional[Dict[str, Any]]:
        result = self.api.restore_user()
        if not result.ok:
            logger.warning("RESTORE_FAIL status=%s", result.error.status)
            if self.state is SessionState.RESTORING:
                self._transition(SessionState.ANONYMOUS)
            raise result.error

        user = result.value.user
        if user is None:
            if self.store.state.current_user_id is not None:
                self.end_session(reason="restore_empty")
            else:
                self.storage.clear_user()
                self._transition(SessionState.ANONYMOUS)
            return None
        return self._start_session(user)

    def _authenticate(self, result, action: str, username: str) -> Dict[str, Any]:
        if not result.ok:
            logger.info("%s_FAIL username=%s status=%s", action, username, result.error.status)
            raise result.error
        if result.value.user is None:
            raise TransportFailure(messages=["The server did not return a user."])
        logger.info("%s_SUCCESS username=%s", action, username)
        return self._start_session(result.value.user)

    def login(self, username: str, password: str) -> Dict[str, Any]:
        return self._authenticate(self.api.login(username, password), "LOGIN", username)

    def signup(self, username: str, password: str) -> Dict[str, Any]:
        return self._authenticate(self.api.register(username, password), "SIGNUP", username)

    def logout(self) -> None:
        result = self.api.logout()
        if result.ok:
            self.end_session(reason="logout")
            return
        if isinstance(result.error, Unauthorized):
            # Server no longer knows this session, e.g. after a reseed.
            self.end_session(reason="unauthorized")
            return
        raise result.error

    def handle_failure(self, error: APIError) -> None:
        """End the session when a believed-authenticated call comes back 401."""
        if isinstance(error, Unauthorized) and self.state is SessionState.AUTHENTICATED:
            self.end_session(reason="unauthorized")
