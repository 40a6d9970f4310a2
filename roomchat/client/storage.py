"""Local client storage for the current-user snapshot and anti-forgery token."""
import json
from pathlib import Path
from typing import Any, Dict, Optional

from .config import CSRF_HEADER, STORAGE_FILE

USER_KEY = "currentUser"
TOKEN_KEY = CSRF_HEADER


class LocalStorage:
    """JSON file mirror of the state that must survive a restart.

    Only the session manager and the gateway's token hook write here; it is
    read at startup.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else STORAGE_FILE

    def load_state(self) -> Dict[str, Any]:
        if self.path.exists():
            with self.path.open("r", encoding="utf-8") as f:
                try:
                    return json.load(f)
                except json.JSONDecodeError:
                    return {}
        return {}

    def save_state(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def _set(self, key: str, value: Any) -> None:
        state = self.load_state()
        if value is None:
            state.pop(key, None)
        else:
            state[key] = value
        self.save_state(state)

    def store_user(self, user: Optional[Dict[str, Any]]) -> None:
        """Persist the current-user snapshot, or remove it when ``user`` is None."""
        self._set(USER_KEY, user)

    def clear_user(self) -> None:
        self.store_user(None)

    def get_user(self) -> Optional[Dict[str, Any]]:
        return self.load_state().get(USER_KEY)

    def store_token(self, token: str) -> None:
        self._set(TOKEN_KEY, token)

    def get_token(self) -> Optional[str]:
        return self.load_state().get(TOKEN_KEY)

    def has_session_snapshot(self) -> bool:
        state = self.load_state()
        return state.get(USER_KEY) is not None and state.get(TOKEN_KEY) is not None
