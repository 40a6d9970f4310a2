"""HTTP API client for interacting with the room chat server."""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

import requests
from pydantic import BaseModel, ValidationError

from ..shared.dto import MentionDTO, MentionsEnvelope, MessageDTO, RoomDTO, RoomEnvelope, RoomsEnvelope, UserEnvelope
from ..shared.logging_config import configure_logging
from .config import API_PREFIX, CSRF_HEADER, LOG_DIR, REQUEST_TIMEOUT, SERVER_URL
from .errors import APIError, TransportFailure
from .storage import LocalStorage

logger = configure_logging("roomchat_client", "client.log", LOG_DIR)


@dataclass
class Result:
    """Outcome of a gateway call: either ``value`` or ``error`` is meaningful."""

    value: Any = None
    error: Optional[APIError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


class APIClient:
    """Credentialed request gateway.

    Every request echoes the last anti-forgery token seen and every response
    (successful or not) may rotate it. Calls never raise; failures come back
    as ``Result.error``.
    """

    def __init__(self, storage: LocalStorage, base_url: str = SERVER_URL, session: Any = None,
                 timeout: float = REQUEST_TIMEOUT):
        self.base_url = f"{base_url.rstrip('/')}/{API_PREFIX}"
        self.storage = storage
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self.storage.get_token()
        if token:
            headers[CSRF_HEADER] = token
        return headers

    def _rotate_token(self, resp: Any) -> None:
        token = resp.headers.get(CSRF_HEADER)
        if token and token != self.storage.get_token():
            self.storage.store_token(token)
            logger.debug("CSRF_ROTATED status=%s", resp.status_code)

    @staticmethod
    def _parse_body(resp: Any) -> Any:
        if not resp.content:
            return None
        if "application/json" not in resp.headers.get("content-type", ""):
            return resp.text
        return resp.json()

    def send(self, path: str, method: str = "GET", body: Optional[Dict[str, Any]] = None) -> Result:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self.session.request(method, url, json=body, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("TRANSPORT_FAIL method=%s path=%s error=%s", method, path, exc)
            return Result(error=TransportFailure(messages=[f"Could not reach the server: {exc}"]))

        self._rotate_token(resp)
        try:
            payload = self._parse_body(resp)
        except ValueError:
            logger.warning("MALFORMED_BODY method=%s path=%s status=%s", method, path, resp.status_code)
            return Result(error=TransportFailure(messages=["The server sent an unreadable response."]))

        if 200 <= resp.status_code < 300:
            return Result(value=payload)
        logger.info("REQUEST_FAIL method=%s path=%s status=%s", method, path, resp.status_code)
        return Result(error=APIError.from_response(resp.status_code, payload))

    def _typed(self, result: Result, schema: Type[BaseModel], empty: Optional[BaseModel] = None) -> Result:
        if not result.ok:
            return result
        if not result.value and empty is not None:
            return Result(value=empty)
        try:
            return Result(value=schema.model_validate(result.value))
        except ValidationError as exc:
            logger.warning("MALFORMED_PAYLOAD schema=%s errors=%s", schema.__name__, exc.error_count())
            return Result(error=TransportFailure(messages=[f"Malformed {schema.__name__} from server."]))

    def register(self, username: str, password: str) -> Result:
        payload = {"user": {"username": username, "password": password}}
        return self._typed(self.send("users", "POST", payload), UserEnvelope)

    def login(self, username: str, password: str) -> Result:
        payload = {"user": {"username": username, "password": password}}
        return self._typed(self.send("users/login", "POST", payload), UserEnvelope)

    def logout(self) -> Result:
        return self.send("users/logout", "DELETE")

    def restore_user(self) -> Result:
        return self._typed(self.send("users/restore_user"), UserEnvelope, empty=UserEnvelope())

    def list_rooms(self) -> Result:
        return self._typed(self.send("rooms"), RoomsEnvelope, empty=RoomsEnvelope())

    def get_room(self, room_id: int) -> Result:
        return self._typed(self.send(f"rooms/{room_id}"), RoomEnvelope)

    def create_room(self, name: str, owner_id: int) -> Result:
        payload = {"room": {"name": name, "ownerId": owner_id}}
        return self._typed(self.send("rooms", "POST", payload), RoomDTO)

    def delete_room(self, room_id: int) -> Result:
        return self.send(f"rooms/{room_id}", "DELETE")

    def create_message(self, room_id: int, body: str) -> Result:
        payload = {"message": {"roomId": room_id, "body": body}}
        return self._typed(self.send("messages", "POST", payload), MessageDTO)

    def delete_message(self, message_id: int) -> Result:
        return self.send(f"messages/{message_id}", "DELETE")

    def list_mentions(self) -> Result:
        return self._typed(self.send("mentions"), MentionsEnvelope, empty=MentionsEnvelope())

    def read_mention(self, mention_id: int) -> Result:
        return self._typed(self.send(f"mentions/{mention_id}/read", "PATCH"), MentionDTO)
