"""Application controller tying the gateway, store and session together."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from ..shared.dto import keyed_state
from ..shared.logging_config import configure_logging
from .api import APIClient, Result
from .config import LOG_DIR, SERVER_URL
from .errors import NotAuthenticated
from .mentions import MentionFeed, get_mentions
from .session import SessionManager
from .storage import LocalStorage
from .store import (
    ReadMention,
    ReceiveMentions,
    ReceiveMessage,
    ReceiveMessages,
    ReceiveRoom,
    ReceiveRooms,
    ReceiveUsers,
    RemoveMessage,
    RemoveRoom,
    Store,
)

logger = configure_logging("roomchat_client", "client.log", LOG_DIR)


class ChatController:
    """Encapsulates the intents a UI can issue against the chat service."""

    def __init__(self, base_url: Optional[str] = None, storage: Optional[LocalStorage] = None,
                 store: Optional[Store] = None, session: Any = None):
        self.storage = storage or LocalStorage()
        self.store = store or Store()
        self.api = APIClient(self.storage, base_url or SERVER_URL, session=session)
        self.session = SessionManager(self.api, self.store, self.storage)

    def _settle(self, result: Result) -> Any:
        if not result.ok:
            self.session.handle_failure(result.error)
            raise result.error
        return result.value

    def _require_user(self) -> int:
        user_id = self.store.state.current_user_id
        if user_id is None:
            raise NotAuthenticated("Log in first")
        return user_id

    @property
    def current_user(self) -> Optional[Dict[str, Any]]:
        return self.store.current_user

    def start(self, render: Callable[[], Any]) -> Any:
        return self.session.start(render)

    def login(self, username: str, password: str) -> Dict[str, Any]:
        return self.session.login(username, password)

    def signup(self, username: str, password: str) -> Dict[str, Any]:
        return self.session.signup(username, password)

    def logout(self) -> None:
        self.session.logout()

    def fetch_rooms(self) -> List[Dict[str, Any]]:
        envelope = self._settle(self.api.list_rooms())
        self.store.dispatch(
            ReceiveRooms(keyed_state(envelope.rooms)),
            ReceiveUsers(keyed_state(envelope.users)),
        )
        return list(self.store.state.rooms.values())

    def fetch_room(self, room_id: int) -> Dict[str, Any]:
        self._require_user()
        envelope = self._settle(self.api.get_room(room_id))
        self.store.dispatch(
            ReceiveMessages(keyed_state(envelope.messages)),
            ReceiveRoom(envelope.room.to_state()),
            ReceiveUsers(keyed_state(envelope.users)),
        )
        return self.store.state.rooms[envelope.room.id]

    def room_messages(self, room_id: int) -> List[Dict[str, Any]]:
        """Messages of a room currently in the store, oldest first, with author names."""
        state = self.store.state
        messages = [m for m in state.messages.values() if m.get("room_id") == room_id]
        messages.sort(key=lambda m: (m.get("created_at") is None, m.get("created_at"), m["id"]))
        return [
            {**m, "author": state.users.get(m.get("author_id"), {}).get("username")}
            for m in messages
        ]

    def create_room(self, name: str) -> Dict[str, Any]:
        owner_id = self._require_user()
        room = self._settle(self.api.create_room(name, owner_id))
        self.store.dispatch(ReceiveRoom(room.to_state()))
        logger.info("ROOM_CREATED room_id=%s owner_id=%s", room.id, owner_id)
        return self.store.state.rooms[room.id]

    def destroy_room(self, room_id: int) -> None:
        self._require_user()
        self._settle(self.api.delete_room(room_id))
        self.store.dispatch(RemoveRoom(room_id))
        logger.info("ROOM_DELETED room_id=%s", room_id)

    def create_message(self, room_id: int, body: str) -> Dict[str, Any]:
        self._require_user()
        message = self._settle(self.api.create_message(room_id, body))
        self.store.dispatch(ReceiveMessage(message.to_state()))
        return self.store.state.messages[message.id]

    def destroy_message(self, message_id: int) -> None:
        self._require_user()
        self._settle(self.api.delete_message(message_id))
        self.store.dispatch(RemoveMessage(message_id))

    def fetch_mentions(self) -> MentionFeed:
        self._require_user()
        envelope = self._settle(self.api.list_mentions())
        self.store.dispatch(
            ReceiveMentions(keyed_state(envelope.mentions)),
            ReceiveMessages(keyed_state(envelope.messages)),
            ReceiveUsers(keyed_state(envelope.users)),
        )
        return self.mentions()

    def read_mention(self, mention_id: int) -> None:
        self._require_user()
        self._settle(self.api.read_mention(mention_id))
        self.store.dispatch(ReadMention(mention_id))

    def mentions(self) -> MentionFeed:
        return get_mentions(self.store.state)


__all__ = ["ChatController"]
