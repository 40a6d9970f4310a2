"""Normalized in-memory entity store.

One keyed collection per entity kind plus the current user id. State is
only changed by dispatching actions; reducers are pure and never mutate
the previous state, so any ``State`` handed out stays valid.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..shared.logging_config import configure_logging
from .config import LOG_DIR

logger = configure_logging("roomchat_client", "client.log", LOG_DIR)

Record = Dict[str, Any]
Collection = Dict[int, Record]


@dataclass(frozen=True)
class State:
    users: Collection = field(default_factory=dict)
    messages: Collection = field(default_factory=dict)
    rooms: Collection = field(default_factory=dict)
    mentions: Collection = field(default_factory=dict)
    current_user_id: Optional[int] = None


# Actions


@dataclass(frozen=True)
class ReceiveUser:
    user: Record


@dataclass(frozen=True)
class ReceiveUsers:
    users: Mapping[int, Record]


@dataclass(frozen=True)
class ReceiveCurrentUser:
    user: Record


@dataclass(frozen=True)
class RemoveCurrentUser:
    user_id: Optional[int]


@dataclass(frozen=True)
class ReceiveRoom:
    room: Record


@dataclass(frozen=True)
class ReceiveRooms:
    rooms: Mapping[int, Record]


@dataclass(frozen=True)
class RemoveRoom:
    room_id: int


@dataclass(frozen=True)
class ReceiveMessage:
    message: Record


@dataclass(frozen=True)
class ReceiveMessages:
    messages: Mapping[int, Record]


@dataclass(frozen=True)
class RemoveMessage:
    message_id: int


@dataclass(frozen=True)
class ReceiveMention:
    mention: Record


@dataclass(frozen=True)
class ReceiveMentions:
    mentions: Mapping[int, Record]


@dataclass(frozen=True)
class RemoveMention:
    mention_id: int


@dataclass(frozen=True)
class ReadMention:
    mention_id: int


# Collection helpers


def merge_record(collection: Collection, record: Record, key: Optional[int] = None) -> Collection:
    """Upsert one record, shallow-merging its fields over any earlier copy."""
    record_id = int(record.get("id", key))
    merged = dict(collection)
    merged[record_id] = {**collection.get(record_id, {}), **record, "id": record_id}
    return merged


def merge_records(collection: Collection, records: Mapping[Any, Record]) -> Collection:
    merged = collection
    for key, record in records.items():
        merged = merge_record(merged, record, key)
    return merged


def remove_record(collection: Collection, record_id: Optional[int]) -> Collection:
    if record_id not in collection:
        return collection
    remaining = dict(collection)
    del remaining[record_id]
    return remaining


# Reducers


def users_reducer(users: Collection, action: Any) -> Collection:
    if isinstance(action, (ReceiveUser, ReceiveCurrentUser)):
        return merge_record(users, action.user)
    if isinstance(action, ReceiveUsers):
        return merge_records(users, action.users)
    if isinstance(action, RemoveCurrentUser):
        return remove_record(users, action.user_id)
    return users


def current_user_id_reducer(current_user_id: Optional[int], action: Any) -> Optional[int]:
    if isinstance(action, ReceiveCurrentUser):
        return int(action.user["id"])
    if isinstance(action, RemoveCurrentUser):
        return None
    return current_user_id


def rooms_reducer(rooms: Collection, action: Any) -> Collection:
    if isinstance(action, ReceiveRoom):
        return merge_record(rooms, action.room)
    if isinstance(action, ReceiveRooms):
        return merge_records(rooms, action.rooms)
    if isinstance(action, RemoveRoom):
        return remove_record(rooms, action.room_id)
    return rooms


def messages_reducer(messages: Collection, action: Any) -> Collection:
    if isinstance(action, ReceiveMessage):
        return merge_record(messages, action.message)
    if isinstance(action, ReceiveMessages):
        return merge_records(messages, action.messages)
    if isinstance(action, RemoveMessage):
        return remove_record(messages, action.message_id)
    if isinstance(action, RemoveRoom):
        # Mirror the server-side cascade; mentions of these messages stay but drop out of view.
        return {key: m for key, m in messages.items() if m.get("room_id") != action.room_id}
    return messages


def mentions_reducer(mentions: Collection, action: Any) -> Collection:
    if isinstance(action, ReceiveMention):
        return merge_record(mentions, action.mention)
    if isinstance(action, ReceiveMentions):
        return merge_records(mentions, action.mentions)
    if isinstance(action, RemoveMention):
        return remove_record(mentions, action.mention_id)
    if isinstance(action, ReadMention):
        if action.mention_id not in mentions:
            return mentions
        return merge_record(mentions, {"id": action.mention_id, "read": True})
    return mentions


def root_reducer(state: State, action: Any) -> State:
    return replace(
        state,
        users=users_reducer(state.users, action),
        messages=messages_reducer(state.messages, action),
        rooms=rooms_reducer(state.rooms, action),
        mentions=mentions_reducer(state.mentions, action),
        current_user_id=current_user_id_reducer(state.current_user_id, action),
    )


class Store:
    """Owner of the current ``State``; pass one instance to every component."""

    def __init__(self, state: Optional[State] = None):
        self._state = state or State()
        self._listeners: List[Callable[[State], None]] = []

    @property
    def state(self) -> State:
        return self._state

    def dispatch(self, *actions: Any) -> State:
        """Apply ``actions`` in order, then notify subscribers once."""
        state = self._state
        for action in actions:
            logger.debug("ACTION %s", action)
            state = root_reducer(state, action)
        self._state = state
        for listener in list(self._listeners):
            listener(state)
        return state

    def subscribe(self, listener: Callable[[State], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def current_user(self) -> Optional[Record]:
        state = self._state
        if state.current_user_id is None:
            return None
        return state.users.get(state.current_user_id)
