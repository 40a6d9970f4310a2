"""Derived mention-notification view over the entity store."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from .store import State


@dataclass(frozen=True)
class AnnotatedMention:
    id: int
    user_id: int
    message_id: int
    read: bool
    message: Dict[str, Any] = field(default_factory=dict)
    room: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MentionFeed:
    mentions: List[AnnotatedMention]
    num_unread: int


def _timestamp(value: Any) -> float:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    if isinstance(value, str):
        try:
            return _timestamp(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            return 0.0
    return 0.0


def _sort_key(mention: AnnotatedMention):
    # Unread first, then newest message first, then highest mention id.
    return (bool(mention.read), -_timestamp(mention.message.get("created_at")), -mention.id)


def get_mentions(state: State) -> MentionFeed:
    """Return the current user's displayable mentions, ordered, with the unread count.

    Mentions whose message is not in the store are left out; a room that is
    no longer in the store is represented by an empty dict. The result is
    rebuilt on every call.
    """
    annotated = []
    num_unread = 0
    for mention in state.mentions.values():
        if mention.get("user_id") != state.current_user_id or state.current_user_id is None:
            continue
        message = state.messages.get(mention.get("message_id"))
        if message is None:
            continue
        read = bool(mention.get("read", False))
        if not read:
            num_unread += 1
        author = state.users.get(message.get("author_id"), {}).get("username")
        annotated.append(
            AnnotatedMention(
                id=mention["id"],
                user_id=mention["user_id"],
                message_id=mention["message_id"],
                read=read,
                message={**message, "author": author},
                room=state.rooms.get(message.get("room_id"), {}),
            )
        )
    annotated.sort(key=_sort_key)
    return MentionFeed(mentions=annotated, num_unread=num_unread)
