"""Pydantic schemas for request bodies and response serialization."""
from typing import Dict, Iterable, Optional, Type

from ..shared.dto import Record


class Credentials(Record):
    username: str = ""
    password: str = ""


class UserParams(Record):
    user: Credentials


class RoomFields(Record):
    name: str = ""
    owner_id: Optional[int] = None


class RoomParams(Record):
    room: RoomFields


class MessageFields(Record):
    room_id: Optional[int] = None
    body: str = ""


class MessageParams(Record):
    message: MessageFields


def serialize(dto: Type[Record], obj) -> Dict:
    """Render an ORM object as a camelCase JSON record."""
    return dto.model_validate(obj).model_dump(mode="json", by_alias=True)


def serialize_keyed(dto: Type[Record], objs: Iterable) -> Dict[str, Dict]:
    return {str(obj.id): serialize(dto, obj) for obj in objs}
