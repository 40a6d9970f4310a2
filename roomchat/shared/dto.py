"""Wire records shared by the client gateway and the reference server."""
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for every JSON record: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    def to_state(self) -> Dict:
        """Fields that were present in the payload, keyed by python name."""
        return self.model_dump(exclude_unset=True)

    def to_wire(self) -> Dict:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class UserDTO(Record):
    id: int
    username: Optional[str] = None


class RoomDTO(Record):
    id: int
    name: Optional[str] = None
    owner_id: Optional[int] = None


class MessageDTO(Record):
    id: int
    room_id: Optional[int] = None
    author_id: Optional[int] = None
    body: Optional[str] = None
    created_at: Optional[datetime] = None


class MentionDTO(Record):
    id: int
    user_id: Optional[int] = None
    message_id: Optional[int] = None
    read: Optional[bool] = None


class UserEnvelope(Record):
    user: Optional[UserDTO] = None


class RoomsEnvelope(Record):
    rooms: Dict[int, RoomDTO] = {}
    users: Dict[int, UserDTO] = {}


class RoomEnvelope(Record):
    room: RoomDTO
    messages: Dict[int, MessageDTO] = {}
    users: Dict[int, UserDTO] = {}


class MentionsEnvelope(Record):
    mentions: Dict[int, MentionDTO] = {}
    messages: Dict[int, MessageDTO] = {}
    users: Dict[int, UserDTO] = {}


def keyed_state(records: Dict[int, Record]) -> Dict[int, Dict]:
    """Turn a parsed keyed collection into store-ready dicts."""
    return {record.id: record.to_state() for record in records.values()}
