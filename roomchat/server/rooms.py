"""Room routes."""
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..shared.dto import MessageDTO, RoomDTO, UserDTO
from ..shared.logging_config import configure_logging
from . import schemas
from .auth import require_logged_in
from .database import get_db
from .models import Room, User

router = APIRouter(prefix="/rooms", tags=["rooms"])
logger = configure_logging("roomchat_server", "server.log")


def _get_room(db: Session, room_id: int) -> Room:
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise HTTPException(status_code=404, detail=["Room not found"])
    return room


@router.get("")
def index(db: Session = Depends(get_db)):
    rooms: List[Room] = db.query(Room).order_by(Room.id).all()
    owners: Dict[int, User] = {room.owner.id: room.owner for room in rooms}
    return {
        "rooms": schemas.serialize_keyed(RoomDTO, rooms),
        "users": schemas.serialize_keyed(UserDTO, owners.values()),
    }


@router.get("/{room_id}")
def show(room_id: int, db: Session = Depends(get_db), _: User = Depends(require_logged_in)):
    room = _get_room(db, room_id)
    users: Dict[int, User] = {room.owner.id: room.owner}
    for message in room.messages:
        users[message.author.id] = message.author
        for mention in message.mentions:
            users[mention.user.id] = mention.user
    return {
        "room": schemas.serialize(RoomDTO, room),
        "messages": schemas.serialize_keyed(MessageDTO, room.messages),
        "users": schemas.serialize_keyed(UserDTO, users.values()),
    }


@router.post("")
def create(payload: schemas.RoomParams, db: Session = Depends(get_db), user: User = Depends(require_logged_in)):
    params = payload.room
    if not params.name.strip():
        raise HTTPException(status_code=422, detail=["Name can't be blank"])
    owner_id = params.owner_id or user.id
    if not db.query(User).filter(User.id == owner_id).first():
        raise HTTPException(status_code=422, detail=["Owner must exist"])
    room = Room(name=params.name, owner_id=owner_id)
    db.add(room)
    db.commit()
    db.refresh(room)
    logger.info("ROOM_CREATED room_id=%s owner_id=%s", room.id, owner_id)
    return schemas.serialize(RoomDTO, room)


@router.delete("/{room_id}")
def destroy(room_id: int, db: Session = Depends(get_db), user: User = Depends(require_logged_in)):
    room = _get_room(db, room_id)
    db.delete(room)
    db.commit()
    logger.info("ROOM_DELETED room_id=%s user_id=%s", room_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
