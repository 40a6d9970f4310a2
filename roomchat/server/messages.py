"""Message routes; posting a message records a mention per referenced user."""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..shared.dto import MessageDTO
from ..shared.logging_config import configure_logging
from ..shared.utils import mentioned_usernames
from . import schemas
from .auth import require_logged_in
from .database import get_db
from .models import Mention, Message, Room, User

router = APIRouter(prefix="/messages", tags=["messages"])
logger = configure_logging("roomchat_server", "server.log")


def _create_mentions(db: Session, message: Message) -> int:
    names = mentioned_usernames(message.body)
    if not names:
        return 0
    users = db.query(User).filter(User.username.in_(names)).all()
    for user in users:
        db.add(Mention(user_id=user.id, message_id=message.id, read=False))
    return len(users)


@router.post("")
def create(payload: schemas.MessageParams, db: Session = Depends(get_db), user: User = Depends(require_logged_in)):
    params = payload.message
    errors = []
    if params.room_id is None or not db.query(Room).filter(Room.id == params.room_id).first():
        errors.append("Room must exist")
    if not params.body.strip():
        errors.append("Body can't be blank")
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    message = Message(author_id=user.id, room_id=params.room_id, body=params.body)
    db.add(message)
    db.flush()
    mentioned = _create_mentions(db, message)
    db.commit()
    db.refresh(message)
    logger.info(
        "MESSAGE_SENT author_id=%s room_id=%s message_id=%s mentions=%s",
        user.id,
        message.room_id,
        message.id,
        mentioned,
    )
    return schemas.serialize(MessageDTO, message)


@router.delete("/{message_id}")
def destroy(message_id: int, db: Session = Depends(get_db), user: User = Depends(require_logged_in)):
    message = db.query(Message).filter(Message.id == message_id).first()
    if not message:
        raise HTTPException(status_code=404, detail=["Message not found"])
    db.delete(message)
    db.commit()
    logger.info("MESSAGE_DELETED message_id=%s user_id=%s", message_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
