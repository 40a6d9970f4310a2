"""Mention routes for the signed-in user."""
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..shared.dto import MentionDTO, MessageDTO, UserDTO
from . import schemas
from .auth import require_logged_in
from .database import get_db
from .models import Mention, User

router = APIRouter(prefix="/mentions", tags=["mentions"])


@router.get("")
def index(db: Session = Depends(get_db), user: User = Depends(require_logged_in)):
    mentions = db.query(Mention).filter(Mention.user_id == user.id).all()
    messages = [mention.message for mention in mentions]
    authors: Dict[int, User] = {message.author.id: message.author for message in messages}
    return {
        "mentions": schemas.serialize_keyed(MentionDTO, mentions),
        "messages": schemas.serialize_keyed(MessageDTO, messages),
        "users": schemas.serialize_keyed(UserDTO, authors.values()),
    }


@router.patch("/{mention_id}/read")
def read(mention_id: int, db: Session = Depends(get_db), user: User = Depends(require_logged_in)):
    mention = db.query(Mention).filter(Mention.id == mention_id, Mention.user_id == user.id).first()
    if not mention:
        raise HTTPException(status_code=404, detail=["Mention not found"])
    mention.read = True
    db.commit()
    db.refresh(mention)
    return schemas.serialize(MentionDTO, mention)
