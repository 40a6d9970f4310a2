"""Database models for the room chat server."""
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .database import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_digest = Column(String, nullable=False)
    session_token = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=_now)

    owned_rooms = relationship("Room", back_populates="owner")
    messages = relationship("Message", back_populates="author")


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now)

    owner = relationship("User", back_populates="owned_rooms")
    messages = relationship("Message", back_populates="room", cascade="all, delete-orphan")


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime, default=_now)

    author = relationship("User", back_populates="messages")
    room = relationship("Room", back_populates="messages")
    mentions = relationship("Mention", back_populates="message", cascade="all, delete-orphan")


class Mention(Base):
    __tablename__ = "mentions"
    __table_args__ = (UniqueConstraint("user_id", "message_id"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    message_id = Column(Integer, ForeignKey("messages.id"), nullable=False, index=True)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now)

    user = relationship("User")
    message = relationship("Message", back_populates="mentions")
