"""Seed data for development and integration tests."""
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ..shared.logging_config import configure_logging
from .auth import hash_password, new_session_token
from .config import DATABASE_URL, SEED_PASSWORD
from .database import Base, make_engine, make_session_factory
from .models import Message, Room, User

logger = configure_logging("roomchat_server", "server.log")

SEED_USERNAMES = ("garfield", "sennacy")


def seed_database(engine: Engine) -> None:
    """Rebuild all tables and load the demo users, rooms and messages."""
    logger.info("SEED_START tables=reset")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db: Session = make_session_factory(engine)()
    try:
        users = [
            User(username=name, password_digest=hash_password(SEED_PASSWORD), session_token=new_session_token())
            for name in SEED_USERNAMES
        ]
        db.add_all(users)
        db.flush()

        rooms = [Room(name=f"{user.username.capitalize()}'s First Room", owner_id=user.id) for user in users]
        db.add_all(rooms)
        db.flush()

        for user in users:
            for room in rooms:
                db.add(Message(author_id=user.id, room_id=room.id, body="hello"))
        db.commit()
    finally:
        db.close()
    logger.info("SEED_DONE users=%s", len(SEED_USERNAMES))


if __name__ == "__main__":
    seed_database(make_engine(DATABASE_URL))
