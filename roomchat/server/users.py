"""Account and session routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..shared.dto import UserDTO
from ..shared.logging_config import configure_logging
from . import schemas
from .auth import (
    check_password,
    current_user,
    hash_password,
    login_user,
    logout_user,
    new_session_token,
    require_logged_in,
)
from .database import get_db
from .models import User

router = APIRouter(prefix="/users", tags=["users"])
logger = configure_logging("roomchat_server", "server.log")

MIN_PASSWORD_LENGTH = 6


def _validate_signup(db: Session, params: schemas.Credentials) -> List[str]:
    errors = []
    if not params.username.strip():
        errors.append("Username can't be blank")
    elif db.query(User).filter(User.username == params.username).first():
        errors.append("Username has already been taken")
    if len(params.password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password is too short (minimum is {MIN_PASSWORD_LENGTH} characters)")
    return errors


@router.post("")
def create(payload: schemas.UserParams, response: Response, db: Session = Depends(get_db)):
    params = payload.user
    errors = _validate_signup(db, params)
    if errors:
        logger.info("SIGNUP_FAIL username=%s reasons=%s", params.username, len(errors))
        raise HTTPException(status_code=422, detail=errors)

    user = User(
        username=params.username,
        password_digest=hash_password(params.password),
        session_token=new_session_token(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    login_user(response, db, user)
    logger.info("SIGNUP_SUCCESS username=%s user_id=%s", user.username, user.id)
    return {"user": schemas.serialize(UserDTO, user)}


@router.post("/login")
def login(payload: schemas.UserParams, response: Response, db: Session = Depends(get_db)):
    params = payload.user
    user: Optional[User] = db.query(User).filter(User.username == params.username).first()
    if not user or not check_password(params.password, user.password_digest):
        logger.info("LOGIN_FAIL username=%s", params.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=["The provided credentials were invalid."],
        )
    login_user(response, db, user)
    logger.info("LOGIN_SUCCESS username=%s user_id=%s", user.username, user.id)
    return {"user": schemas.serialize(UserDTO, user)}


@router.delete("/logout")
def logout(user: User = Depends(require_logged_in), db: Session = Depends(get_db)):
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    logout_user(response, db, user)
    logger.info("LOGOUT user_id=%s", user.id)
    return response


@router.get("/restore_user")
def restore_user(user: Optional[User] = Depends(current_user)):
    if user is None:
        return {"user": None}
    return {"user": schemas.serialize(UserDTO, user)}
