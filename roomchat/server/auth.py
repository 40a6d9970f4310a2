"""Authentication helpers: password digests, session cookies and CSRF tokens."""
import hashlib
import hmac
import secrets
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from ..shared.logging_config import configure_logging
from .config import SECRET_KEY, SESSION_COOKIE
from .database import get_db
from .models import User

logger = configure_logging("roomchat_server", "server.log")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def check_password(password: str, digest: str) -> bool:
    return bcrypt.checkpw(password.encode(), digest.encode())


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def _sign(nonce: str) -> str:
    return hmac.new(SECRET_KEY.encode(), nonce.encode(), hashlib.sha256).hexdigest()


def issue_csrf_token() -> str:
    """Fresh anti-forgery token; signed so it survives a server restart."""
    nonce = secrets.token_urlsafe(16)
    return f"{nonce}.{_sign(nonce)}"


def verify_csrf_token(token: Optional[str]) -> bool:
    if not token or "." not in token:
        return False
    nonce, signature = token.rsplit(".", 1)
    return hmac.compare_digest(_sign(nonce), signature)


def current_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        return None
    return db.query(User).filter(User.session_token == token).first()


def require_logged_in(user: Optional[User] = Depends(current_user)) -> User:
    """FastAPI dependency returning the signed-in user or failing with 401."""
    if user is None:
        logger.warning("UNAUTHORIZED_ACCESS reason=no_session")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=["You must be logged in"])
    return user


def login_user(response: Response, db: Session, user: User) -> None:
    user.session_token = new_session_token()
    db.commit()
    response.set_cookie(SESSION_COOKIE, user.session_token, httponly=True, samesite="lax")


def logout_user(response: Response, db: Session, user: User) -> None:
    user.session_token = new_session_token()
    db.commit()
    response.delete_cookie(SESSION_COOKIE)
