"""FastAPI application entrypoint for the room chat reference server."""
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..shared.logging_config import configure_logging
from . import mentions, messages, rooms, users
from .auth import issue_csrf_token, verify_csrf_token
from .config import CSRF_HEADER, DATABASE_URL
from .database import Base, make_engine, make_session_factory
from .seeds import seed_database

logger = configure_logging("roomchat_server", "server.log")

SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}


def create_app(database_url: str = DATABASE_URL, seed: bool = False) -> FastAPI:
    engine = make_engine(database_url)
    if seed:
        seed_database(engine)
    else:
        Base.metadata.create_all(bind=engine)

    app = FastAPI(title="Room Chat Server", version="1.0.0")
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    @app.middleware("http")
    async def rotate_csrf_token(request: Request, call_next):
        if request.method not in SAFE_METHODS and not verify_csrf_token(request.headers.get(CSRF_HEADER)):
            logger.warning("CSRF_REJECTED method=%s path=%s", request.method, request.url.path)
            response = JSONResponse(status_code=422, content=["Invalid authenticity token"])
        else:
            response = await call_next(request)
        response.headers[CSRF_HEADER] = issue_csrf_token()
        return response

    for module in (users, rooms, messages, mentions):
        app.include_router(module.router, prefix="/api")

    @app.get("/")
    def root():
        return {"status": "ok"}

    return app


def main() -> None:
    uvicorn.run("roomchat.server.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    main()
