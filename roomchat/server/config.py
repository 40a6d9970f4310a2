"""Server configuration values."""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DATABASE_URL = os.environ.get("ROOMCHAT_DATABASE_URL", f"sqlite:///{BASE_DIR / 'roomchat.db'}")
SECRET_KEY = os.environ.get("ROOMCHAT_SECRET_KEY", "roomchat-development-secret")
SESSION_COOKIE = "session_token"
CSRF_HEADER = "X-CSRF-Token"
SEED_PASSWORD = "123456"
