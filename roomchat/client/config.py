"""Client configuration values."""
import os
from pathlib import Path

STORAGE_FILE = Path(os.environ.get("ROOMCHAT_STORAGE", Path.home() / ".roomchat_client.json"))
SERVER_URL = os.environ.get("ROOMCHAT_SERVER_URL", "http://127.0.0.1:8000")
API_PREFIX = "api"
REQUEST_TIMEOUT = 10
CSRF_HEADER = "X-CSRF-Token"
LOG_DIR = STORAGE_FILE.parent
