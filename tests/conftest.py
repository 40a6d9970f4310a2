import os
import tempfile

os.environ.setdefault("ROOMCHAT_LOG_DIR", tempfile.mkdtemp(prefix="roomchat-logs-"))

import pytest
from fastapi.testclient import TestClient

from roomchat.client.app import ChatController
from roomchat.client.storage import LocalStorage
from roomchat.server.main import create_app

BASE_URL = "http://testserver"


@pytest.fixture
def server_app():
    return create_app("sqlite://", seed=True)


@pytest.fixture
def http(server_app):
    return TestClient(server_app)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "client.json")


@pytest.fixture
def controller(storage, http):
    return ChatController(BASE_URL, storage=storage, session=http)


@pytest.fixture
def started(controller):
    controller.start(lambda: None)
    return controller


@pytest.fixture
def garfield(started):
    started.login("garfield", "123456")
    return started
