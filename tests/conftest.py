"""Shared fixtures: an app wired to a temporary upload root and SQLite store."""
import pytest

from app import create_app
from observability import metrics
from services.storage.chat_image_records import create_schema
from services.upload_handler import UploadHandler

FROZEN_TS = 1700000000


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def database_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'chat_images.db'}"
    create_schema(url)
    return url


@pytest.fixture
def upload_root(tmp_path):
    root = tmp_path / "www"
    root.mkdir()
    return root


@pytest.fixture
def app(upload_root, database_url, tmp_path):
    app = create_app({
        "TESTING": True,
        "UPLOAD_ROOT": str(upload_root),
        "DATABASE_URL": database_url,
        "DEBUG_LOG_PATH": str(tmp_path / "storage" / "error_debug.log"),
    })
    app.extensions["chat_image_handler"] = UploadHandler.from_config(
        app.config, clock=lambda: FROZEN_TS + 0.4
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()
