import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# main builds a module-level app on import; keep it away from real services
os.environ["UPLOAD_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="irbc-uploads-")

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from main import create_app
from modules.incidents.store import IncidentStore
from modules.shared.config import Settings
from modules.uploads.storage import LocalImageStorage

ADMIN_SECRET = "town-hall-secret"
JPEG_HEADER = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00"
PNG_HEADER = b"\x89PNG\r\n\x1a\n"


class InMemoryIncidentStore(IncidentStore):
    """IncidentStore with the SQL swapped for a dict; validation stays the real one"""

    def __init__(self):
        self.rows = {}
        self.fail_with = None
        self.calls = 0
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _touch(self):
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with

    async def _insert(self, incident_id, incident):
        self._touch()
        self._clock += timedelta(seconds=1)
        self.rows[incident_id] = {
            "id": incident_id,
            "title": incident.title,
            "details": incident.details,
            "address": incident.address,
            "landmark": incident.landmark,
            "image_url": incident.image_url,
            "status": "Pending",
            "admin_notes": "",
            "created_at": self._clock,
        }
        return {"id": incident_id}

    async def _select_all(self):
        self._touch()
        return sorted(self.rows.values(), key=lambda r: r["created_at"], reverse=True)

    async def _update_status(self, incident_id, status):
        self._touch()
        row = self.rows.get(incident_id)
        if row is None:
            return None
        row["status"] = status.value
        return row


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir):
    return Settings(admin_secret=ADMIN_SECRET, upload_dir=str(upload_dir))


@pytest.fixture
def store():
    return InMemoryIncidentStore()


@pytest.fixture
def image_storage(upload_dir):
    return LocalImageStorage(str(upload_dir))


@pytest.fixture
def client(settings, store, image_storage):
    # not used as a context manager, so startup (database pool) never runs
    return TestClient(create_app(settings, incident_store=store, image_storage=image_storage))


@pytest.fixture
def admin_headers():
    return {"X-Admin-Secret": ADMIN_SECRET}


def jpeg_bytes(size=200 * 1024):
    return JPEG_HEADER + b"\x00" * (size - len(JPEG_HEADER))


def png_bytes(size=1024):
    return PNG_HEADER + b"\x00" * (size - len(PNG_HEADER))


def submission(**overrides):
    form = {"title": "Pothole", "details": "Large pothole", "address": "Main St"}
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}
