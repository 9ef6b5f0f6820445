import pytest
from fastapi.testclient import TestClient
from radiotrack.config import settings
from radiotrack.dependencies import get_store, get_photo_store
from radiotrack.main import app
from radiotrack.services.photo_store import FilePhotoStore
from radiotrack.storage import JsonFileStore


@pytest.fixture
def api_store(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def api_photos(tmp_path):
    return FilePhotoStore(tmp_path / "profile-images")


@pytest.fixture(scope="function")
def client(api_store, api_photos, tmp_path, monkeypatch):
    # Keep the lifespan hook from touching the working directory
    monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setattr(settings, "PROFILE_IMAGES_DIR", str(tmp_path / "profile-images"))
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "json")

    app.dependency_overrides[get_store] = lambda: api_store
    app.dependency_overrides[get_photo_store] = lambda: api_photos

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
