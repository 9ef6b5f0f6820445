from fastapi import Request

from radiotrack.config import Settings
from radiotrack.database import Base, SessionLocal, engine
from radiotrack.services.photo_store import FilePhotoStore, PhotoStore
from radiotrack.storage import JsonFileStore, RecordStore, SqlRecordStore
import radiotrack.models  # noqa: F401 register all models


def build_store(settings: Settings) -> RecordStore:
    if settings.STORAGE_BACKEND == "sql":
        Base.metadata.create_all(bind=engine)
        return SqlRecordStore(SessionLocal)
    return JsonFileStore(settings.DATA_DIR)


def build_photo_store(settings: Settings) -> PhotoStore:
    return FilePhotoStore(settings.PROFILE_IMAGES_DIR)


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_photo_store(request: Request) -> PhotoStore:
    return request.app.state.photos
