import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from radiotrack.config import settings
from radiotrack.dependencies import get_store, get_photo_store
from radiotrack.schemas.checkout_log import ArchiveInfo
from radiotrack.schemas.radio import Radio
from radiotrack.services.photo_store import PhotoStore
from radiotrack.storage import RecordStore
import radiotrack.services.checkout_log_service as log_svc
import radiotrack.services.maintenance_service as maintenance_svc
import radiotrack.services.radio_service as radio_svc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


class BackupResponse(BaseModel):
    message: str
    backup: str


class ReinitializeResponse(BaseModel):
    message: str
    backup: str
    created: int
    skipped: list[str]
    warnings: list[str]


@router.post("/archive-log", response_model=ArchiveInfo)
def archive_log(store: RecordStore = Depends(get_store)):
    return log_svc.archive_and_clear(store)


@router.get("/archives", response_model=list[ArchiveInfo])
def list_archives(store: RecordStore = Depends(get_store)):
    return log_svc.list_archives(store)


@router.post("/backup-users", response_model=BackupResponse)
def backup_users(store: RecordStore = Depends(get_store)):
    name = maintenance_svc.backup_users(store)
    return BackupResponse(message="Backup created successfully.", backup=name)


@router.post("/init-users", response_model=ReinitializeResponse)
def init_users(store: RecordStore = Depends(get_store), photos: PhotoStore = Depends(get_photo_store)):
    result = maintenance_svc.reinitialize_users(store, photos, settings.USER_IMPORT_DIR)
    return ReinitializeResponse(message="User database initialized successfully.", **result)


@router.post("/init-inventory", response_model=list[Radio], status_code=201)
def init_inventory(store: RecordStore = Depends(get_store)):
    return radio_svc.initialize_default_inventory(
        store, settings.DEFAULT_INVENTORY_SIZE, settings.DEFAULT_RADIO_NAME
    )
