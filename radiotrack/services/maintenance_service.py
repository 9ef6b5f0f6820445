"""
Maintenance operations: backups and bulk re-initialisation.

These are destructive, out-of-band admin actions. They go through the same
record store as everything else and keep a snapshot of what they replace.
"""
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from radiotrack.errors import NotFoundError
from radiotrack.schemas.user import User
from radiotrack.services.photo_store import IMAGE_SUFFIXES, PhotoStore
from radiotrack.services.user_service import USERS
from radiotrack.storage import RecordStore, snapshot_name

logger = logging.getLogger(__name__)

BACKUP_FOLDER = "backups"


def backup_users(store: RecordStore) -> str:
    """Copy the user collection to `backups/users-backup-<timestamp>`."""
    with store.locked(USERS):
        records = store.load(USERS).records
        name = snapshot_name(store, BACKUP_FOLDER, "users-backup")
        store.save(name, records)
    logger.info(f"AUDIT: backed up {len(records)} users to '{name}'")
    return name


def _display_name(stem: str) -> str:
    """`jane_doe` → `Jane Doe`."""
    return " ".join(word[:1].upper() + word[1:] for word in stem.replace("_", " ").split())


def reinitialize_users(store: RecordStore, photos: PhotoStore, source_dir: str | Path) -> dict:
    """
    Replace all users with one user per image file in `source_dir`.

    The current collection is backed up first. Images are copied into the
    photo store under their original filename.

    Returns dict with:
      - backup: str, name of the backup snapshot
      - created: int
      - skipped: list[str], files whose display name was already taken
      - warnings: list[str]
    """
    source = Path(source_dir)
    if not source.is_dir():
        raise NotFoundError(f"Import folder '{source_dir}' not found.")

    backup = backup_users(store)
    users: list[User] = []
    seen: set[str] = set()
    skipped: list[str] = []
    warnings: list[str] = []

    for path in sorted(source.iterdir()):
        if not path.is_file() or path.suffix.lower() not in IMAGE_SUFFIXES:
            continue
        name = _display_name(path.stem)
        if not name or name.lower() in seen:
            skipped.append(path.name)
            continue
        seen.add(name.lower())
        photo_url = photos.import_file(path)
        if not photo_url:
            warnings.append(f"Profile photo '{path.name}' could not be copied.")
        users.append(User(
            id=str(uuid.uuid4()),
            name=name,
            profile_photo=photo_url or "",
            last_updated=datetime.now(timezone.utc),
        ))

    with store.locked(USERS):
        store.save(USERS, [u.model_dump(by_alias=True, mode="json") for u in users])

    logger.info(f"AUDIT: user database re-initialized from '{source}': {len(users)} users, backup '{backup}'")
    return {"backup": backup, "created": len(users), "skipped": skipped, "warnings": warnings}
