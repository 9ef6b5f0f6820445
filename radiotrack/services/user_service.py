import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from radiotrack.errors import BadRequestError, ConflictError, NotFoundError, StaleWriteError, StorageFailure
from radiotrack.schemas.user import User, UserCreate, UserUpdate
from radiotrack.services.photo_store import PhotoStore, derived_filename
from radiotrack.storage import RecordStore

logger = logging.getLogger(__name__)

USERS = "users"

PHOTO_NOT_SAVED = "Profile photo could not be saved."


def _load(store: RecordStore) -> tuple[list[User], str]:
    snap = store.load(USERS)
    return [User.model_validate(r) for r in snap.records], snap.version


def _save(store: RecordStore, users: list[User], version: str | None) -> None:
    store.save(USERS, [u.model_dump(by_alias=True, mode="json") for u in users], expected_version=version)


def _name_taken(users: list[User], name: str, exclude_id: str | None = None) -> bool:
    """Names must differ case-insensitively and must not share a derived photo filename."""
    lowered = name.lower()
    photo_file = derived_filename(name)
    return any(
        u.id != exclude_id and (u.name.lower() == lowered or derived_filename(u.name) == photo_file)
        for u in users
    )


def list_users(store: RecordStore, sort: bool = True) -> list[User]:
    users, _ = _load(store)
    if sort:
        users.sort(key=lambda u: u.name)
    return users


def find_user(store: RecordStore, user_id: str) -> User | None:
    users, _ = _load(store)
    return next((u for u in users if u.id == user_id), None)


def get_user(store: RecordStore, user_id: str) -> User:
    user = find_user(store, user_id)
    if not user:
        raise NotFoundError("User not found.")
    return user


def create_user(store: RecordStore, photos: PhotoStore, data: UserCreate) -> tuple[User, list[str]]:
    """Returns the new user and warnings for photo operations that failed."""
    name = (data.name or "").strip()
    if not name:
        raise BadRequestError("Name is required.")
    warnings = []
    with store.locked(USERS):
        users, version = _load(store)
        if _name_taken(users, name):
            raise ConflictError(f'User with the name "{name}" already exists.')

        photo_url = ""
        if data.profile_photo:
            photo_url = photos.save(name, data.profile_photo) or ""
            if not photo_url:
                warnings.append(PHOTO_NOT_SAVED)

        user = User(
            id=str(uuid.uuid4()),
            name=name,
            profile_photo=photo_url,
            last_updated=datetime.now(timezone.utc),
        )
        users.append(user)
        _save(store, users, version)
    logger.info(f"AUDIT: user '{name}' created ({user.id})")
    return user, warnings


def update_user(store: RecordStore, photos: PhotoStore, user_id: str, data: UserUpdate) -> tuple[User, list[str]]:
    new_name = data.name.strip() if data.name is not None else None
    if new_name == "":
        raise BadRequestError("Name cannot be empty.")
    warnings = []
    with store.locked(USERS):
        users, version = _load(store)
        idx = next((i for i, u in enumerate(users) if u.id == user_id), None)
        if idx is None:
            raise NotFoundError("User not found.")
        user = users[idx]
        name = new_name or user.name
        if name != user.name and _name_taken(users, name, exclude_id=user.id):
            raise ConflictError(f'User with the name "{name}" already exists.')

        photo_url = user.profile_photo
        # Clients echo the current URL back unchanged; anything else is new image data
        if data.profile_photo and data.profile_photo != user.profile_photo:
            saved = photos.save(name, data.profile_photo, filename=Path(photo_url).name if photo_url else None)
            if saved:
                photo_url = saved
            else:
                warnings.append(PHOTO_NOT_SAVED)

        renamed = None
        if name != user.name and photo_url:
            renamed = photos.rename(user.name, name)
            if renamed:
                photo_url = renamed

        updated = user.model_copy(update={
            "name": name,
            "profile_photo": photo_url,
            "last_updated": datetime.now(timezone.utc),
        })
        users[idx] = updated
        try:
            _save(store, users, version)
        except (StorageFailure, StaleWriteError):
            if renamed:
                # The stored record still names the old file
                photos.rename(name, user.name)
            raise
    if name != user.name:
        logger.info(f"AUDIT: user '{user.name}' renamed to '{name}' ({user_id})")
    return updated, warnings


def delete_user(store: RecordStore, photos: PhotoStore, user_id: str) -> User:
    with store.locked(USERS):
        users, version = _load(store)
        idx = next((i for i, u in enumerate(users) if u.id == user_id), None)
        if idx is None:
            raise NotFoundError("User not found.")
        user = users.pop(idx)
        _save(store, users, version)
        if user.profile_photo:
            archived = photos.archive(user.profile_photo)
            if archived:
                logger.info(f"Profile photo of '{user.name}' archived to {archived}")
    logger.info(f"AUDIT: user '{user.name}' deleted ({user_id})")
    return user
