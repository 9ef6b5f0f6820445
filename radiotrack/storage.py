"""
Record store: whole-collection persistence of record lists.

Every collection is an ordered list of JSON objects addressed by name
(`users`, `radios`, `checkout-log`, `backups/users-backup-...`). There is no
indexing or querying; callers load the full list, filter and mutate it in
memory and save the full list back.

Each load returns a version token. Passing it back to `save` turns the write
into a compare-and-swap: if the collection changed in between, the save is
rejected with StaleWriteError and nothing is written.
"""
import hashlib
import json
import logging
import os
import threading
import uuid
from contextlib import contextmanager, suppress
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from radiotrack.errors import StaleWriteError, StorageFailure
from radiotrack.models.record_collection import RecordCollection

logger = logging.getLogger(__name__)

# Version of a collection that does not exist yet (or is an empty file)
EMPTY_VERSION = ""


@dataclass(frozen=True)
class Snapshot:
    records: list[dict] = field(default_factory=list)
    version: str = EMPTY_VERSION


class RecordStore:
    """Base class for record store backends."""

    def __init__(self):
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def locked(self, name: str):
        """Serialize load-modify-save cycles on one collection within this store."""
        with self._locks_guard:
            lock = self._locks.setdefault(name, threading.RLock())
        with lock:
            yield

    def load(self, name: str) -> Snapshot:
        raise NotImplementedError

    def save(self, name: str, records: list[dict], expected_version: str | None = None) -> str:
        raise NotImplementedError

    def exists(self, name: str) -> bool:
        raise NotImplementedError

    def list_collections(self, prefix: str = "") -> list[str]:
        raise NotImplementedError


def _digest(raw: bytes | None) -> str:
    if not raw or not raw.strip():
        return EMPTY_VERSION
    return hashlib.sha1(raw).hexdigest()


class JsonFileStore(RecordStore):
    """One `<root>/<name>.json` file per collection, holding a plain JSON array."""

    def __init__(self, root: str | Path):
        super().__init__()
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        return self.root / f"{name}.json"

    def _read(self, name: str) -> bytes | None:
        path = self._path(name)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.exception(f"Failed to read collection '{name}' from {path}")
            raise StorageFailure() from e

    def load(self, name: str) -> Snapshot:
        raw = self._read(name)
        version = _digest(raw)
        if version == EMPTY_VERSION:
            return Snapshot()
        try:
            records = json.loads(raw)
        except ValueError as e:
            logger.exception(f"Collection '{name}' is not valid JSON")
            raise StorageFailure() from e
        if not isinstance(records, list):
            logger.error(f"Collection '{name}' does not contain a JSON array")
            raise StorageFailure()
        return Snapshot(records=records, version=version)

    def save(self, name: str, records: list[dict], expected_version: str | None = None) -> str:
        data = json.dumps(records, indent=2, ensure_ascii=False).encode("utf-8")
        path = self._path(name)
        with self.locked(name):
            if expected_version is not None and _digest(self._read(name)) != expected_version:
                raise StaleWriteError(name)
            tmp = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                tmp.write_bytes(data)
                # os.replace is atomic, readers see either the old or the new file
                os.replace(tmp, path)
            except OSError as e:
                with suppress(OSError):
                    tmp.unlink(missing_ok=True)
                logger.exception(f"Failed to write collection '{name}' to {path}")
                raise StorageFailure() from e
        return _digest(data)

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def list_collections(self, prefix: str = "") -> list[str]:
        if not self.root.is_dir():
            return []
        names = []
        for path in self.root.rglob("*.json"):
            if path.name.startswith("."):
                continue
            name = path.relative_to(self.root).with_suffix("").as_posix()
            if name.startswith(prefix):
                names.append(name)
        return sorted(names)


class SqlRecordStore(RecordStore):
    """Collections stored as rows of the `record_collections` table."""

    def __init__(self, session_factory):
        super().__init__()
        self.session_factory = session_factory

    def load(self, name: str) -> Snapshot:
        try:
            with self.session_factory() as db:
                row = db.get(RecordCollection, name)
                if row is None:
                    return Snapshot()
                return Snapshot(records=list(row.payload or []), version=row.revision)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load collection '{name}'")
            raise StorageFailure() from e

    def save(self, name: str, records: list[dict], expected_version: str | None = None) -> str:
        revision = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        with self.locked(name):
            try:
                with self.session_factory() as db:
                    if expected_version is None:
                        row = db.get(RecordCollection, name)
                        if row is None:
                            db.add(RecordCollection(name=name, revision=revision, payload=records, updated_at=now))
                        else:
                            row.payload = records
                            row.revision = revision
                            row.updated_at = now
                    elif expected_version == EMPTY_VERSION:
                        # Insert fails with IntegrityError if another writer created the row first
                        db.add(RecordCollection(name=name, revision=revision, payload=records, updated_at=now))
                    else:
                        result = db.execute(
                            update(RecordCollection)
                            .where(RecordCollection.name == name, RecordCollection.revision == expected_version)
                            .values(payload=records, revision=revision, updated_at=now)
                            .execution_options(synchronize_session=False)
                        )
                        if result.rowcount != 1:
                            raise StaleWriteError(name)
                    db.commit()
            except IntegrityError as e:
                raise StaleWriteError(name) from e
            except SQLAlchemyError as e:
                logger.exception(f"Failed to save collection '{name}'")
                raise StorageFailure() from e
        return revision

    def exists(self, name: str) -> bool:
        try:
            with self.session_factory() as db:
                return db.get(RecordCollection, name) is not None
        except SQLAlchemyError as e:
            logger.exception(f"Failed to look up collection '{name}'")
            raise StorageFailure() from e

    def list_collections(self, prefix: str = "") -> list[str]:
        try:
            with self.session_factory() as db:
                names = db.scalars(
                    select(RecordCollection.name)
                    .where(RecordCollection.name.startswith(prefix, autoescape=True))
                    .order_by(RecordCollection.name)
                ).all()
        except SQLAlchemyError as e:
            logger.exception(f"Failed to list collections with prefix '{prefix}'")
            raise StorageFailure() from e
        return list(names)


def snapshot_name(store: RecordStore, folder: str, stem: str) -> str:
    """Timestamped collection name under `folder` that does not exist yet."""
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    name = f"{folder}/{stem}-{timestamp}"
    candidate, n = name, 1
    while store.exists(candidate):
        candidate = f"{name}-{n}"
        n += 1
    return candidate
