"""
Profile photo files.

Photos live under one root directory, named after the user's display name
(the derived filename: lowercase, whitespace runs replaced by `_`, `.jpg`),
and are exposed to clients as `/images/<filename>`. Deleted users' photos are
moved to `<root>/archive/`.

All operations are best-effort: failures are logged and reported as None so
that callers can carry on with the record update.
"""
import base64
import logging
import os
import re
import shutil
import time
from pathlib import Path

logger = logging.getLogger(__name__)

URL_PREFIX = "/images/"
ARCHIVE_DIR = "archive"
IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".gif")

_DATA_URL_RE = re.compile(r"^data:image/[a-zA-Z0-9.+-]+;base64,")


def derived_filename(name: str) -> str:
    return re.sub(r"\s+", "_", name.strip().lower()) + ".jpg"


def decode_image(data: str) -> bytes:
    """Decode base64 image data, with or without a `data:image/...;base64,` prefix."""
    return base64.b64decode(_DATA_URL_RE.sub("", data.strip()), validate=True)


class PhotoStore:
    """Capability interface injected into the user registry."""

    def save(self, name: str, data: str, filename: str | None = None) -> str | None:
        """Store image data for `name`; returns the photo URL."""
        raise NotImplementedError

    def rename(self, old_name: str, new_name: str) -> str | None:
        """Move the photo of `old_name` to the derived filename of `new_name`."""
        raise NotImplementedError

    def archive(self, url: str) -> Path | None:
        raise NotImplementedError

    def import_file(self, source: Path) -> str | None:
        raise NotImplementedError

    def path_for(self, filename: str) -> Path | None:
        raise NotImplementedError


class FilePhotoStore(PhotoStore):
    def __init__(self, root: str | Path):
        self.root = Path(root)

    @staticmethod
    def url_for(filename: str) -> str:
        return f"{URL_PREFIX}{filename}"

    def save(self, name: str, data: str, filename: str | None = None) -> str | None:
        filename = Path(filename).name if filename else derived_filename(name)
        try:
            content = decode_image(data)
            self.root.mkdir(parents=True, exist_ok=True)
            (self.root / filename).write_bytes(content)
        except (OSError, ValueError) as e:
            logger.error(f"Error saving profile photo '{filename}': {e}")
            return None
        return self.url_for(filename)

    def rename(self, old_name: str, new_name: str) -> str | None:
        old_file = derived_filename(old_name)
        new_file = derived_filename(new_name)
        old_path = self.root / old_file
        if not old_path.is_file():
            return None
        if old_file == new_file:
            return self.url_for(new_file)
        try:
            os.replace(old_path, self.root / new_file)
        except OSError as e:
            logger.error(f"Error renaming profile photo '{old_file}' to '{new_file}': {e}")
            return None
        return self.url_for(new_file)

    def archive(self, url: str) -> Path | None:
        filename = Path(url).name
        source = self.root / filename
        if not filename or not source.is_file():
            return None
        archive_dir = self.root / ARCHIVE_DIR
        target = archive_dir / filename
        try:
            archive_dir.mkdir(parents=True, exist_ok=True)
            if target.exists():
                # Keep the earlier archived photo, suffix the new one with a millisecond timestamp
                stem = f"{source.stem}-{int(time.time() * 1000)}"
                target = archive_dir / f"{stem}{source.suffix}"
                n = 1
                while target.exists():
                    target = archive_dir / f"{stem}-{n}{source.suffix}"
                    n += 1
            os.replace(source, target)
        except OSError as e:
            logger.error(f"Error archiving profile photo '{filename}': {e}")
            return None
        return target

    def import_file(self, source: Path) -> str | None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, self.root / source.name)
        except OSError as e:
            logger.error(f"Error importing profile photo '{source}': {e}")
            return None
        return self.url_for(source.name)

    def path_for(self, filename: str) -> Path | None:
        root = self.root.resolve()
        path = (root / filename).resolve()
        if not path.is_relative_to(root) or not path.is_file():
            return None
        return path
