from __future__ import annotations

import contextlib
import logging
import re
import shutil
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from apps.gateway.services.errors import StorageError


logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
INVALID_CHARS_PATTERN = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_filename(name: str, replacement: str = "_") -> str:
    """Reduce an untrusted client filename to a safe single path component."""
    base = name.replace("\\", "/").rsplit("/", 1)[-1]
    base = INVALID_CHARS_PATTERN.sub(replacement, base).strip().lstrip(".")
    return base or "upload"


@dataclass(frozen=True)
class UploadedFile:
    field_name: str
    original_name: str
    stored_path: Path
    mime_type: str
    size_bytes: int

    def describe(self) -> dict[str, object]:
        return {
            "fieldname": self.field_name,
            "originalname": self.original_name,
            "mimetype": self.mime_type,
            "size": self.size_bytes,
        }


class TemporaryStore:
    """Request-lifetime file storage under a single directory.

    Names combine a nanosecond timestamp and a random token with the
    sanitized original name, so concurrent uploads of the same file never
    collide and no locking is needed.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _unique_name(self, original_name: str) -> str:
        return f"{time.time_ns()}-{uuid.uuid4().hex[:8]}-{sanitize_filename(original_name)}"

    def put(self, original_name: str, source: BinaryIO) -> tuple[Path, int]:
        """Copy ``source`` into the store and return ``(path, size_bytes)``."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Upload directory unavailable: {exc}") from exc

        path = self.root / self._unique_name(original_name)
        try:
            # "x" mode: never overwrite another request's file
            with open(path, "xb") as dest:
                shutil.copyfileobj(source, dest, CHUNK_SIZE)
                size = dest.tell()
        except FileExistsError as exc:
            raise StorageError(f"Stored name already taken: {path.name}") from exc
        except OSError as exc:
            with contextlib.suppress(OSError):
                path.unlink()
            raise StorageError(f"Could not write {original_name!r}: {exc}") from exc
        return path, size

    def path_of(self, stored_name: str) -> Path:
        path = self.root / stored_name
        if path.parent != self.root or not path.is_file():
            raise FileNotFoundError(stored_name)
        return path

    def delete(self, path: Path) -> None:
        Path(path).unlink()
