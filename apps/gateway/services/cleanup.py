from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterator

from apps.gateway.services.errors import CleanupError
from apps.gateway.services.storage import TemporaryStore, UploadedFile


logger = logging.getLogger(__name__)


class StagedUploads:
    """Files one request has written to the store, in receive order."""

    def __init__(self, store: TemporaryStore) -> None:
        self.store = store
        self._files: list[UploadedFile] = []

    def add(self, uploaded: UploadedFile) -> None:
        self._files.append(uploaded)

    def __iter__(self) -> Iterator[UploadedFile]:
        return iter(list(self._files))

    def __len__(self) -> int:
        return len(self._files)

    def release(self) -> list[CleanupError]:
        """Delete every staged file once; failures are logged and returned."""
        failures: list[CleanupError] = []
        while self._files:
            uploaded = self._files.pop(0)
            try:
                self.store.delete(uploaded.stored_path)
            except OSError as exc:
                err = CleanupError(str(uploaded.stored_path), str(exc))
                logger.warning(
                    "upload_cleanup_failed",
                    extra={"original_name": uploaded.original_name, "error": err.message},
                )
                failures.append(err)
            else:
                logger.debug("upload_cleaned", extra={"original_name": uploaded.original_name})
        return failures


@asynccontextmanager
async def staged_uploads(store: TemporaryStore) -> AsyncIterator[StagedUploads]:
    """Scope a request's uploads; the files are gone once the block exits, whichever way."""
    staged = StagedUploads(store)
    try:
        yield staged
    finally:
        staged.release()
