from __future__ import annotations

import json
import logging
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Sequence

from apps.gateway.schemas.pages import PageRequestMetadata
from apps.gateway.services.categories import CATEGORY_FIELDS, partition
from apps.gateway.services.errors import RequestSetupError
from apps.gateway.services.storage import UploadedFile


logger = logging.getLogger(__name__)

DATA_FIELD = "data"

# requests' ``files=`` entry: (field, (filename, fileobj, content_type))
RequestsFilePart = tuple[str, tuple[str, BinaryIO, str]]


@dataclass(frozen=True)
class FilePart:
    field_name: str
    filename: str
    content_type: str
    path: Path


@dataclass(frozen=True)
class OutboundPayload:
    data: str
    file_parts: tuple[FilePart, ...]

    @property
    def has_attachments(self) -> bool:
        return bool(self.file_parts)

    def manifest(self) -> list[tuple[str, str, str]]:
        """Part layout as ``(field, filename, content_type)``, the ``data`` part first."""
        return [(DATA_FIELD, "", "application/json")] + [
            (p.field_name, p.filename, p.content_type) for p in self.file_parts
        ]

    @contextmanager
    def open_files(self) -> Iterator[list[RequestsFilePart]]:
        """Open every stored file for the duration of one send."""
        with ExitStack() as stack:
            parts: list[RequestsFilePart] = []
            for part in self.file_parts:
                try:
                    fh = stack.enter_context(open(part.path, "rb"))
                except OSError as exc:
                    raise RequestSetupError(f"Cannot read staged file {part.filename!r}: {exc}") from exc
                parts.append((part.field_name, (part.filename, fh, part.content_type)))
            yield parts


def build_payload(metadata: PageRequestMetadata, files: Sequence[UploadedFile]) -> OutboundPayload:
    page_data = metadata.to_upstream(has_attachments=len(files) > 0)
    logger.info("page_data_assembled", extra={"page_data": page_data})

    file_parts: list[FilePart] = []
    for category, members in partition(files).items():
        if members:
            logger.info(
                "attaching_files",
                extra={"category": category.value, "files": [f.describe() for f in members]},
            )
        file_parts.extend(
            FilePart(
                field_name=CATEGORY_FIELDS[category],
                filename=f.original_name,
                content_type=f.mime_type,
                path=f.stored_path,
            )
            for f in members
        )
    if not file_parts:
        logger.info("no_files_attached")

    return OutboundPayload(
        data=json.dumps(page_data, separators=(",", ":"), ensure_ascii=False),
        file_parts=tuple(file_parts),
    )
