from __future__ import annotations

from enum import Enum
from typing import Iterable

from apps.gateway.services.errors import ValidationError
from apps.gateway.services.storage import UploadedFile


class FileCategory(str, Enum):
    PRIMARY_DOCS = "primaryDocs"
    API_COLLECTIONS = "apiCollections"
    COMMUNICATIONS = "communications"
    GENERAL = "general"


# Wire field name per category, in outbound part order.
CATEGORY_FIELDS: dict[FileCategory, str] = {
    FileCategory.PRIMARY_DOCS: "tddIrdFiles",
    FileCategory.API_COLLECTIONS: "postmanFiles",
    FileCategory.COMMUNICATIONS: "commFiles",
    FileCategory.GENERAL: "files",
}
FIELD_CATEGORIES: dict[str, FileCategory] = {field: cat for cat, field in CATEGORY_FIELDS.items()}
ALLOWED_UPLOAD_FIELDS = frozenset(FIELD_CATEGORIES)


def categorize(field_name: str) -> FileCategory:
    try:
        return FIELD_CATEGORIES[field_name]
    except KeyError:
        raise ValidationError(f"Unexpected field: {field_name}") from None


def partition(files: Iterable[UploadedFile]) -> dict[FileCategory, list[UploadedFile]]:
    """Group files by category, every category present, receive order kept."""
    groups: dict[FileCategory, list[UploadedFile]] = {cat: [] for cat in CATEGORY_FIELDS}
    for f in files:
        groups[categorize(f.field_name)].append(f)
    return groups
