from __future__ import annotations

from typing import Any, Mapping

from apps.gateway.schemas.pages import PageRequestMetadata
from apps.gateway.services.errors import ValidationError


REQUIRED_FIELDS = ("pageToBeCreatedTitle", "wikiSpaceKey")


def _is_blank(value: Any) -> bool:
    return value is None or value in ("", 0)


def validate_page_request(fields: Mapping[str, Any]) -> PageRequestMetadata:
    """Check the required fields, in order, and build the metadata record."""
    for name in REQUIRED_FIELDS:
        if _is_blank(fields.get(name)):
            raise ValidationError(f"{name} is required")
    return PageRequestMetadata.model_validate(dict(fields))
