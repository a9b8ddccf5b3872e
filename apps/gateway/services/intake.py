from __future__ import annotations

import json
import logging
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from apps.gateway.services.categories import ALLOWED_UPLOAD_FIELDS, categorize
from apps.gateway.services.cleanup import StagedUploads
from apps.gateway.services.errors import PayloadTooLargeError, ValidationError
from apps.gateway.services.storage import UploadedFile
from packages.common.config import AppSettings


logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
MALFORMED_BODY_MESSAGE = (
    "Request body is missing or malformed. Make sure you're sending form data correctly."
)


def check_upload_fields(form: FormData) -> None:
    """Reject the whole form if any file part uses a field name outside the allow-list."""
    for field, value in form.multi_items():
        if isinstance(value, UploadFile) and field not in ALLOWED_UPLOAD_FIELDS:
            raise ValidationError(f"Unexpected field: {field}")


async def stage_upload(field: str, upload: UploadFile, staged: StagedUploads) -> UploadedFile:
    category = categorize(field)
    original_name = upload.filename or ""
    await upload.seek(0)
    path, size = await run_in_threadpool(staged.store.put, original_name, upload.file)
    uploaded = UploadedFile(
        field_name=field,
        original_name=original_name,
        stored_path=path,
        mime_type=upload.content_type or "application/octet-stream",
        size_bytes=size,
    )
    staged.add(uploaded)
    logger.info(
        "upload_staged",
        extra={"fieldname": field, "category": category.value, "originalname": original_name, "size": size},
    )
    return uploaded


def _malformed(request: Request, body: Any) -> ValidationError:
    return ValidationError(
        MALFORMED_BODY_MESSAGE,
        debug={
            "bodyType": type(body).__name__,
            "contentType": request.headers.get("content-type"),
            "filesReceived": 0,
            "expectedContentType": "multipart/form-data",
        },
    )


async def _read_body(request: Request, limit: int) -> bytes:
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(limit)
    raw = await request.body()
    if len(raw) > limit:
        raise PayloadTooLargeError(limit)
    return raw


def _collect_text_fields(form: FormData) -> dict[str, Any]:
    """Text fields by name; a repeated name becomes a list of its values."""
    fields: dict[str, Any] = {}
    for field, value in form.multi_items():
        if isinstance(value, UploadFile):
            continue
        if field not in fields:
            fields[field] = value
        elif isinstance(fields[field], list):
            fields[field].append(value)
        else:
            fields[field] = [fields[field], value]
    return fields


async def read_page_request(request: Request, staged: StagedUploads, settings: AppSettings) -> dict[str, Any]:
    """Parse the inbound body into text fields, staging accepted files as a side effect.

    Multipart and url-encoded bodies may carry files; JSON bodies carry
    metadata only. A JSON array, or any other content type, yields no
    fields, leaving the required-field checks to report what is missing.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith("application/json"):
        raw = await _read_body(request, settings.max_body_bytes)
        try:
            body = json.loads(raw) if raw else {}
        except ValueError:
            raise _malformed(request, raw.decode("utf-8", errors="replace")) from None
        if isinstance(body, list):
            return {}
        if not isinstance(body, dict):
            raise _malformed(request, body)
        return body

    if not content_type.startswith(FORM_CONTENT_TYPES):
        return {}

    if content_type.startswith("application/x-www-form-urlencoded"):
        # buffered here; request.form() then parses the cached body
        await _read_body(request, settings.max_body_bytes)

    try:
        form = await request.form(max_files=settings.max_upload_files, max_fields=settings.max_form_fields)
    except StarletteHTTPException as exc:
        raise ValidationError(str(exc.detail)) from exc

    try:
        check_upload_fields(form)
        for field, value in form.multi_items():
            if isinstance(value, UploadFile):
                await stage_upload(field, value, staged)
        fields = _collect_text_fields(form)
    finally:
        await form.close()
    return fields
