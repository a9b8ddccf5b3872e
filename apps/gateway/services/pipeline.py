from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from apps.gateway.schemas.pages import PageCreatedResponse
from apps.gateway.services.assembler import build_payload
from apps.gateway.services.cleanup import staged_uploads
from apps.gateway.services.errors import GatewayError, RequestSetupError
from apps.gateway.services.forwarder import WikiApiClient
from apps.gateway.services.intake import read_page_request
from apps.gateway.services.responses import map_upstream_reply
from apps.gateway.services.storage import TemporaryStore
from apps.gateway.services.validation import validate_page_request
from packages.common.config import AppSettings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageOutcome:
    """Terminal result of one page request: a created page or one classified error."""

    page: Optional[PageCreatedResponse] = None
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_response(self) -> JSONResponse:
        if self.page is not None and self.error is None:
            return JSONResponse(self.page.model_dump(by_alias=True), status_code=200)
        error = self.error or RequestSetupError("Pipeline finished without a result")
        return JSONResponse(error.to_body(), status_code=error.status_code)


async def generate_page(
    request: Request, store: TemporaryStore, client: WikiApiClient, settings: AppSettings
) -> PageOutcome:
    """Intake, validate, assemble, forward and map one request.

    Staged files are deleted when the ``staged_uploads`` block exits, so the
    outcome is fully decided and the store is clean before anything is sent
    back to the caller.
    """
    async with staged_uploads(store) as staged:
        try:
            fields = await read_page_request(request, staged, settings)
            metadata = validate_page_request(fields)
            logger.info(
                "page_request_received",
                extra={
                    "page_title": metadata.page_title,
                    "wiki_space_key": metadata.wiki_space_key,
                    "contact_info": metadata.contact_info(),
                    "files_total": len(staged),
                },
            )
            payload = build_payload(metadata, list(staged))
            reply = await run_in_threadpool(client.generate_page, payload)
            outcome = PageOutcome(page=map_upstream_reply(reply, metadata, settings.wiki_display_base_url))
        except GatewayError as exc:
            logger.warning(
                "page_request_failed",
                extra={"error_type": type(exc).__name__, "status": exc.status_code, "error": exc.message},
            )
            outcome = PageOutcome(error=exc)
        except Exception as exc:
            logger.exception("page_request_crashed")
            outcome = PageOutcome(error=RequestSetupError(str(exc)))
    return outcome
