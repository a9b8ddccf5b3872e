from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from apps.gateway.deps.deps import get_store, get_wiki_client
from apps.gateway.schemas.pages import ErrorResponse, PageCreatedResponse
from apps.gateway.services.cleanup import staged_uploads
from apps.gateway.services.errors import GatewayError
from apps.gateway.services.forwarder import WIKI_GENERATE_PATH, WikiApiClient
from apps.gateway.services.intake import read_page_request
from apps.gateway.services.pipeline import generate_page
from apps.gateway.services.storage import TemporaryStore
from packages.common.config import AppSettings, get_settings


router = APIRouter(tags=["pages"])


@router.post(
    "/generate-confluence",
    response_model=PageCreatedResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_confluence(
    request: Request,
    store: TemporaryStore = Depends(get_store),
    client: WikiApiClient = Depends(get_wiki_client),
    settings: AppSettings = Depends(get_settings),
) -> JSONResponse:
    outcome = await generate_page(request, store, client, settings)
    return outcome.to_response()


@router.post("/test-request")
async def test_request(
    request: Request,
    store: TemporaryStore = Depends(get_store),
    client: WikiApiClient = Depends(get_wiki_client),
    settings: AppSettings = Depends(get_settings),
) -> Any:
    """Describe what would be forwarded, without calling upstream."""
    async with staged_uploads(store) as staged:
        try:
            fields = await read_page_request(request, staged, settings)
        except GatewayError as exc:
            return JSONResponse(exc.to_body(), status_code=exc.status_code)
        files = [f.describe() for f in staged]

    return {
        "method": request.method,
        "url": request.url.path,
        "headers": dict(request.headers),
        "body": fields,
        "files": files,
        "forwardedTo": client.url(WIKI_GENERATE_PATH),
        "requestType": "multipart/form-data",
    }
