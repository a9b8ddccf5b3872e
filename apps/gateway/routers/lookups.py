from __future__ import annotations

import logging
from typing import Any

import requests
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from apps.gateway.deps.deps import get_wiki_client
from apps.gateway.services.forwarder import GITORGS_PATH, WIKI_SPACE_KEYS_PATH, WikiApiClient


router = APIRouter(tags=["lookups"])

logger = logging.getLogger(__name__)


def _relay(client: WikiApiClient, path: str) -> Any:
    try:
        return client.get_json(path)
    except requests.RequestException as exc:
        logger.warning("lookup_failed", extra={"path": path, "error": str(exc)})
        return JSONResponse({"error": str(exc)}, status_code=500)


@router.get("/gitorgs")
def git_orgs(client: WikiApiClient = Depends(get_wiki_client)) -> Any:
    return _relay(client, GITORGS_PATH)


@router.get("/wikispacekeys")
def wiki_space_keys(client: WikiApiClient = Depends(get_wiki_client)) -> Any:
    return _relay(client, WIKI_SPACE_KEYS_PATH)
