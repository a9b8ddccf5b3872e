from __future__ import annotations

import logging
import re
from typing import Any

from apps.gateway.schemas.pages import PageCreatedResponse, PageRequestMetadata
from apps.gateway.services.errors import UpstreamError
from apps.gateway.services.forwarder import UpstreamReply


logger = logging.getLogger(__name__)

# Checked in order; the upstream currently answers with ``pageURL``.
PAGE_URL_FIELDS = ("pageURL", "pageUrl", "confluencePageUrl", "url")
SUCCESS_MESSAGE = "success"

_WHITESPACE_RUN = re.compile(r"\s+")


def fallback_page_url(display_base_url: str, space_key: Any, title: Any) -> str:
    # literal whitespace -> "+" only, no further URL encoding
    return f"{display_base_url}/{space_key}/{_WHITESPACE_RUN.sub('+', str(title))}"


def extract_page_url(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    for name in PAGE_URL_FIELDS:
        value = body.get(name)
        if value:
            return str(value)
    return None


def map_upstream_reply(
    reply: UpstreamReply, metadata: PageRequestMetadata, display_base_url: str
) -> PageCreatedResponse:
    if not reply.ok:
        logger.error("upstream_error", extra={"status": reply.status_code, "body": reply.body})
        raise UpstreamError(reply.status_code, reply.body)

    page_url = extract_page_url(reply.body)
    if page_url is None:
        page_url = fallback_page_url(display_base_url, metadata.wiki_space_key, metadata.page_title)
        logger.info("page_url_fallback", extra={"page_url": page_url})
    else:
        logger.info("page_url_extracted", extra={"page_url": page_url})
    return PageCreatedResponse(message=SUCCESS_MESSAGE, page_url=page_url)
