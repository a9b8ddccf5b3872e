from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests
import urllib3

from apps.gateway.services.assembler import DATA_FIELD, OutboundPayload
from apps.gateway.services.errors import GatewayError, NetworkError, RequestSetupError
from packages.common.config import UpstreamSettings


logger = logging.getLogger(__name__)

WIKI_GENERATE_PATH = "/wikigenerate"
GITORGS_PATH = "/mulesoftorgs"
WIKI_SPACE_KEYS_PATH = "/wikispace"

# Failures where the request went out but no complete response came back
NO_RESPONSE_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


@dataclass(frozen=True)
class UpstreamReply:
    status_code: int
    body: Any
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_response(cls, resp: requests.Response) -> "UpstreamReply":
        try:
            body: Any = resp.json()
        except ValueError:
            body = resp.text
        return cls(status_code=resp.status_code, body=body, headers=dict(resp.headers))


class WikiApiClient:
    """Thin requests wrapper around the wiki content generation API."""

    def __init__(self, settings: UpstreamSettings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.session.verify = settings.verify
        if settings.verify is False:
            # internal endpoint with a private chain; one warning per call is noise
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def url(self, path: str) -> str:
        return f"{self.settings.base_domain}{path}"

    def generate_page(self, payload: OutboundPayload) -> UpstreamReply:
        """Send the payload once. The reply is returned whatever its status."""
        url = self.url(WIKI_GENERATE_PATH)
        logger.info(
            "upstream_request_sent",
            extra={"url": url, "parts": [list(p) for p in payload.manifest()]},
        )
        try:
            with payload.open_files() as files:
                # filename None makes requests emit a plain field, and the
                # body stays multipart even with no attachments
                resp = self.session.post(
                    url,
                    files=[(DATA_FIELD, (None, payload.data))] + files,
                    timeout=self.settings.timeout_seconds,
                )
        except GatewayError:
            raise
        except NO_RESPONSE_ERRORS as exc:
            logger.error("upstream_no_response", extra={"url": url, "error": str(exc)})
            raise NetworkError() from exc
        except Exception as exc:
            logger.error("upstream_request_setup_failed", extra={"url": url, "error": str(exc)})
            raise RequestSetupError(str(exc)) from exc

        reply = UpstreamReply.from_response(resp)
        logger.info("upstream_response_received", extra={"status": reply.status_code, "body": reply.body})
        return reply

    def get_json(self, path: str) -> Any:
        resp = self.session.get(self.url(path), timeout=self.settings.lookup_timeout_seconds)
        resp.raise_for_status()
        return resp.json()

    def close(self) -> None:
        self.session.close()
