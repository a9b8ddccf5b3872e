from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Iterator

import pytest
import requests

os.environ.setdefault("BASE_DOMAIN", "https://upstream.test/api/v1")

from fastapi.testclient import TestClient  # noqa: E402

from apps.gateway.deps.deps import get_wiki_client  # noqa: E402
from apps.gateway.main import app  # noqa: E402
from apps.gateway.services.forwarder import WikiApiClient  # noqa: E402
from packages.common.config import AppSettings, get_settings  # noqa: E402


def make_response(status_code: int, body: Any = None, text: str | None = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    if text is not None:
        resp._content = text.encode()
        resp.headers["Content-Type"] = "text/plain"
    else:
        resp._content = json.dumps(body).encode()
        resp.headers["Content-Type"] = "application/json"
    resp.encoding = "utf-8"
    resp.url = "https://upstream.test/api/v1/wikigenerate"
    return resp


class RecordingSession:
    """Stands in for ``requests.Session``; reads file parts while they are open."""

    def __init__(self, response: requests.Response | None = None, exc: Exception | None = None) -> None:
        self.response = response if response is not None else make_response(200, {"pageURL": "https://wiki/x"})
        self.exc = exc
        self.verify: Any = True
        self.posts: list[dict[str, Any]] = []
        self.gets: list[str] = []
        self.closed = False

    def post(self, url: str, files: Any = None, timeout: Any = None, **kwargs: Any) -> requests.Response:
        parts = []
        for name, entry in files or []:
            filename, content = entry[0], entry[1]
            content_type = entry[2] if len(entry) > 2 else None
            if hasattr(content, "read"):
                content = content.read()
            parts.append((name, filename, content, content_type))
        self.posts.append({"url": url, "timeout": timeout, "parts": parts})
        if self.exc is not None:
            raise self.exc
        return self.response

    def get(self, url: str, timeout: Any = None, **kwargs: Any) -> requests.Response:
        self.gets.append(url)
        if self.exc is not None:
            raise self.exc
        return self.response

    def close(self) -> None:
        self.closed = True


def remaining_files(directory: Path) -> list[str]:
    if not directory.exists():
        return []
    return sorted(p.name for p in directory.iterdir())


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def settings(upload_dir: Path) -> AppSettings:
    return AppSettings(
        BASE_DOMAIN="https://upstream.test/api/v1/",
        UPLOAD_DIR=upload_dir,
        WIKI_DISPLAY_BASE_URL="https://wiki.example.com/display",
    )


@pytest.fixture()
def upstream() -> RecordingSession:
    return RecordingSession()


@pytest.fixture()
def client(settings: AppSettings, upstream: RecordingSession) -> Iterator[TestClient]:
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_wiki_client] = lambda: WikiApiClient(settings.upstream, session=upstream)  # type: ignore[arg-type]
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
