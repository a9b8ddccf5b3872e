from __future__ import annotations

from typing import Generator

from fastapi import Depends

from apps.gateway.services.forwarder import WikiApiClient
from apps.gateway.services.storage import TemporaryStore
from packages.common.config import AppSettings, get_settings


def get_store(settings: AppSettings = Depends(get_settings)) -> TemporaryStore:
    return TemporaryStore(settings.upload_dir)


def get_wiki_client(settings: AppSettings = Depends(get_settings)) -> Generator[WikiApiClient, None, None]:
    client = WikiApiClient(settings.upstream)
    try:
        yield client
    finally:
        client.close()
