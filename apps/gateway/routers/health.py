from __future__ import annotations

import os

from fastapi import APIRouter, Depends

from apps.gateway.schemas.health import HealthStatus
from packages.common.config import AppSettings, get_settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live", response_model=HealthStatus)
def live() -> HealthStatus:
    return HealthStatus(status="ok")


@router.get("/ready", response_model=HealthStatus)
def ready(settings: AppSettings = Depends(get_settings)) -> HealthStatus:
    upload_dir = settings.upload_dir
    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
        writable = os.access(upload_dir, os.W_OK)
    except OSError:
        writable = False
    return HealthStatus(status="ready" if writable else "degraded", upload_dir_writable=writable)
