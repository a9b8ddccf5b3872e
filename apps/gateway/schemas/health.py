from __future__ import annotations

from pydantic import BaseModel


class HealthStatus(BaseModel):
    status: str
    upload_dir_writable: bool | None = None
