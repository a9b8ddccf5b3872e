from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class UpstreamSettings(BaseModel):
    base_domain: str = Field(..., description="Base URL of the wiki content generation API")
    timeout_seconds: float = Field(default=300.0, description="Timeout for the page generation call")
    lookup_timeout_seconds: float = Field(default=30.0, description="Timeout for list lookups")
    verify: bool | str = Field(default=False, description="requests' verify value: bool or CA bundle path")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Confluence Page Gateway", description="Application name")
    environment: str = Field(default="dev", description="Environment name: dev|staging|prod")
    log_level: str = Field(default="INFO", description="Logging level")
    port: int = Field(default=5000, alias="PORT")
    cors_origins: Annotated[List[str], NoDecode] = Field(default=["*"], alias="CORS_ORIGINS")

    # Upstream wiki generation API
    base_domain: str = Field(default="", alias="BASE_DOMAIN")
    wiki_display_base_url: str = Field(default="https://wiki.intel.com/display", alias="WIKI_DISPLAY_BASE_URL")
    upstream_timeout_seconds: float = Field(default=300.0, gt=0, alias="UPSTREAM_TIMEOUT_SECONDS")
    lookup_timeout_seconds: float = Field(default=30.0, gt=0, alias="LOOKUP_TIMEOUT_SECONDS")
    upstream_verify_tls: bool = Field(default=False, alias="UPSTREAM_VERIFY_TLS")
    upstream_ca_bundle: Optional[str] = Field(default=None, alias="UPSTREAM_CA_BUNDLE")

    # Uploads
    upload_dir: Path = Field(default=Path("uploads"), alias="UPLOAD_DIR")
    max_upload_files: int = Field(default=100, gt=0, alias="MAX_UPLOAD_FILES")
    max_form_fields: int = Field(default=1000, gt=0, alias="MAX_FORM_FIELDS")
    # JSON and url-encoded bodies only; multipart is bounded by file/field counts
    max_body_bytes: int = Field(default=50 * 1024 * 1024, gt=0, alias="MAX_BODY_BYTES")

    @property
    def upstream(self) -> UpstreamSettings:
        return UpstreamSettings(
            base_domain=self.base_domain,
            timeout_seconds=self.upstream_timeout_seconds,
            lookup_timeout_seconds=self.lookup_timeout_seconds,
            verify=self.upstream_ca_bundle or self.upstream_verify_tls,
        )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, v: Any) -> Any:
        # "*" or "https://a,https://b" from the environment
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("base_domain", "wiki_display_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = v.upper()
        if upper not in valid:
            return "INFO"
        return upper


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings loaded from environment/.env.

    Using LRU cache ensures a singleton-style settings object across the app.
    """
    return AppSettings()  # type: ignore[call-arg]
