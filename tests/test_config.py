from pathlib import Path

import pytest

from packages.common.config import AppSettings


def test_defaults_match_upstream_contract(tmp_path: Path) -> None:
    settings = AppSettings(BASE_DOMAIN="https://api.internal/v1/", UPLOAD_DIR=tmp_path)
    upstream = settings.upstream
    assert upstream.base_domain == "https://api.internal/v1"
    assert upstream.timeout_seconds == 300.0
    assert upstream.verify is False


def test_ca_bundle_takes_precedence_over_verify_flag(tmp_path: Path) -> None:
    settings = AppSettings(
        BASE_DOMAIN="https://api.internal/v1",
        UPSTREAM_VERIFY_TLS=False,
        UPSTREAM_CA_BUNDLE="/etc/ssl/internal-ca.pem",
    )
    assert settings.upstream.verify == "/etc/ssl/internal-ca.pem"


def test_unknown_log_level_falls_back_to_info() -> None:
    assert AppSettings(log_level="chatty").log_level == "INFO"
    assert AppSettings(log_level="debug").log_level == "DEBUG"


def test_cors_origins_accepts_wildcard_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "*")
    assert AppSettings().cors_origins == ["*"]


def test_cors_origins_splits_comma_separated_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    assert AppSettings().cors_origins == ["https://a.example", "https://b.example"]


def test_body_limit_defaults_to_fifty_megabytes() -> None:
    assert AppSettings().max_body_bytes == 50 * 1024 * 1024
    assert AppSettings(MAX_BODY_BYTES=1024).max_body_bytes == 1024
