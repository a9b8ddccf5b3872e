import pytest

from apps.gateway.services.errors import UpstreamError
from apps.gateway.services.forwarder import UpstreamReply
from apps.gateway.services.responses import extract_page_url, fallback_page_url, map_upstream_reply
from apps.gateway.services.validation import validate_page_request


BASE = "https://wiki.example.com/display"
METADATA = validate_page_request({"pageToBeCreatedTitle": "Order  Service\tAPI", "wikiSpaceKey": "ENG"})


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"pageURL": "a", "pageUrl": "b", "confluencePageUrl": "c", "url": "d"}, "a"),
        ({"pageUrl": "b", "confluencePageUrl": "c", "url": "d"}, "b"),
        ({"confluencePageUrl": "c", "url": "d"}, "c"),
        ({"url": "d"}, "d"),
        ({"pageURL": "", "url": "d"}, "d"),
        ({"status": "created"}, None),
        ("plain text", None),
        ([{"url": "x"}], None),
    ],
)
def test_extract_page_url_priority(body: object, expected: str | None) -> None:
    assert extract_page_url(body) == expected


def test_fallback_collapses_whitespace_runs() -> None:
    assert fallback_page_url(BASE, "ENG", "Order  Service\tAPI") == f"{BASE}/ENG/Order+Service+API"


def test_success_uses_upstream_url() -> None:
    result = map_upstream_reply(UpstreamReply(201, {"pageUrl": "https://wiki/p/1"}), METADATA, BASE)
    assert result.model_dump(by_alias=True) == {"message": "success", "pageUrl": "https://wiki/p/1"}


def test_success_without_url_falls_back() -> None:
    result = map_upstream_reply(UpstreamReply(200, {}), METADATA, BASE)
    assert result.page_url == f"{BASE}/ENG/Order+Service+API"


def test_error_status_becomes_upstream_error() -> None:
    with pytest.raises(UpstreamError) as exc_info:
        map_upstream_reply(UpstreamReply(422, {"reason": "space not found"}), METADATA, BASE)
    err = exc_info.value
    assert err.status_code == 422
    assert err.to_body() == {
        "status": "error",
        "error": "Mulesoft API error",
        "details": {"reason": "space not found"},
        "message": "Request failed with status code 422",
    }
