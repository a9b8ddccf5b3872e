import pytest
import requests
from fastapi.testclient import TestClient

from conftest import RecordingSession, make_response


@pytest.mark.parametrize(
    "route, upstream_path",
    [("/gitorgs", "/mulesoftorgs"), ("/wikispacekeys", "/wikispace")],
)
def test_lookup_relays_upstream_json(
    client: TestClient, upstream: RecordingSession, route: str, upstream_path: str
) -> None:
    upstream.response = make_response(200, [{"key": "ENG"}, {"key": "OPS"}])

    resp = client.get(route)

    assert resp.status_code == 200
    assert resp.json() == [{"key": "ENG"}, {"key": "OPS"}]
    assert upstream.gets == [f"https://upstream.test/api/v1{upstream_path}"]


def test_lookup_failure_is_a_500(client: TestClient, upstream: RecordingSession) -> None:
    upstream.exc = requests.ConnectionError("connection refused")

    resp = client.get("/gitorgs")

    assert resp.status_code == 500
    assert resp.json() == {"error": "connection refused"}


def test_lookup_error_status_is_a_500(client: TestClient, upstream: RecordingSession) -> None:
    upstream.response = make_response(404, {"message": "nope"})

    resp = client.get("/wikispacekeys")

    assert resp.status_code == 500
    assert "404" in resp.json()["error"]
