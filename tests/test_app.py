from videotube.core.errors import ApiError, ErrorKind

from conftest import API


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_unknown_route_uses_error_envelope(client):
    res = client.get(f"{API}/does-not-exist")
    assert res.status_code == 404
    assert res.json() == {
        "statusCode": 404,
        "data": None,
        "message": "Not Found",
        "success": False,
        "errorKind": "not_found",
        "errors": [],
    }


def test_malformed_body_uses_error_envelope(client):
    res = client.post(f"{API}/login", content=b"{not json", headers={"Content-Type": "application/json"})
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["errors"]


def test_error_kind_from_status():
    assert ApiError(400).kind is ErrorKind.BAD_REQUEST
    assert ApiError(401).kind is ErrorKind.UNAUTHORIZED
    assert ApiError(404).kind is ErrorKind.NOT_FOUND
    assert ApiError(409).kind is ErrorKind.CONFLICT
    assert ApiError(500).kind is ErrorKind.INTERNAL
