import json

import pytest
import requests

from ipm_panel.errors import ApiError, GENERIC_REQUEST_FAILED
from ipm_panel.services.api_client import ApiClient, parse_json


def _response(status=200, body=b""):
    resp = requests.Response()
    resp.status_code = status
    resp._content = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class RecordingHttp:
    def __init__(self, resp=None, exc=None):
        self.resp = resp
        self.exc = exc
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.exc:
            raise self.exc
        return self.resp


def test_parse_json_shapes():
    assert parse_json(_response(200, {"items": [1]})) == {"items": [1]}
    assert parse_json(_response(200, [1, 2])) == {"items": [1, 2]}
    assert parse_json(_response(204, b"")) == {}


@pytest.mark.parametrize("body,expected", [
    ({"error": "duplicate", "message": "ignored"}, "duplicate"),
    ({"message": "not allowed"}, "not allowed"),
    ({}, GENERIC_REQUEST_FAILED),
    (b"<html>oops</html>", GENERIC_REQUEST_FAILED),
])
def test_error_message_preference(body, expected):
    with pytest.raises(ApiError) as err:
        parse_json(_response(400, body))
    assert err.value.message == expected
    assert err.value.status_code == 400


def test_non_json_success_body_is_an_error():
    with pytest.raises(ApiError) as err:
        parse_json(_response(200, b"plain text"))
    assert err.value.message.startswith("server returned non-json")


def test_request_builds_url_headers_and_body():
    http = RecordingHttp(_response(200, {"ok": True}))
    api = ApiClient(base_url="http://example.test/api/", token_provider=lambda: "tok", timeout=3, http=http)
    assert api.post_json("tags", {"label": "بتن"}) == {"ok": True}
    method, url, kwargs = http.calls[0]
    assert (method, url) == ("POST", "http://example.test/api/tags")
    assert kwargs["headers"]["X-Auth-Token"] == "tok"
    assert kwargs["timeout"] == 3
    assert json.loads(kwargs["data"].decode("utf-8")) == {"label": "بتن"}


def test_absolute_url_and_no_token():
    http = RecordingHttp(_response(200, {}))
    api = ApiClient(base_url="http://example.test/api", http=http)
    api.get("https://other.test/x")
    _, url, kwargs = http.calls[0]
    assert url == "https://other.test/x"
    assert "X-Auth-Token" not in kwargs["headers"]
    assert kwargs["data"] is None


def test_transport_error_becomes_api_error():
    http = RecordingHttp(exc=requests.ConnectionError("refused"))
    api = ApiClient(base_url="http://example.test/api", http=http)
    with pytest.raises(ApiError) as err:
        api.delete("/tags", {"id": 1})
    assert err.value.message == GENERIC_REQUEST_FAILED
    assert err.value.status_code is None
