from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from media_bridge.core.api import APIError, RemoteDecodeError, WordPressClient
from media_bridge.core.dto.query import EMBED_RELATIONS
from media_bridge.core.dto.upload import UploadFile
from tests.utils import make_raw_record

BASE = "https://example.com"
MEDIA_URL = f"{BASE}/wp-json/wp/v2/media"

pytestmark = pytest.mark.network


def _query(call) -> dict:
    return {k: v[0] for k, v in parse_qs(urlparse(call.request.url).query).items()}


@responses.activate
def test_get_media_page_reads_records_and_totals():
    responses.add(
        responses.GET,
        MEDIA_URL,
        json=[make_raw_record()],
        headers={"X-WP-Total": "57", "X-WP-TotalPages": "2"},
        status=200,
    )
    client = WordPressClient(BASE)
    page = client.get_media_page({"page": 1, "per_page": 40, "_embed": EMBED_RELATIONS})

    assert page["total"] == 57
    assert page["total_pages"] == 2
    assert page["records"][0]["id"] == 101

    query = _query(responses.calls[0])
    assert query == {"page": "1", "per_page": "40", "_embed": EMBED_RELATIONS}
    assert responses.calls[0].request.headers["Accept-Encoding"] == "gzip, deflate"
    assert "Authorization" not in responses.calls[0].request.headers


@responses.activate
def test_get_media_page_missing_total_is_zero():
    responses.add(responses.GET, MEDIA_URL, json=[], status=200)
    page = WordPressClient(BASE).get_media_page({"page": 1})
    assert page == {"records": [], "total": 0, "total_pages": 0}


@responses.activate
def test_get_media_page_non_json_raises():
    responses.add(responses.GET, MEDIA_URL, body="not json", status=200)
    with pytest.raises(RemoteDecodeError):
        WordPressClient(BASE).get_media_page({})


@responses.activate
def test_get_media_page_object_body_raises():
    responses.add(responses.GET, MEDIA_URL, json={"code": "rest_no_route"}, status=200)
    with pytest.raises(RemoteDecodeError):
        WordPressClient(BASE).get_media_page({})


@responses.activate
def test_http_error_raises_api_error():
    responses.add(responses.GET, MEDIA_URL, json={"code": "rest_forbidden"}, status=403)
    with pytest.raises(APIError) as exc_info:
        WordPressClient(BASE).get_media_page({})
    assert exc_info.value.status_code == 403
    assert not isinstance(exc_info.value, RemoteDecodeError)


@responses.activate
def test_transport_error_raises_api_error():
    responses.add(responses.GET, MEDIA_URL, body=requests.ConnectionError("refused"))
    with pytest.raises(APIError) as exc_info:
        WordPressClient(BASE).get_media_page({})
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


@responses.activate
def test_get_media_embeds_relations():
    responses.add(responses.GET, f"{MEDIA_URL}/101", json=make_raw_record(), status=200)
    data = WordPressClient(BASE).get_media("101")
    assert data["id"] == 101
    assert _query(responses.calls[0]) == {"_embed": EMBED_RELATIONS}


@responses.activate
def test_upload_sends_raw_bytes_and_basic_credential():
    responses.add(responses.POST, MEDIA_URL, json=make_raw_record(id=202), status=201)
    client = WordPressClient(BASE, auth_token="user:pass", upload_timeout=99)
    data = client.upload_media(UploadFile(filename="cat.png", content=b"\x89PNG", mime_type="image/png"))

    assert data["id"] == 202
    request = responses.calls[0].request
    assert request.body == b"\x89PNG"
    assert request.headers["Content-Type"] == "image/png"
    assert request.headers["Content-Disposition"] == 'attachment; filename="cat.png"'
    assert request.headers["Authorization"] == "Basic dXNlcjpwYXNz"


@responses.activate
def test_upload_passes_opaque_token_through():
    responses.add(responses.POST, MEDIA_URL, json=make_raw_record(), status=201)
    client = WordPressClient(BASE, auth_token="abc123", auth_scheme="Bearer")
    client.upload_media(UploadFile(filename="a.txt", content=b"hi", mime_type="text/plain"))
    assert responses.calls[0].request.headers["Authorization"] == "Bearer abc123"


@responses.activate
def test_upload_non_json_raises():
    responses.add(responses.POST, MEDIA_URL, body="<html>oops</html>", status=200)
    with pytest.raises(RemoteDecodeError):
        WordPressClient(BASE).upload_media(UploadFile(filename="a", content=b""))


def test_session_carries_api_headers():
    client = WordPressClient(BASE)
    assert client.session.headers["Content-Type"] == "application/json"
    assert client.session.headers["Connection"] == "keep-alive"
