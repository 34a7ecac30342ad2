"""HTTP surface tests."""

import httpx
from fastapi.testclient import TestClient

from src.config.context import build_context
from src.main import create_app


def test_serves_player_page(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<!DOCTYPE html>" in response.text
    assert "Readwise Audio" in response.text


def test_serves_manifest(client):
    manifest = client.get("/manifest.json").json()

    assert manifest["name"] == "Readwise Audio"
    assert manifest["short_name"] == "RW Audio"
    assert manifest["display"] == "standalone"


def test_feed_response_shape(client):
    response = client.get("/api/feed")
    data = response.json()

    assert response.status_code == 200
    assert data["location"] == "all"
    assert data["total_available"] == 2
    assert [a["id"] for a in data["articles"]] == ["article-1", "article-2"]
    assert set(data["articles"][0]) >= {
        "id", "title", "source", "summary", "content", "url",
        "source_url", "word_count", "location",
    }


def test_feed_location_filter(client):
    data = client.get("/api/feed", params={"location": "feed"}).json()
    assert data["location"] == "feed"
    assert len(data["articles"]) == 2

    assert client.get("/api/feed", params={"location": "library"}).json()["articles"] == []
    assert client.get("/api/feed", params={"location": "bogus"}).status_code == 422


def test_feed_upstream_failure_is_500(client, fake):
    fake.queued_list_responses = [httpx.Response(401, text="Unauthorized")]

    response = client.get("/api/feed")

    assert response.status_code == 500
    assert response.json() == {"error": "Readwise API error: 401"}


def test_summarizer_rate_limit_still_returns_200(client, fake):
    fake.set_pages([[{"id": "only", "location": "feed", "category": "article"}]])
    fake.summary_status = 429

    response = client.get("/api/feed")

    assert response.status_code == 200
    assert response.json()["articles"] == []


def test_gateway_page_from_summarizer_still_returns_200(client, fake):
    fake.summary_reply = httpx.Response(200, text="<html>gateway page</html>")

    response = client.get("/api/feed")

    assert response.status_code == 200
    assert response.json()["articles"] == []
    assert response.json()["total_available"] == 2


def test_archived_item_does_not_come_back(client):
    assert client.post("/api/archive", json={"id": "article-1"}).json() == {"success": True}

    data = client.get("/api/feed").json()

    assert [a["id"] for a in data["articles"]] == ["article-2"]


def test_later_brings_item_back_once(client):
    client.post("/api/archive", json={"id": "article-1"})
    assert client.post("/api/later", json={"id": "article-1"}).json() == {"success": True}

    first = client.get("/api/feed").json()
    assert "article-1" in [a["id"] for a in first["articles"]]


def test_delete_twice_succeeds(client, fake):
    assert client.post("/api/delete", json={"id": "article-2"}).status_code == 200
    fake.delete_status = 404
    assert client.post("/api/delete", json={"id": "article-2"}).json() == {"success": True}


def test_action_upstream_failure_is_reported(client, fake):
    fake.update_status = 502

    response = client.post("/api/archive", json={"id": "article-1"})

    assert response.status_code == 500
    assert "502" in response.json()["error"]


def test_action_requires_id(client):
    assert client.post("/api/archive", json={}).status_code == 422
    assert client.post("/api/later", json={"id": ""}).status_code == 422


def test_tts_falls_back_without_key(client, fake):
    response = client.post("/api/tts", json={"text": "Hello there", "voice": "nova"})

    assert response.status_code == 200
    assert response.json() == {"use_browser_tts": True, "text": "Hello there"}
    assert fake.calls("/audio/speech") == []


def test_tts_streams_audio(settings, store, transport, fake):
    context = build_context(
        settings.model_copy(update={"openai_api_key": "test-openai-key"}),
        store=store,
        transport=transport,
    )
    client = TestClient(create_app(context))

    response = client.post("/api/tts", json={"text": "Hello there", "voice": "nova"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.content == fake.audio
    request = fake.calls("/audio/speech")[0]
    assert request.headers["Authorization"] == "Bearer test-openai-key"
    assert fake.json_body(request)["voice"] == "nova"
    assert fake.json_body(request)["input"] == "Hello there"


def test_tts_upstream_error_falls_back(settings, store, transport, fake):
    fake.tts_status = 500
    context = build_context(
        settings.model_copy(update={"openai_api_key": "test-openai-key"}),
        store=store,
        transport=transport,
    )
    client = TestClient(create_app(context))

    response = client.post("/api/tts", json={"text": "Hello"})

    assert response.json() == {"use_browser_tts": True, "text": "Hello"}


def test_preflight_returns_cors_headers(client):
    response = client.options("/api/feed")

    assert response.status_code == 204
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_browser_preflight_is_answered(client):
    response = client.options(
        "/api/archive",
        headers={"Origin": "https://example.org", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_unknown_routes_are_plain_404(client):
    response = client.get("/unknown/path")

    assert response.status_code == 404
    assert response.text == "Not Found"
    assert client.get("/api/archive").status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
