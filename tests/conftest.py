import json

import httpx
import pytest
from fastapi.testclient import TestClient

from src.config.context import build_context
from src.config.settings import Settings
from src.main import create_app
from src.modules.store.service import MemoryKeyValueStore

MOCK_ARTICLES = [
    {
        "id": "article-1",
        "title": "Test Article One",
        "content": "This is the full content of the first test article.",
        "site_name": "The Atlantic",
        "source_url": "https://www.theatlantic.com/article/test-1",
        "url": "https://read.readwise.io/read/article-1",
        "location": "feed",
        "category": "article",
        "saved_at": "2026-01-28T16:16:03.472000+00:00",
    },
    {
        "id": "article-2",
        "title": "Test Article Two",
        "content": "This is the full content of the second test article.",
        "source_url": "https://arstechnica.com/science/test-2",
        "location": "new",
        "category": "article",
        "saved_at": "2026-01-27T09:00:00+00:00",
    },
    {
        "id": "article-3",
        "title": "Archived Article",
        "content": "This should be filtered out.",
        "site_name": "TechCrunch",
        "location": "archive",
        "category": "article",
        "saved_at": "2026-01-29T09:00:00+00:00",
    },
]


class FakeUpstream:
    """Canned Readwise, Anthropic and OpenAI endpoints behind an httpx.MockTransport."""

    def __init__(self, articles: list[dict] | None = None) -> None:
        self.set_pages([articles if articles is not None else MOCK_ARTICLES])
        self.queued_list_responses: list[httpx.Response] = []
        self.requests: list[httpx.Request] = []
        self.summary_status = 200
        self.summary_text = "A short spoken summary of the article."
        self.summary_reply: httpx.Response | None = None
        self.update_status = 200
        self.delete_status = 204
        self.tts_status = 200
        self.audio = b"\xff\xf3\x44\xc4\x00\x00\x00\x03"

    def set_pages(self, pages: list[list[dict]]) -> None:
        self.pages = [
            {
                "results": results,
                "nextPageCursor": str(i + 1) if i + 1 < len(pages) else None,
            }
            for i, results in enumerate(pages)
        ]

    def calls(self, path_fragment: str) -> list[httpx.Request]:
        return [r for r in self.requests if path_fragment in r.url.path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith("/api/v3/list/"):
            if self.queued_list_responses:
                return self.queued_list_responses.pop(0)
            cursor = request.url.params.get("pageCursor")
            return httpx.Response(200, json=self.pages[int(cursor) if cursor else 0])
        if path.startswith("/api/v3/update/"):
            return httpx.Response(self.update_status, json={"success": True})
        if path.startswith("/api/v3/delete/"):
            return httpx.Response(self.delete_status)
        if path == "/v1/messages":
            if self.summary_reply is not None:
                return httpx.Response(
                    self.summary_reply.status_code,
                    content=self.summary_reply.content,
                    headers=self.summary_reply.headers,
                )
            if self.summary_status != 200:
                return httpx.Response(self.summary_status, text="Rate limited")
            return httpx.Response(
                200, json={"content": [{"type": "text", "text": self.summary_text}]}
            )
        if path == "/v1/audio/speech":
            if self.tts_status != 200:
                return httpx.Response(self.tts_status, text="upstream down")
            return httpx.Response(
                200, content=self.audio, headers={"Content-Type": "audio/mpeg"}
            )
        return httpx.Response(404, text="Not Found")

    @staticmethod
    def json_body(request: httpx.Request) -> dict:
        return json.loads(request.content)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        readwise_token="test-readwise-token",
        anthropic_api_key="test-anthropic-key",
        openai_api_key=None,
        readwise_base_url="https://readwise.io/api/v3",
        summary_api_base_url="https://api.anthropic.com",
        openai_base_url="https://api.openai.com/v1",
        kv_backend="memory",
        list_page_delay=0,
        rate_limit_default_wait=0,
        purge_interval_minutes=0,
    )


@pytest.fixture
def fake() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def transport(fake) -> httpx.MockTransport:
    return httpx.MockTransport(fake.handler)


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def context(settings, store, transport):
    return build_context(settings, store=store, transport=transport)


@pytest.fixture
def client(context) -> TestClient:
    return TestClient(create_app(context))
