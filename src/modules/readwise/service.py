import asyncio
import logging
import math
from datetime import datetime, timezone

import httpx

from src.config.settings import Settings
from src.modules.common.errors import ConfigurationError, NotFoundError, UpstreamError
from src.modules.readwise.schemas import Article, ArticlePage, FeedScope

logger = logging.getLogger(__name__)

ARCHIVE = "archive"
LOCATIONS_BY_SCOPE: dict[FeedScope, frozenset[str]] = {
    FeedScope.FEED: frozenset({"new", "feed"}),
    FeedScope.LIBRARY: frozenset({"later", "shortlist"}),
}
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def in_scope(article: Article, scope: FeedScope) -> bool:
    if article.category != "article" or article.location == ARCHIVE:
        return False
    locations = LOCATIONS_BY_SCOPE.get(scope)
    return locations is None or article.location in locations


def _newest_first(article: Article) -> tuple[bool, datetime]:
    return article.saved_at is not None, article.saved_at or _OLDEST


class ReadwiseService:
    """Client for the Readwise Reader document API."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    # ── HTTP layer ──────────────────────────────────────────────

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.readwise_base_url,
            transport=self._transport,
            timeout=self._settings.request_timeout,
        )

    def _headers(self) -> dict[str, str]:
        token = self._settings.readwise_token
        if not token:
            raise ConfigurationError("READWISE_TOKEN is not configured")
        return {"Authorization": f"Token {token}", "Content-Type": "application/json"}

    def _retry_after(self, response: httpx.Response) -> float:
        raw = response.headers.get("Retry-After", "")
        try:
            wait = float(raw)
        except ValueError:
            wait = self._settings.rate_limit_default_wait
        if not math.isfinite(wait):
            wait = self._settings.rate_limit_default_wait
        return min(max(wait, 0.0), self._settings.rate_limit_max_wait)

    async def _send(
        self, client: httpx.AsyncClient, method: str, path: str, **kwargs
    ) -> httpx.Response:
        headers = self._headers()
        max_retries = self._settings.rate_limit_max_retries
        attempt = 0
        while True:
            try:
                response = await client.request(method, path, headers=headers, **kwargs)
            except httpx.RequestError as exc:
                raise UpstreamError(f"Readwise request failed: {exc}") from exc
            if response.status_code != 429 or attempt >= max_retries:
                break
            attempt += 1
            wait = self._retry_after(response)
            logger.warning(
                "Rate limited on %s %s (retry %d/%d), waiting %.1fs",
                method, path, attempt, max_retries, wait,
            )
            await asyncio.sleep(wait)

        if response.status_code == 404:
            raise NotFoundError(f"Readwise document not found: {path}", status=404)
        if not response.is_success:
            raise UpstreamError(
                f"Readwise API error: {response.status_code}",
                status=response.status_code,
            )
        return response

    # ── Operations ──────────────────────────────────────────────

    async def list_candidates(self, scope: FeedScope = FeedScope.ALL) -> list[Article]:
        """Fetch every listenable document in ``scope``, newest first."""
        max_pages = self._settings.list_max_pages
        max_results = self._settings.list_max_results
        candidates: list[Article] = []
        cursor: str | None = None

        async with self._client() as client:
            for page in range(1, max_pages + 1):
                params = {"pageCursor": cursor} if cursor else {}
                response = await self._send(client, "GET", "/list/", params=params)
                data = ArticlePage.model_validate(response.json())
                kept = [a for a in data.results if in_scope(a, scope)]
                candidates.extend(kept)
                logger.info(
                    "List page %d: %d documents, %d in scope '%s'",
                    page, len(data.results), len(kept), scope.value,
                )

                cursor = data.next_page_cursor
                if not cursor or len(candidates) >= max_results:
                    break
                if page < max_pages:
                    await asyncio.sleep(self._settings.list_page_delay)

        candidates = candidates[:max_results]
        candidates.sort(key=_newest_first, reverse=True)
        logger.info("Collected %d candidates for scope '%s'", len(candidates), scope.value)
        return candidates

    async def update(self, article_id: str, patch: dict) -> None:
        async with self._client() as client:
            await self._send(client, "PATCH", f"/update/{article_id}/", json=patch)
        logger.info("Updated %s with %s", article_id, patch)

    async def remove(self, article_id: str) -> None:
        async with self._client() as client:
            try:
                await self._send(client, "DELETE", f"/delete/{article_id}/")
            except NotFoundError:
                logger.info("Document %s already gone upstream", article_id)
                return
        logger.info("Deleted %s", article_id)
