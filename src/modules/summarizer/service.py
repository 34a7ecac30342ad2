import logging

import httpx

from src.config.settings import Settings
from src.modules.common.errors import ConfigurationError, SummarizerError
from src.modules.readwise.metadata import UNTITLED, article_text, extract_source
from src.modules.readwise.schemas import Article
from src.modules.summarizer.prompts import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)


class SummarizerService:
    """Single-shot spoken summaries from the Anthropic Messages API."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    def build_prompt(self, article: Article) -> str:
        return USER_PROMPT_TEMPLATE.format(
            source=extract_source(article),
            title=article.title or UNTITLED,
            content=article_text(article)[: self._settings.summary_content_chars],
        )

    async def summarize(self, article: Article) -> str:
        api_key = self._settings.anthropic_api_key
        if not api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY is not configured")

        payload = {
            "model": self._settings.summary_model,
            "max_tokens": self._settings.summary_max_tokens,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": self.build_prompt(article)}],
        }
        headers = {
            "x-api-key": api_key,
            "anthropic-version": self._settings.anthropic_version,
            "content-type": "application/json",
        }
        url = f"{self._settings.summary_api_base_url}/v1/messages"

        async with httpx.AsyncClient(
            transport=self._transport, timeout=self._settings.request_timeout
        ) as client:
            try:
                response = await client.post(url, headers=headers, json=payload)
            except httpx.RequestError as exc:
                raise SummarizerError(f"Summarizer request failed: {exc}") from exc

        if not response.is_success:
            raise SummarizerError(
                f"Summarizer API error: {response.status_code} - {response.text}",
                status=response.status_code,
                body=response.text,
            )

        try:
            blocks = response.json().get("content") or []
            text = "".join(
                block.get("text", "")
                for block in blocks
                if block.get("type", "text") == "text"
            ).strip()
        except (ValueError, AttributeError, TypeError) as exc:
            raise SummarizerError(
                f"Summarizer returned an unreadable reply: {exc}",
                status=response.status_code,
                body=response.text,
            ) from exc
        if not text:
            raise SummarizerError(
                "Summarizer returned no text", status=response.status_code, body=response.text
            )
        logger.info("Summarized %s (%d words)", article.id, len(text.split()))
        return text
