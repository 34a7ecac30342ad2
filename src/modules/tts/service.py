import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack

import httpx
from openai import APIError, AsyncOpenAI

from src.config.settings import Settings
from src.modules.common.errors import TTSError

logger = logging.getLogger(__name__)


class AudioStream:
    """An open upstream audio response; closes itself once drained."""

    def __init__(self, stack: AsyncExitStack, response) -> None:
        self._stack = stack
        self._response = response

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.iter_bytes():
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._stack.aclose()


class TTSService:
    """Proxy to the OpenAI speech endpoint. Without a key every call falls back."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._settings.openai_api_key)

    def _client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=self._settings.openai_api_key,
            base_url=self._settings.openai_base_url,
            max_retries=0,
            http_client=httpx.AsyncClient(
                transport=self._transport, timeout=self._settings.request_timeout
            ),
        )

    async def synthesize(self, text: str, voice: str | None = None) -> AudioStream:
        if not self.enabled:
            raise TTSError("OPENAI_API_KEY is not configured")

        stack = AsyncExitStack()
        client = await stack.enter_async_context(self._client())
        try:
            response = await stack.enter_async_context(
                client.audio.speech.with_streaming_response.create(
                    model=self._settings.tts_model,
                    input=text[: self._settings.tts_max_chars],
                    voice=voice or self._settings.tts_default_voice,
                    response_format="mp3",
                )
            )
        except APIError as exc:
            await stack.aclose()
            raise TTSError(f"TTS API error: {exc}") from exc

        logger.info("Streaming %d chars of speech", len(text))
        return AudioStream(stack, response)
