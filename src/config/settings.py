from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DAY = 60 * 60 * 24


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    # Credentials
    readwise_token: str | None = None
    anthropic_api_key: str | None = None
    openai_api_key: str | None = None

    # Upstream endpoints
    readwise_base_url: str = "https://readwise.io/api/v3"
    reader_document_url: str = "https://read.readwise.io/read"
    summary_api_base_url: str = "https://api.anthropic.com"
    anthropic_version: str = "2023-06-01"
    openai_base_url: str = "https://api.openai.com/v1"
    request_timeout: float = 30.0

    # Article list
    list_max_pages: int = 10
    list_max_results: int = 200
    list_page_delay: float = 3.0
    rate_limit_default_wait: float = 60.0
    rate_limit_max_wait: float = 60.0
    rate_limit_max_retries: int = 3

    # Summaries
    summary_model: str = "claude-3-haiku-20240307"
    summary_max_tokens: int = 300
    summary_content_chars: int = 8000
    summary_cache_ttl: int = 30 * DAY

    # Markers & feed
    heard_ttl: int = 30 * DAY
    later_ttl: int = 7 * DAY
    feed_max_items: int = 30
    content_preview_chars: int = 2000
    defer_moves_upstream: bool = False

    # Text to speech
    tts_model: str = "tts-1"
    tts_default_voice: str = "alloy"
    tts_max_chars: int = 4096

    # Storage
    kv_backend: Literal["sql", "memory"] = "sql"
    database_url: str = "sqlite+aiosqlite:///./readwise_audio.db"
    purge_interval_minutes: int = 60

    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"


settings = Settings()
