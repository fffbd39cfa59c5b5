from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CrawlerSettings(BaseSettings):
    """
    Environment-driven settings for the gallery crawler and its CLI.
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # ---- Crawling ----
    base_url: str = Field(default="https://gall.dcinside.com", alias="DC_BASE_URL")
    default_gallery_id: str = Field(default="chatgpt", alias="DC_DEFAULT_GALLERY_ID")

    request_timeout_sec: float = Field(default=10.0, alias="DC_REQUEST_TIMEOUT_SEC")
    # Minimum spacing between the starts of two post fetches in a batch.
    request_delay_sec: float = Field(default=0.1, ge=0.0, alias="DC_REQUEST_DELAY_SEC")

    # ---- Output ----
    output_dir: str = Field(default="./output", alias="DC_OUTPUT_DIR")

    # ---- Logging ----
    log_level: str = Field(default="INFO", alias="DC_LOG_LEVEL")


def load_settings() -> CrawlerSettings:
    return CrawlerSettings()
