"""Provider configuration via pydantic-settings (.env + STORYTEL_* env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import BOOK_URL, DEFAULT_CACHE_TTL, DEFAULT_LOCALE, SEARCH_URL


class ProviderConfig(BaseSettings):
    """All provider configuration with layered resolution:
    .env file < environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_prefix="STORYTEL_",
        env_file=".env",
        extra="ignore",
    )

    # -- Catalog --
    locale: str = DEFAULT_LOCALE
    search_url: str = SEARCH_URL
    book_url: str = BOOK_URL
    user_agent: str = "Storytel"
    http_timeout: float = 30.0

    # -- Search --
    cache_ttl: int = DEFAULT_CACHE_TTL  # seconds
    max_detail_workers: int = 0  # 0 = one worker per search result

    # -- Logging --
    log_level: str = "INFO"
    log_dir: Path | None = None

    def setup_logging(self) -> None:
        """Configure loguru for the provider."""
        logger.remove()  # Remove default stderr handler

        log_format = (
            "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | "
            "{extra[stage]:<10} | {message}"
        )

        def _default_extra(record):
            record["extra"].setdefault("stage", "")
            return True

        logger.add(
            sys.stderr,
            format=log_format,
            level=self.log_level.upper(),
            filter=_default_extra,
        )

        if self.log_dir is None:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(self.log_dir / "storytel-metadata.log"),
            format=log_format,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            filter=_default_extra,
        )
