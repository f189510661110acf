"""Environment-based configuration for classification defaults."""

from __future__ import annotations

import functools
import logging
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from apperrors.constants import (
    DEFAULT_MESSAGE,
    DEFAULT_SUGGESTION,
    REQUEST_ID_HEADERS,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and APPERRORS_* environment variables."""

    # Fallback texts
    default_message: str = DEFAULT_MESSAGE
    default_suggestion: str = DEFAULT_SUGGESTION

    # Correlation headers (first non-empty wins)
    request_id_headers: Annotated[list[str], NoDecode] = list(
        REQUEST_ID_HEADERS
    )

    # Logging
    log_level: str = "WARNING"

    @field_validator("default_message", "default_suggestion")
    @classmethod
    def _require_text(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("fallback texts must not be blank")
        return stripped

    @field_validator("request_id_headers", mode="before")
    @classmethod
    def _parse_headers(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("request_id_headers")
    @classmethod
    def _validate_headers(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError(
                "request_id_headers must contain at least one header"
            )
        lowered = [h.strip().lower() for h in v]
        seen: set[str] = set()
        dupes: list[str] = []
        for h in lowered:
            if h in seen:
                dupes.append(h)
            seen.add(h)
        if dupes:
            logger.warning(
                "Duplicate headers in APPERRORS_REQUEST_ID_HEADERS: %s",
                ", ".join(dupes),
            )
        return lowered

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "APPERRORS_",
        "extra": "ignore",
    }


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once. Call cache_clear() to reload."""
    return Settings()
