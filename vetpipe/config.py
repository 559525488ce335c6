"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All settings come from VETPIPE_* environment variables or .env (never hardcoded per host)
    - get_settings() is cached (lru_cache) — single instance per process
    - Defaults provided for every setting: works out-of-the-box

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - sensitive_key_patterns as a list: JSON-encoded in the environment, like any complex field
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vetpipe.core.domain_types import Locale
from vetpipe.core.redaction import DEFAULT_MASK, DEFAULT_SENSITIVE_KEYS


class Settings(BaseSettings):
    """Pipeline settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VETPIPE_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Sources
    source_encoding: str = "utf-8"
    max_source_bytes: int = 1_048_576

    # Reporting
    locale: Locale = Locale.EN
    redaction_mask: str = DEFAULT_MASK
    sensitive_key_patterns: list[str] = list(DEFAULT_SENSITIVE_KEYS)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("max_source_bytes")
    @classmethod
    def positive_limit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_source_bytes must be positive")
        return v

    @field_validator("log_format")
    @classmethod
    def known_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
