"""Client configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Connection settings loaded from ``TRAC_*`` env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_prefix="TRAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # May embed basic-auth credentials, hence secret.
    url: SecretStr
    timeout: float = 30.0
    verify_tls: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings (cached after first call)."""
    return Settings()  # type: ignore[call-arg]
