"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    claude_key: SecretStr | None = None
    claude_model: str = "claude-3-5-sonnet-latest"
    claude_base_url: str = "https://api.anthropic.com/v1/"
    github_token: SecretStr | None = None
    supabase_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    supabase_anon_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
    )
    posthog_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("POSTHOG_KEY", "NEXT_PUBLIC_POSTHOG_KEY"),
    )
    posthog_host: str = Field(
        default="https://us.i.posthog.com",
        validation_alias=AliasChoices("POSTHOG_HOST", "NEXT_PUBLIC_POSTHOG_HOST"),
    )
    http_timeout_seconds: float = 30.0
    expose_error_details: bool = False
    secure_cookies: bool = True
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def missing_auth_settings(self) -> list[str]:
        """Names of the auth-provider variables that are not set."""
        missing: list[str] = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if self.supabase_anon_key is None or not self.supabase_anon_key.get_secret_value():
            missing.append("SUPABASE_ANON_KEY")
        return missing

    @property
    def auth_configured(self) -> bool:
        return not self.missing_auth_settings()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
