"""Application configuration."""

import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    session_secret: str = Field(
        validation_alias=AliasChoices("session_secret", "cookie_secret")
    )
    host: str = "http://localhost"
    port: int = 5000
    persona_verifier_url: str = "https://verifier.login.persona.org/verify"
    allowed_email_domain: str = "mozillafoundation.org"
    recent_limit: int = 20
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def audience(self) -> str:
        """Identity audience; must match the browser's address bar."""
        return f"{self.host}:{self.port}"
