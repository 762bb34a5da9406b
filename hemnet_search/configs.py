"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the app.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from hemnet_search.services.listings.fetcher import RendererConfig


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # Browser rendering service
    BROWSER_RENDER_URL: Optional[str] = None
    BROWSER_RENDER_API_KEY: Optional[str] = None
    BROWSER_RENDER_TIMEOUT_MS: int = 10000

    # HTTP parameters
    HTTP_TIMEOUT_SECONDS: float = 30
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def renderer_config(self) -> RendererConfig:
        """Freeze the renderer settings into the value injected into fetchers."""
        return RendererConfig(
            base_url=self.BROWSER_RENDER_URL,
            api_key=self.BROWSER_RENDER_API_KEY,
            timeout_ms=self.BROWSER_RENDER_TIMEOUT_MS,
            request_timeout=self.HTTP_TIMEOUT_SECONDS,
        )
