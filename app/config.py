from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "MVP90 Terminal API"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Upstream credentials (each one toggles its integration)
    github_token: str | None = None
    producthunt_token: str | None = None
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    openrouter_api_key: str | None = None

    # Upstream endpoints
    github_api_url: str = "https://api.github.com"
    producthunt_api_url: str = "https://api.producthunt.com/v2/api/graphql"
    producthunt_posted_after: str = "2023-01-01"
    producthunt_page_size: int = 20
    upstream_timeout_seconds: float = 10.0

    # Signal cache
    signal_cache_ttl_seconds: int = 300

    # Security
    cors_origins: list[str] = []

    # Sentry
    sentry_dsn: str | None = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Metrics
    metrics_backend: str = "stdout"
    metrics_namespace: str = "mvp90"
    metrics_disable: bool = False
    metrics_sample_rate: float = 1.0
    metrics_statsd_host: str = "127.0.0.1"
    metrics_statsd_port: int = 8125

    def integration_status(self) -> dict[str, bool]:
        """Report which upstream integrations have credentials configured."""
        return {
            "github": bool(self.github_token),
            "product_hunt": bool(self.producthunt_token),
            "supabase": bool(self.supabase_url and self.supabase_anon_key),
            "open_router": bool(self.openrouter_api_key),
        }

    model_config = ConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
