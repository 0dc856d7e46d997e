"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.

    All settings can be overridden via environment variables prefixed with EMBED_.
    For example, EMBED_IMGUR_CLIENT_ID=abc sets imgur_client_id="abc".
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EMBED_",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Server Settings ─────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    default_format: str = "json"

    # ─── Provider Credentials ────────────────────────────────────────
    twitter_bearer_token: str | None = None
    imgur_client_id: str | None = None

    # Seconds a faulted provider is skipped before its API is tried again
    error_response_cache_age: float = 300.0

    # ─── HTTP Client Settings ────────────────────────────────────────
    max_connections: int = 100
    max_keepalive_connections: int = 20
    request_timeout: float = 30.0
    user_agent: str = "Mozilla/5.0 (compatible; EmbedResolver/1.0)"

    # ─── SSL/TLS Settings ───────────────────────────────────────────
    ssl_cert_dir: str | None = None
    ssl_ca_bundle: str | None = None
    # Disable SSL verification (NOT recommended for production)
    ssl_verify: bool = True

    # ─── Cache Settings ──────────────────────────────────────────────
    cache_enabled: bool = True
    cache_ttl_seconds: int = 3600
    cache_max_size: int = 1000

    def is_twitter_configured(self) -> bool:
        """Check if the Twitter API is configured."""
        return bool(self.twitter_bearer_token)

    def is_imgur_configured(self) -> bool:
        """Check if the Imgur API is configured."""
        return bool(self.imgur_client_id)

    def get_ssl_context(self) -> bool | str:
        """
        Get SSL verification configuration for httpx.

        Returns:
            - False if ssl_verify is disabled
            - Path to CA bundle/cert dir if configured
            - True for default SSL verification

        Priority: ssl_verify=False > ssl_ca_bundle > ssl_cert_dir > True
        """
        if not self.ssl_verify:
            return False
        if self.ssl_ca_bundle:
            return self.ssl_ca_bundle
        if self.ssl_cert_dir:
            return self.ssl_cert_dir
        return True


# Global settings instance
settings = Settings()
