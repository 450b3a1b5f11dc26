"""edgekit configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EDGEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Core
    port: int = 8080
    debug: bool = False
    cors_origins: str = "*"  # comma-separated

    # Verification material
    token_hash: str | None = None  # base64URL SHA-512 of the bearer token
    public_key: str | None = None  # ECDSA P-521 JWK for signed URLs

    @property
    def cors_origins_list(self) -> list[str]:
        """Get allowed CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
