"""
Configuration management for the food ordering backend.

Loads settings from .env via pydantic-settings.

Notes:
    - Tokens are verified against Auth0 (RS256/JWKS) when AUTH0_DOMAIN is set,
      otherwise with the shared JWT_SECRET (HS256, development and tests).
    - validate_production_settings() enforces strict CORS and token
      verification in production.
"""
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Database ────────────────────────────────────────────────────
    database_url: str = "sqlite:///./data/food_ordering.db"

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"

    # ── Auth ────────────────────────────────────────────────────────
    # Auth0 tenant domain, e.g. "my-tenant.eu.auth0.com". Empty = HS256 mode.
    auth0_domain: str = ""
    jwt_audience: str = ""
    jwt_secret: str = ""
    jwt_issuer: str = "food-ordering-api"
    jwt_access_ttl_minutes: int = 60

    # ── Orders ──────────────────────────────────────────────────────
    # Redirect returned by checkout; payment capture happens elsewhere.
    checkout_redirect_url: str = "http://localhost:5173/order-status?success=true"
    order_poll_interval_seconds: float = 5.0
    # False = any enumerated status may follow any other.
    enforce_forward_transitions: bool = False

    # ── Search ──────────────────────────────────────────────────────
    search_page_size: int = 10

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def auth0_issuer(self) -> str:
        return f"https://{self.auth0_domain}/"

    @property
    def auth0_jwks_url(self) -> str:
        return f"https://{self.auth0_domain}/.well-known/jwks.json"

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup.
        """
        if self.environment == "production":
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if not self.auth0_domain and not self.jwt_secret:
                raise ValueError(
                    "AUTH0_DOMAIN or JWT_SECRET must be set in production. "
                    "One of them is needed to verify bearer tokens."
                )
            if self.auth0_domain and not self.jwt_audience:
                raise ValueError(
                    "JWT_AUDIENCE must be set when AUTH0_DOMAIN is configured."
                )
            logger.info("Production settings validated")
        else:
            warnings = []
            if not self.auth0_domain:
                warnings.append("AUTH0_DOMAIN not set (HS256 shared-secret tokens accepted)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(w)


# Global settings instance
settings = Settings()
