"""
API Scaffold — Application Configuration
=========================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the composition root, the CLI and the middleware.
When:  Loaded once at module import time.

Recognized variables:
    PORT, HOST, ENVIRONMENT, API_PREFIX, DOCS_ENABLED, CORS_ORIGIN,
    RATE_LIMIT_WINDOW, RATE_LIMIT_MAX, LOG_LEVEL, PRETTY_LOGGING,
    ROUTE_MODULES

    RATE_LIMIT_WINDOW / RATE_LIMIT_MAX are accepted and validated so that
    deployments can set them, but no limiter consumes them yet.
"""

from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Route modules served out of the box; each must export a `routes` list
DEFAULT_ROUTE_MODULES = [
    "apiscaffold.modules.health.routes",
    "apiscaffold.modules.todos.routes",
    "apiscaffold.modules.users.routes",
]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development. The environment
    name controls hot reload during discovery and whether stack traces are
    included in error responses.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3456, ge=1, le=65535)

    # What: Deployment environment
    # development → modules are reloaded on rediscovery, stacks in errors
    # production  → no stack traces leave the process
    environment: Literal["development", "production", "test"] = Field(
        default="development"
    )

    # ── API ───────────────────────────────────────────────────────────────
    # What: Path prefix every versioned route is mounted under
    api_prefix: str = Field(default="/api")

    # What: Dotted import paths of route modules, in mount order
    # Env format: JSON list, e.g. ROUTE_MODULES='["pkg.modules.a.routes"]'
    route_modules: List[str] = Field(default_factory=lambda: list(DEFAULT_ROUTE_MODULES))

    # ── Documentation ─────────────────────────────────────────────────────
    docs_enabled: bool = Field(default=True)
    docs_title: str = Field(default="API Reference")
    docs_description: str = Field(
        default="API documentation with OpenAPI specification"
    )

    # ── Security ──────────────────────────────────────────────────────────
    # Format: "*" or comma-separated URLs
    cors_origin: str = Field(default="*")
    rate_limit_window: int = Field(default=15, ge=1, le=1440)  # minutes
    rate_limit_max: int = Field(default=100, ge=1, le=100000)

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    pretty_logging: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        aliases = {"WARN": "WARNING", "FATAL": "CRITICAL", "TRACE": "DEBUG"}
        upper = aliases.get(v.upper(), v.upper())
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """'/api/' and 'api' both become '/api'; '' and '/' mean no prefix."""
        stripped = v.strip().strip("/")
        return f"/{stripped}" if stripped else ""

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton instance, imported throughout the application
settings = Settings()
