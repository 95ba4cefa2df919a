# python
# app/core/config.py
"""Configuration settings for the Chat Relay API.

Uses Pydantic BaseSettings for environment variable management.
"""
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Chat Relay API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")
    api_prefix: str = Field(default="/api", description="Common prefix for all API routes")

    # ===== Security Settings =====
    supabase_jwt_secret: str | None = Field(
        default=None, description="Shared secret used to verify bearer tokens"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")

    # ===== Database Settings (Supabase Postgres) =====
    database_url: str | None = Field(default=None, description="Database connection URL")
    test_database_url: str | None = Field(default=None, description="Test database URL")
    supabase_service_role_key: str | None = Field(
        default=None, description="Supabase service role key"
    )
    supabase_anon_key: str | None = Field(default=None, description="Supabase anonymous key")

    # ===== Upstream Completion API (OpenAI) =====
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    openai_default_model: str = Field(default="gpt-4o", description="Model used when none is given")
    openai_timeout: float = Field(default=60.0, description="OpenAI request timeout in seconds")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=3001, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_ai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def storage_key(self) -> str | None:
        # Prefer the service role on the server
        return self.supabase_service_role_key or self.supabase_anon_key

    @property
    def storage_role(self) -> str:
        if self.supabase_service_role_key:
            return "service_role"
        if self.supabase_anon_key:
            return "anon"
        return "none"

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v):
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings():
        errors = []
        if not settings.database_url:
            errors.append("DATABASE_URL is required")
        if not settings.supabase_jwt_secret:
            errors.append("SUPABASE_JWT_SECRET is required")
        if not settings.openai_api_key:
            errors.append("OPENAI_API_KEY is required")
        if settings.is_production and not settings.storage_key:
            errors.append(
                "SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY) is required in production"
            )
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "ai_enabled": settings.has_ai_enabled,
            "auth_enabled": bool(settings.supabase_jwt_secret),
            "storage_role": settings.storage_role,
            "environment": settings.environment,
        }


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "database_configured": bool(settings.database_url),
        "auth_configured": bool(settings.supabase_jwt_secret),
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
