"""Application configuration utilities."""
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central application configuration loaded from environment variables."""

    app_name: str = Field(default="Contact Book API", env="APP_NAME")  # type: ignore[call-overload]
    app_env: str = Field(default="development", env="APP_ENV")  # type: ignore[call-overload]
    app_debug: bool = Field(default=False, env="APP_DEBUG")  # type: ignore[call-overload]
    database_url: str = Field(default="sqlite:///./contactbook.db", env="DATABASE_URL")  # type: ignore[call-overload]
    port: int = Field(default=4000, env="PORT")  # type: ignore[call-overload]

    # Single implicit user until authentication exists
    default_user_id: str = Field(default="demo", env="DEFAULT_USER_ID")  # type: ignore[call-overload]

    # HTTP surface
    cors_origins: List[str] = Field(
        default=["http://localhost:4000", "http://localhost:5173"], env="CORS_ORIGINS"
    )  # type: ignore[call-overload]
    rate_limit_enabled: bool = Field(default=True, env="RATE_LIMIT_ENABLED")  # type: ignore[call-overload]
    rate_limit_default: str = Field(default="100/minute", env="RATE_LIMIT_DEFAULT")  # type: ignore[call-overload]

    seed_demo_data: bool = Field(default=True, env="SEED_DEMO_DATA")  # type: ignore[call-overload]

    @field_validator("default_user_id")
    @classmethod
    def validate_default_user_id(cls, v: str) -> str:
        """Reject blank identities; every preference and note is keyed by it."""
        if not v.strip():
            raise ValueError("DEFAULT_USER_ID must not be blank")
        return v.strip()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.app_debug else "INFO"

    @property
    def debug_sql(self) -> bool:
        return self.app_debug


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of application settings."""

    return Settings()


settings = get_settings()
