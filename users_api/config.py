"""Application configuration using Pydantic Settings.

Environment Variable Strategy:
- DATABASE_URL wins when set
- Otherwise the URL is assembled from the discrete DB_* variables
- Everything else has a development default
"""

from functools import cached_property

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_comma_list(value: str | list[str] | None, default: list[str]) -> list[str]:
    """Parse comma-separated string into list."""
    if value is None:
        return default
    if isinstance(value, list):
        return value
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: str = Field(default="postgres", validation_alias="DB_PASSWORD")
    db_host: str = Field(default="127.0.0.1", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_database: str = Field(default="users", validation_alias="DB_DATABASE")

    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_recycle: int = 3600
    create_tables_on_startup: bool = True

    # App settings
    environment: str = Field(
        default="development", validation_alias=AliasChoices("ENVIRONMENT", "ENV")
    )
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 7800

    # Env format: CORS_ORIGINS="http://localhost:3000,http://localhost:3001"
    cors_origins_str: str | None = Field(default=None, validation_alias="CORS_ORIGINS")

    # Users
    bcrypt_rounds: int = 10
    default_page: int = 1
    default_page_limit: int = 10

    @cached_property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from env string or use defaults."""
        return parse_comma_list(
            self.cors_origins_str,
            [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
            ],
        )


settings = Settings()
