"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
NonNegativeFloat = Annotated[float, Field(ge=0.0)]
NonNegativeInt = Annotated[int, Field(ge=0)]
PositiveInt = Annotated[int, Field(gt=0)]
PortInt = Annotated[int, Field(gt=0, le=65_535)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    api_host: NonEmptyStr = Field(default="0.0.0.0", validation_alias="API_HOST")
    api_port: PortInt = Field(default=3000, validation_alias="API_PORT")
    db_pool_size: PositiveInt = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: NonNegativeInt = Field(default=0, validation_alias="DB_MAX_OVERFLOW")
    db_pool_timeout_seconds: NonNegativeFloat = Field(
        default=30.0,
        validation_alias="DB_POOL_TIMEOUT_SECONDS",
    )
    cors_origins: NonEmptyStr = Field(default="*", validation_alias="CORS_ORIGINS")
    static_dir: NonEmptyStr | None = Field(default=None, validation_alias="STATIC_DIR")
    alembic_config_path: NonEmptyStr = Field(
        default="alembic.ini",
        validation_alias="ALEMBIC_CONFIG",
    )

    def cors_origin_list(self) -> list[str]:
        """Return configured CORS origins, with `*` meaning any origin."""

        if self.cors_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
