"""Application settings.

Nothing here is validated at import time. The process entry point calls
``load_settings()`` once and passes the result along.
"""
import logging
from typing import List

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ConfigurationError(RuntimeError):
    pass


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str
    secret_key: str

    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    host: str = "127.0.0.1"
    port: int = 8000

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        # Railway/Heroku style URLs use the scheme SQLAlchemy dropped
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("secret_key")
    @classmethod
    def secret_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("SECRET_KEY cannot be blank")
        return v


def load_settings(**overrides) -> Settings:
    """Read settings from the environment, failing with every missing variable listed."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            name = ".".join(str(part) for part in error["loc"]).upper()
            problems.append(f"  - {name}: {error['msg']}")
        raise ConfigurationError(
            "Invalid or missing environment configuration:\n" + "\n".join(problems)
        ) from e


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
