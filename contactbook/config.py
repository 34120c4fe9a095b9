import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from contactbook.constants import CREDENTIALS_FILENAME

DEFAULT_DRIVER = "mysql+pymysql"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    database_url: str = Field(default="", alias="DATABASE_URL")
    db_host: str = Field(default="localhost", alias="DB_HOST")
    db_port: int = Field(default=3306, alias="DB_PORT")
    db_user: str = Field(default="root", alias="DB_USER")
    db_password: str = Field(default="", alias="DB_PASSWORD")
    db_name: str = Field(default="Contacts", alias="DB_NAME")

    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "contacts-app", alias="CONTACTS_CONFIG_DIR")
    strict_reads: bool = Field(default=False, alias="CONTACTS_STRICT_READS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_required_runtime(self) -> "Settings":
        if not self.database_url.strip():
            if not self.db_host.strip():
                raise ValueError("DB_HOST is required when DATABASE_URL is not set")
            if not self.db_user.strip():
                raise ValueError("DB_USER is required when DATABASE_URL is not set")
            if not self.db_name.strip():
                raise ValueError("DB_NAME is required when DATABASE_URL is not set")
        if not 1 <= self.db_port <= 65535:
            raise ValueError("DB_PORT must be between 1 and 65535")
        self.log_level = self.log_level.upper()
        if self.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown LOG_LEVEL: {self.log_level}")
        return self

    @property
    def credentials_file(self) -> Path:
        return self.config_dir / CREDENTIALS_FILENAME

    def sqlalchemy_url(self) -> str | URL:
        if self.database_url.strip():
            return self.database_url
        return build_url(
            host=self.db_host,
            user=self.db_user,
            password=self.db_password,
            database=self.db_name,
            port=self.db_port,
        )


def build_url(*, host: str, user: str, password: str, database: str, port: int = 3306) -> URL:
    return URL.create(
        DEFAULT_DRIVER,
        username=user,
        password=password or None,
        host=host,
        port=port,
        database=database,
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
