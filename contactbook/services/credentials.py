"""Saved connection details for the contacts database.

Only host, port, user and database name are written, one per line. The
password is never persisted and has to be supplied at connect time.
"""

import logging
import stat
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from contactbook.config import Settings, build_url
from contactbook.services.store import ContactStore

logger = logging.getLogger(__name__)


class ConnectionProfile(BaseModel):
    host: str = Field(default="localhost", min_length=1)
    port: int = Field(default=3306, ge=1, le=65535)
    user: str = Field(default="root", min_length=1)
    database: str = Field(default="Contacts", min_length=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionProfile":
        return cls(host=settings.db_host, port=settings.db_port, user=settings.db_user, database=settings.db_name)

    def to_lines(self) -> list[str]:
        return [self.host, str(self.port), self.user, self.database]

    def open_store(self, password: str, **kwargs) -> ContactStore:
        return ContactStore(
            build_url(host=self.host, user=self.user, password=password, database=self.database, port=self.port),
            **kwargs,
        )


def save_profile(profile: ConnectionProfile, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Restrict permissions before any content is written.
    path.touch(mode=stat.S_IRUSR | stat.S_IWUSR)
    path.chmod(stat.S_IRUSR | stat.S_IWUSR)
    path.write_text("\n".join(profile.to_lines()) + "\n", encoding="utf-8")
    logger.info("Saved connection profile to %s", path)


def load_profile(path: Path) -> ConnectionProfile | None:
    if not path.is_file():
        return None
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable connection profile %s: %s", path, exc)
        return None
    if len(lines) < 4:
        logger.warning("Ignoring incomplete connection profile %s", path)
        return None
    host, port, user, database = (line.strip() for line in lines[:4])
    try:
        return ConnectionProfile(host=host, port=port, user=user, database=database)
    except PydanticValidationError as exc:
        logger.warning("Ignoring invalid connection profile %s: %s", path, exc)
        return None


def clear_profile(path: Path) -> bool:
    if not path.exists():
        return False
    path.unlink()
    logger.info("Removed saved connection profile %s", path)
    return True


def resolve_profile(settings: Settings) -> ConnectionProfile:
    return load_profile(settings.credentials_file) or ConnectionProfile.from_settings(settings)
