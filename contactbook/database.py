import threading
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Request

from contactbook.config import Settings, get_settings
from contactbook.services.credentials import resolve_profile
from contactbook.services.store import ContactStore


class StoreHandle:
    """Serializes access to one ContactStore shared by the API worker threads."""

    def __init__(self, store: ContactStore) -> None:
        self._store = store
        self._lock = threading.Lock()

    @contextmanager
    def acquire(self) -> Iterator[ContactStore]:
        with self._lock:
            yield self._store

    def close(self) -> None:
        with self._lock:
            self._store.close()


def open_store(settings: Settings | None = None, password: str | None = None) -> ContactStore:
    """Open a store from DATABASE_URL, else from the saved profile or the DB_* settings."""
    settings = settings or get_settings()
    if settings.database_url.strip():
        return ContactStore.from_settings(settings)
    profile = resolve_profile(settings)
    return profile.open_store(settings.db_password if password is None else password, strict_reads=settings.strict_reads)


def get_store_handle(request: Request) -> StoreHandle:
    return request.app.state.store_handle
