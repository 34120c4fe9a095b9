import os
import tempfile

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("CONTACTS_CONFIG_DIR", tempfile.mkdtemp(prefix="contactbook-tests-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

from contactbook.config import get_settings  # noqa: E402
from contactbook.main import create_app  # noqa: E402
from contactbook.services.store import ContactStore  # noqa: E402
from tests.helpers import MEMORY_URL  # noqa: E402


@pytest.fixture(autouse=True)
def reset_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def store():
    contact_store = ContactStore(MEMORY_URL)
    contact_store.ensure_schema()
    yield contact_store
    contact_store.close()


@pytest.fixture()
def strict_store():
    contact_store = ContactStore(MEMORY_URL, strict_reads=True)
    contact_store.ensure_schema()
    yield contact_store
    contact_store.close()


@pytest.fixture()
def client(store):
    app = create_app(store=store)
    with TestClient(app) as test_client:
        yield test_client
