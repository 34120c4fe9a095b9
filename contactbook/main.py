import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from contactbook.api.routes import contacts, exports, health
from contactbook.config import Settings, configure_logging, get_settings
from contactbook.database import StoreHandle, open_store
from contactbook.services.store import ContactStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: ContactStore | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active_settings = settings or get_settings()
        configure_logging(active_settings)
        owned = store is None
        active_store = store
        if owned:
            active_store = open_store(active_settings)
            try:
                active_store.ensure_schema()
            except Exception:
                active_store.close()
                raise
        app.state.store_handle = StoreHandle(active_store)
        logger.info("Contacts API ready (%d contacts)", active_store.count())
        yield
        if owned:
            app.state.store_handle.close()

    app = FastAPI(
        title="Contact Book",
        version="0.1.0",
        description="CRUD, search and CSV transfer over the contacts table.",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(contacts.router)
    app.include_router(exports.router)

    return app


app = create_app()
