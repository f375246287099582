import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contacts_api.core.config import Settings, load_settings
from contacts_api.core.logging_config import setup_logging
from contacts_api.db.mongo import MongoStore
from contacts_api.routes import contacts
from contacts_api.utils.errors import ContactError, contact_error_handler

logger = logging.getLogger("contacts_api")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        settings.validate()

        store = MongoStore(settings)
        app.state.store = store
        try:
            store.connect()
            await store.ensure_indexes()
            logger.info("🚀 Server running at http://%s:%s", settings.host, settings.port)
            yield
        finally:
            store.close()

    app = FastAPI(title="Contact Directory Service", lifespan=lifespan)
    app.state.settings = settings

    # Any origin may call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ContactError, contact_error_handler)

    @app.get("/")
    def root():
        return {"message": "Contact directory service running"}

    app.include_router(contacts.router)
    return app


if __name__ == "__main__":
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
