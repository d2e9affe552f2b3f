from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from achievements.config import Settings, configure_logging, settings as default_settings
from achievements.extensions import Database
from achievements.repository import SchoolStore
from achievements.routers import badges, events


def create_app(config: Optional[Settings] = None, store: Optional[SchoolStore] = None) -> FastAPI:
    config = config or default_settings
    configure_logging(config.LOG_LEVEL)
    if store is None:
        database = Database(config.DATABASE_URL, timeout=config.DB_TIMEOUT_SECONDS)
        store = SchoolStore(database, app_id=config.APP_ID)

    app = FastAPI(title=config.APP_NAME)
    app.state.settings = config
    app.state.store = store

    app.include_router(events.router)
    app.include_router(badges.router)

    @app.get("/health", name="main.health")
    def health():
        return {"status": "ok"}

    return app
