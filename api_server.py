from __future__ import annotations  # FastAPI application factory for the mock interview service

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import AppStores
from api.routes import router
from config.settings import Settings, settings as default_settings
from observability import configure_logging
from services.model_bindings import bind_llm_models
from storage.migrate import migrate
from storage.sqlite import Database


logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None, *, bind_models: bool = True) -> FastAPI:
    """Build the app with its database handle and stores created up front.

    Serve with ``uvicorn api_server:create_app --factory``.
    """

    cfg = app_settings or default_settings
    configure_logging()

    db = Database(Path(cfg.DB_PATH))
    migrate(str(db.path))

    app = FastAPI(title="Mock Interview API")
    app.state.settings = cfg
    app.state.stores = AppStores.open(db)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    if bind_models:
        bind_llm_models(Path(cfg.LLM_CONFIG_PATH))
    logger.info("Mock interview API ready db=%s", db.path)
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api_server:create_app", factory=True, host="0.0.0.0", port=8000)
