# assortment/main.py

from __future__ import annotations

import logging

from fastapi import FastAPI

from assortment.config import setup_json_logging, settings
from assortment.api.routes.invoices import router as invoices_router
from assortment.api.routes.selection import router as selection_router


def create_app() -> FastAPI:
    setup_json_logging(log_level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))

    app = FastAPI(
        title="ASSORTMENT SELECTION ENGINE - Solver API",
        version="0.1.0",
    )

    app.include_router(selection_router)
    app.include_router(invoices_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
