"""
Treeflow — FastAPI application for the workflow tree builder.

Run with::

    uvicorn treeflow.main:app --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from treeflow import __version__
from treeflow.config import get_config
from treeflow.controller import workflow_editor_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the API app and configure logging from the editor config."""
    config = get_config("editor")
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Treeflow · Workflow Tree Builder", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(workflow_editor_router)

    @app.get("/health")
    def health():
        return {"status": "ok", "version": __version__}

    logger.info(f"Treeflow API ready (storage: {config.resolve_storage_dir()})")
    return app


app = create_app()
