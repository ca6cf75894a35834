"""
Main entrypoint for the Tourisma API.

This module assembles the FastAPI application, sets up logging, builds
the in-memory store and includes the versioned routers.  The
application is instantiated at import time as ``app`` so it can be
served directly::

    uvicorn tourisma_api.app.main:app --reload
"""

from typing import Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.logging_config import setup_logging
from .core.store import DataStore, init_store


def create_app(store: Optional[DataStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[DataStore]
        Store to serve.  When omitted a new one is created and, if
        ``settings.seed_fixtures`` is set, filled with the demo data.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    # One store per application; endpoints reach it through ``get_store``.
    app.state.store = store if store is not None else init_store(seed=settings.seed_fixtures)

    app.include_router(v1_router, prefix="/api/v1")
    return app


app = create_app()
