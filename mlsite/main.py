"""Entry point for the model serving FastAPI application.

This module sets up the FastAPI app: logging, the model, monitoring, static
files and the routing table.  The page at ``/`` renders a form whose single
field is passed to the loaded model; ``/api`` offers the same predictions
as JSON.
"""

from __future__ import annotations

import importlib
import os
import sys
from typing import Optional

from fastapi import APIRouter, FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from . import __version__
from .log import configure_logging, get_logger
from .monitoring import setup_monitoring
from .predictor.api import health_router
from .predictor.api import router as api_router
from .predictor.loader import PredictorCache
from .predictor.routes import router as page_router
from .settings import Settings, get_settings

logger = get_logger(__name__)


def import_router(dotted_path: str) -> APIRouter:
    """Import a router given as ``package.module:attribute``.

    The attribute defaults to ``router`` when omitted.
    Applications created by ``mlsite startapp`` live in the working
    directory, which is put on ``sys.path`` for the import.
    """
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    importlib.invalidate_caches()
    module_name, _, attribute = dotted_path.partition(":")
    module = importlib.import_module(module_name)
    router = getattr(module, attribute or "router", None)
    if not isinstance(router, APIRouter):
        raise ImportError(f"{dotted_path} does not name an APIRouter")
    return router


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    Parameters
    ----------
    settings : Settings, optional
        Settings to build the app from; the process settings by default.

    Returns
    -------
    FastAPI
        A configured FastAPI application ready to serve requests.

    Raises
    ------
    ModelLoadError
        When ``EAGER_LOAD`` is set and the model cannot be loaded.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    app = FastAPI(title=settings.TITLE, version=__version__)
    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)
    app.state.predictor_cache = PredictorCache(settings.MODEL_PATH, strict_versions=settings.STRICT_VERSIONS)
    if settings.EAGER_LOAD:
        app.state.predictor_cache.get()

    # register monitoring before other routes
    if settings.ENABLE_METRICS:
        setup_monitoring(app)
    app.mount("/static", StaticFiles(directory=settings.STATIC_DIR, check_dir=False), name="static")

    app.include_router(health_router)
    app.include_router(api_router, prefix="/api")
    for dotted_path in settings.EXTRA_ROUTERS:
        app.include_router(import_router(dotted_path))
        logger.info("router_installed", router=dotted_path)
    app.include_router(page_router)

    logger.info(
        "app_created",
        model_path=settings.MODEL_PATH,
        model_loaded=app.state.predictor_cache.loaded,
    )
    return app


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)
