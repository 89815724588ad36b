"""FastAPI dependencies shared by the prediction routes."""

from fastapi import HTTPException, Request

from ..errors import ModelLoadError
from ..settings import Settings
from .loader import Predictor, PredictorCache


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_predictor_cache(request: Request) -> PredictorCache:
    return request.app.state.predictor_cache


def get_predictor(request: Request) -> Predictor:
    """Return the process predictor, loading it on first use.

    A model that cannot be loaded turns into a 503 so the page explains the
    problem instead of failing with a bare 500.
    """
    cache = get_predictor_cache(request)
    try:
        return cache.get()
    except ModelLoadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
