"""Form page for interactive predictions.

``POST /`` is a submission; every other method on ``/`` renders the
empty input form.  A submission reads the single field
named by ``INPUT_FIELD``, hands ``[value]`` to the predictor and renders the
same template with the result.  Problems are shown on the page itself with
a matching status code rather than as a JSON error body.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from ..errors import ModelLoadError, PredictionError
from ..log import get_logger
from ..settings import Settings
from .dependencies import get_app_settings, get_predictor_cache

logger = get_logger(__name__)

router = APIRouter()

TEMPLATE_NAME = "predict.html"


def render_form(request: Request, settings: Settings, status_code: int = 200, **context: Any) -> HTMLResponse:
    """Render the prediction page with ``context`` over empty defaults."""
    values = {
        "title": settings.TITLE,
        "field": settings.INPUT_FIELD,
        "value": "",
        "result": None,
        "probability": None,
        "error": None,
    }
    values.update(context)
    templates = request.app.state.templates
    return templates.TemplateResponse(request, TEMPLATE_NAME, values, status_code=status_code)


# every method but POST gets the empty form
FORM_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/", methods=FORM_METHODS, response_class=HTMLResponse)
async def predict_form(request: Request, settings: Settings = Depends(get_app_settings)) -> HTMLResponse:
    """Serve the empty input form for any request that is not a submission."""
    return render_form(request, settings)


@router.post("/", response_class=HTMLResponse)
async def predict_submit(request: Request, settings: Settings = Depends(get_app_settings)) -> HTMLResponse:
    """Predict from the submitted form field and render the result."""
    form = await request.form()
    value = form.get(settings.INPUT_FIELD)
    if not isinstance(value, str) or not value.strip():
        return render_form(
            request,
            settings,
            status_code=400,
            error=f"Please fill in the '{settings.INPUT_FIELD}' field.",
        )

    cache = get_predictor_cache(request)
    try:
        predictor = await run_in_threadpool(cache.get)
    except ModelLoadError as exc:
        logger.error("model_unavailable", path=exc.path, error=str(exc))
        return render_form(request, settings, status_code=503, value=value, error=str(exc))

    try:
        result = await run_in_threadpool(predictor.predict_one, value)
        probability = await run_in_threadpool(predictor.predict_proba_one, value)
    except PredictionError as exc:
        logger.error("prediction_failed", error=str(exc))
        return render_form(request, settings, status_code=500, value=value, error=str(exc))

    logger.debug("prediction_served", result=result, probability=probability)
    return render_form(request, settings, value=value, result=result, probability=probability)
