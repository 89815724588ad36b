"""JSON prediction endpoints.

This module exposes two endpoints next to the form page:

* **JSON body**: ``POST /api/predict`` with ``{"inputs": [...]}`` returns a
  prediction (and, when the estimator supports it, the probability of the
  predicted class) for each input.

* **CSV upload**: ``POST /api/predict/batch`` accepts a CSV file with a
  column named like the form field and returns predictions for each row.

``GET /health`` reports whether the model is loaded without loading it.
"""

from __future__ import annotations

import pandas as pd
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..errors import PredictionError
from ..settings import Settings
from .dependencies import get_app_settings, get_predictor, get_predictor_cache
from .loader import Predictor, PredictorCache
from .schemas import BatchPredictionResponse, HealthResponse, PredictionRequest, PredictionResponse

router = APIRouter()
health_router = APIRouter()


@router.post("/predict", response_model=PredictionResponse)
def predict(payload: PredictionRequest, predictor: Predictor = Depends(get_predictor)) -> PredictionResponse:
    """Predict every element of ``inputs``."""
    try:
        predictions = predictor.predict(payload.inputs)
        probabilities = predictor.predict_proba(payload.inputs)
    except PredictionError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return PredictionResponse(predictions=predictions, probabilities=probabilities)


@router.post("/predict/batch", response_model=BatchPredictionResponse)
def predict_batch(
    file: UploadFile = File(...),
    predictor: Predictor = Depends(get_predictor),
    settings: Settings = Depends(get_app_settings),
) -> BatchPredictionResponse:
    """Predict each row of an uploaded CSV file.

    The file must contain a column named after ``INPUT_FIELD``; other
    columns are ignored.  Values are read as text without NA parsing, so
    "123" or "None" reach the model as written; only blank rows are
    skipped.
    """
    column = settings.INPUT_FIELD
    try:
        df = pd.read_csv(file.file, dtype={column: str}, keep_default_na=False)
    except Exception as exc:
        raise HTTPException(status_code=400, detail=f"Could not read the CSV file: {exc}")
    if column not in df.columns:
        raise HTTPException(status_code=400, detail=f"CSV has no '{column}' column")
    df = df[df[column].str.strip() != ""]
    if df.empty:
        raise HTTPException(status_code=400, detail="CSV contains no data")

    inputs = df[column].tolist()
    try:
        predictions = predictor.predict(inputs)
        probabilities = predictor.predict_proba(inputs)
    except PredictionError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return BatchPredictionResponse(
        rows=len(inputs),
        inputs=inputs,
        predictions=predictions,
        probabilities=probabilities,
    )


@health_router.get("/health", response_model=HealthResponse)
def health(cache: PredictorCache = Depends(get_predictor_cache)) -> HealthResponse:
    predictor = cache.peek()
    return HealthResponse(
        status="ok" if predictor is not None else "degraded",
        model_loaded=predictor is not None,
        model_path=cache.path,
        model=predictor.describe() if predictor is not None else None,
    )
