"""Pydantic models for the JSON prediction endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PredictionRequest(BaseModel):
    """Request schema for the JSON prediction endpoint."""

    inputs: List[str] = Field(..., min_length=1)


class PredictionResponse(BaseModel):
    """Response schema for prediction results."""

    predictions: List[Any]
    probabilities: Optional[List[float]] = None


class BatchPredictionResponse(PredictionResponse):
    """Predictions for every row of an uploaded CSV file."""

    rows: int
    inputs: List[str]


class HealthResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    status: str
    model_loaded: bool
    model_path: str
    model: Optional[Dict[str, Any]] = None
