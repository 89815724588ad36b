"""Model loader for the prediction application.

The trained scikit-learn pipeline is persisted as a Joblib file, by default
under ``models/model.joblib``.  This module turns that file into a
:class:`Predictor` and keeps exactly one of them per process through
:class:`PredictorCache`.

Training writes a ``<model file>.meta.json`` sidecar recording the library
versions used for serialization.  When it is present the versions are
compared against the installed ones: a mismatch is logged, or raised as
:class:`~mlsite.errors.ModelVersionError` in strict mode.
"""

from __future__ import annotations

import json
import os
import threading
import time
import warnings
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import joblib
import sklearn

from ..errors import (
    ModelFormatError,
    ModelLoadError,
    ModelNotFoundError,
    ModelPermissionError,
    ModelVersionError,
    PredictionError,
)
from ..log import get_logger

logger = get_logger(__name__)

METADATA_SUFFIX = ".meta.json"


def metadata_path(model_path: Union[str, Path]) -> Path:
    """Return the path of the metadata sidecar for ``model_path``."""
    model_path = Path(model_path)
    return model_path.with_name(model_path.name + METADATA_SUFFIX)


def installed_versions() -> Dict[str, str]:
    """Versions of the libraries that take part in (de)serialization."""
    return {"sklearn_version": sklearn.__version__, "joblib_version": joblib.__version__}


def _to_python(value: Any) -> Any:
    # numpy scalars expose .item(); plain Python values pass through
    item = getattr(value, "item", None)
    return item() if callable(item) else value


@dataclass
class Predictor:
    """A deserialized model held in memory for the lifetime of the process."""

    model: Any
    path: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def supports_proba(self) -> bool:
        return callable(getattr(self.model, "predict_proba", None))

    def predict(self, values: Iterable[Any]) -> List[Any]:
        """Run the model on a sequence of inputs.

        Raises
        ------
        PredictionError
            If the estimator raises for the given inputs.
        """
        values = list(values)
        try:
            result = self.model.predict(values)
        except Exception as exc:
            raise PredictionError(f"Prediction failed: {exc}") from exc
        return [_to_python(v) for v in result]

    def predict_proba(self, values: Iterable[Any]) -> Optional[List[float]]:
        """Probability of the predicted class for each input, if available."""
        if not self.supports_proba:
            return None
        values = list(values)
        try:
            proba = self.model.predict_proba(values)
        except Exception as exc:
            raise PredictionError(f"Prediction failed: {exc}") from exc
        return [float(max(row)) for row in proba]

    def predict_one(self, value: Any) -> Any:
        """Wrap ``value`` in a single-element sequence and return its prediction."""
        return self.predict([value])[0]

    def predict_proba_one(self, value: Any) -> Optional[float]:
        proba = self.predict_proba([value])
        return None if proba is None else proba[0]

    def describe(self) -> Dict[str, Any]:
        """Summary used by the health endpoint and ``mlsite check``."""
        return {
            "path": self.path,
            "estimator": type(self.model).__name__,
            "loaded_at": self.loaded_at.isoformat(),
            "metadata": dict(self.metadata),
        }


def _read_metadata(model_path: Path) -> Dict[str, Any]:
    meta_path = metadata_path(model_path)
    if not meta_path.exists():
        return {}
    try:
        with open(meta_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("model_metadata_unreadable", path=str(meta_path), error=str(exc))
        return {}


def _check_versions(path: str, metadata: Dict[str, Any], strict: bool) -> None:
    installed = installed_versions()
    mismatches = {
        key: (metadata[key], current)
        for key, current in installed.items()
        if metadata.get(key) and metadata[key] != current
    }
    if not mismatches:
        return
    details = ", ".join(f"{k}: saved {saved}, installed {cur}" for k, (saved, cur) in mismatches.items())
    if strict:
        raise ModelVersionError(
            f"Model {path} was serialized with different library versions ({details}). "
            "Retrain the model or install the recorded versions.",
            path=path,
            mismatches=mismatches,
        )
    logger.warning("model_version_mismatch", path=path, details=details)


def load_model(path: Union[str, Path], strict_versions: bool = False) -> Predictor:
    """Load the serialized model at ``path`` and return a :class:`Predictor`.

    Parameters
    ----------
    path : str or Path
        Location of the ``joblib`` file.
    strict_versions : bool, optional
        Raise instead of warning when the model was serialized with other
        library versions.

    Raises
    ------
    ModelNotFoundError
        If no file exists at ``path``.
    ModelPermissionError
        If the file cannot be read.
    ModelFormatError
        If the file cannot be deserialized or the object has no ``predict``.
    ModelVersionError
        On a library version mismatch when ``strict_versions`` is set.
    """
    model_path = Path(path)
    shown = str(model_path)
    if not model_path.is_file():
        raise ModelNotFoundError(
            f"Model not found at {shown} (working directory {os.getcwd()}). "
            "Verify MLSITE_MODEL_PATH or run 'mlsite train'.",
            path=shown,
        )

    metadata = _read_metadata(model_path)
    _check_versions(shown, metadata, strict_versions)

    started = time.perf_counter()
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            model = joblib.load(model_path)
        except PermissionError as exc:
            raise ModelPermissionError(
                f"Permission denied reading model {shown}. Check the file permissions.",
                path=shown,
            ) from exc
        except Exception as exc:
            raise ModelFormatError(
                f"Could not deserialize model {shown}: {exc}. The file may be corrupt "
                "or written by an incompatible library version.",
                path=shown,
            ) from exc
    for warning in caught:
        if type(warning.message).__name__ == "InconsistentVersionWarning":
            if strict_versions:
                raise ModelVersionError(str(warning.message), path=shown)
            logger.warning("model_version_mismatch", path=shown, details=str(warning.message))

    if not callable(getattr(model, "predict", None)):
        raise ModelFormatError(
            f"Object loaded from {shown} ({type(model).__name__}) has no predict method.",
            path=shown,
        )

    predictor = Predictor(model=model, path=shown, metadata=metadata)
    logger.info(
        "model_loaded",
        path=shown,
        estimator=type(model).__name__,
        seconds=round(time.perf_counter() - started, 4),
    )
    return predictor


class PredictorCache:
    """Holds the one predictor of a process.

    The first call to :meth:`get` loads the model; concurrent first calls
    wait on a lock so the file is deserialized once.  A failed load is not
    remembered, so placing the file and retrying works without a restart.
    """

    def __init__(self, path: Union[str, Path], strict_versions: bool = False):
        self.path = str(path)
        self.strict_versions = strict_versions
        self._predictor: Optional[Predictor] = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._predictor is not None

    def peek(self) -> Optional[Predictor]:
        """Return the predictor if already loaded, without loading it."""
        return self._predictor

    def get(self) -> Predictor:
        if self._predictor is None:
            with self._lock:
                if self._predictor is None:
                    self._predictor = load_model(self.path, strict_versions=self.strict_versions)
        return self._predictor


__all__ = [
    "ModelLoadError",
    "Predictor",
    "PredictorCache",
    "installed_versions",
    "load_model",
    "metadata_path",
]
