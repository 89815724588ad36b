"""Writing of the model artifact served by :mod:`mlsite`.

An artifact is two files side by side: the joblib pickle the web
application deserializes, and the ``.meta.json`` sidecar its loader checks
library versions against.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import joblib

from mlsite.predictor.loader import metadata_path


def save_artifact(model: Any, metadata: Dict[str, Any], path: Path) -> Path:
    """Dump ``model`` to ``path`` and ``metadata`` to its sidecar.

    Missing parent directories are created.  The pickle is written before the
    sidecar.

    Returns
    -------
    Path
        Location of the metadata sidecar.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model, path)

    sidecar = metadata_path(path)
    sidecar.write_text(json.dumps(metadata, ensure_ascii=False, indent=2), encoding="utf-8")
    return sidecar
