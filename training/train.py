"""Training script for the demonstration model.

This module trains a text classifier on the built-in corpus from
:mod:`training.data`.  The pipeline consists of a TF-IDF vectorizer
followed by a logistic regression, so the serialized artifact accepts raw
strings: exactly what the form handler passes to ``predict``.

Next to the ``joblib`` file a ``.meta.json`` sidecar records the library
versions, the input field name and the evaluation scores.  The web
application reads it to warn about version mismatches.
"""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline

from mlsite.log import get_logger
from mlsite.predictor.loader import installed_versions

from .data import load_demo_corpus
from .io import save_artifact
from .metrics import compute_accuracy, compute_f1
from .seed import set_seed

logger = get_logger(__name__)

DEFAULT_OUTPUT = Path("models") / "model.joblib"


def build_pipeline(random_state: int = 42) -> Pipeline:
    """Return the untrained vectorizer + classifier pipeline."""
    return Pipeline(steps=[
        ("vectorizer", TfidfVectorizer(ngram_range=(1, 2), min_df=1, sublinear_tf=True)),
        ("classifier", LogisticRegression(max_iter=1000, C=10.0, random_state=random_state)),
    ])


def train_model(
    model_output: Optional[Path] = DEFAULT_OUTPUT,
    test_size: float = 0.25,
    random_state: int = 42,
    input_field: str = "text",
) -> Dict[str, Any]:
    """Train and evaluate the demonstration model.

    Parameters
    ----------
    model_output : Path, optional
        If provided, save the trained pipeline to this path using ``joblib``
        together with its metadata sidecar.
    test_size : float, optional
        Proportion of the corpus reserved for evaluation (default 0.25).
    random_state : int, optional
        Seed for the split and the classifier (default 42).
    input_field : str, optional
        Form field name recorded in the metadata.

    Returns
    -------
    dict
        The metadata written next to the model, including ``accuracy`` and
        ``f1``.
    """
    set_seed(random_state)
    texts, labels = load_demo_corpus()
    X_train, X_test, y_train, y_test = train_test_split(
        texts, labels, test_size=test_size, random_state=random_state, stratify=labels
    )

    model = build_pipeline(random_state)
    model.fit(X_train, y_train)

    y_pred = model.predict(X_test)
    accuracy = compute_accuracy(y_test, y_pred)
    f1 = compute_f1(y_test, y_pred)
    logger.info("model_trained", train_size=len(X_train), test_size=len(X_test), accuracy=accuracy, f1=f1)

    metadata: Dict[str, Any] = {
        **installed_versions(),
        "created_at": datetime.now(timezone.utc).isoformat(),
        "input_field": input_field,
        "estimator": type(model).__name__,
        "classes": [str(c) for c in model.classes_],
        "accuracy": accuracy,
        "f1": f1,
    }

    if model_output is not None:
        model_output = Path(model_output)
        save_artifact(model, metadata, model_output)
        logger.info("model_saved", path=str(model_output))
    return metadata


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Train the demonstration text classifier")
    parser.add_argument(
        "--output", type=str, default=str(DEFAULT_OUTPUT),
        help="Path where the trained model is saved"
    )
    parser.add_argument(
        "--test-size", type=float, default=0.25,
        help="Proportion of the corpus reserved for evaluation"
    )
    parser.add_argument(
        "--random-state", type=int, default=42,
        help="Random seed for the split and the classifier"
    )
    args = parser.parse_args(argv)
    metadata = train_model(Path(args.output), test_size=args.test_size, random_state=args.random_state)
    print(f"Accuracy: {metadata['accuracy']:.4f}")
    print(f"F1-score: {metadata['f1']:.4f}")
    print(f"Model saved to {args.output}")


if __name__ == "__main__":  # pragma: no cover
    main()
