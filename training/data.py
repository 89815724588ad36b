"""Built-in labelled corpus for the demonstration model.

Short product reviews labelled ``positive`` or ``negative``.  The corpus is
balanced so a stratified split keeps both classes on each side.
"""

from __future__ import annotations

from typing import List, Tuple

POSITIVE = [
    "I love this product, it works perfectly",
    "Excellent quality and fast delivery",
    "Great value for the money, highly recommend",
    "Absolutely fantastic, exceeded my expectations",
    "Very happy with this purchase",
    "The best one I have ever owned",
    "Works great and looks beautiful",
    "Superb build quality, very satisfied",
    "Amazing support team, great experience",
    "Wonderful item, would buy again",
    "Good product, arrived early and works well",
    "Really pleased, great performance",
    "Fantastic price and excellent service",
    "Happy customer, love the design",
    "Brilliant, does exactly what I wanted",
    "Great experience from start to finish",
]

NEGATIVE = [
    "Terrible product, broke after one day",
    "Very poor quality and slow delivery",
    "Waste of money, do not recommend",
    "Awful, nothing like the description",
    "Really disappointed with this purchase",
    "The worst one I have ever owned",
    "Stopped working and looks cheap",
    "Bad build quality, very unhappy",
    "Horrible support team, bad experience",
    "Useless item, would never buy again",
    "Poor product, arrived late and does not work",
    "Really annoyed, terrible performance",
    "Overpriced and awful service",
    "Unhappy customer, hate the design",
    "Broken on arrival, does not do what I wanted",
    "Bad experience from start to finish",
]


def load_demo_corpus() -> Tuple[List[str], List[str]]:
    """Return ``(texts, labels)`` of the built-in corpus."""
    texts = POSITIVE + NEGATIVE
    labels = ["positive"] * len(POSITIVE) + ["negative"] * len(NEGATIVE)
    return texts, labels
