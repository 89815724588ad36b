"""Training of the demonstration model served by :mod:`mlsite`.

In a real project the serialized model comes from a separate training
process.  This package plays that role so a fresh project has something to
serve: a small text classifier trained on a built-in corpus.
"""

__all__ = ["data", "io", "metrics", "seed", "train"]
