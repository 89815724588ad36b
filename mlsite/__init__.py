"""Web application that serves a serialized machine-learning model.

The package exposes a FastAPI app built by :func:`mlsite.main.create_app`.
A joblib model is loaded once per process and called from a form handler
that renders a Jinja2 template.  The :mod:`mlsite.cli` module provides the
``mlsite`` command used to scaffold a project directory and start the
development server.
"""

__version__ = "0.1.0"
