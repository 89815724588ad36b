"""Scaffolding for new projects and applications.

``startproject`` lays out the directory a site runs from::

    <name>/
        .env                    MLSITE_* settings pointing at the paths below
        requirements.txt        runtime dependencies to pip install
        models/                 the serialized model goes here
        templates/predict.html
        static/style.css

``startapp`` creates an application package with its own router,
templates and static assets.  It is enabled by listing
``<name>.routes:router`` in ``MLSITE_EXTRA_ROUTERS``.
"""

from __future__ import annotations

import keyword
import shutil
from pathlib import Path
from typing import List, Union

from .errors import ScaffoldError
from .log import get_logger
from .settings import APP_DIR

logger = get_logger(__name__)

REQUIREMENTS = [
    "mlsite",
    "fastapi",
    "uvicorn",
    "jinja2",
    "python-multipart",
    "joblib",
    "scikit-learn",
]

ENV_TEMPLATE = """\
MLSITE_TITLE="{title}"
MLSITE_MODEL_PATH=models/model.joblib
MLSITE_INPUT_FIELD=text
MLSITE_TEMPLATES_DIR=templates
MLSITE_STATIC_DIR=static
MLSITE_PORT=8000
MLSITE_LOG_LEVEL=INFO
"""

ROUTES_TEMPLATE = '''\
"""Routes of the {name} application."""

from fastapi import APIRouter

router = APIRouter(prefix="/{name}", tags=["{name}"])


@router.get("/")
def index() -> dict:
    return {{"app": "{name}"}}
'''


def validate_name(name: str) -> None:
    """Reject names that cannot be imported as a Python package."""
    if not name or not name.isidentifier() or keyword.iskeyword(name):
        raise ScaffoldError(f"'{name}' is not a valid name. Use a Python identifier such as 'mysite'.")


def _target(name: str, directory: Union[str, Path, None]) -> Path:
    validate_name(name)
    target = Path(directory) if directory is not None else Path.cwd() / name
    if target.exists() and any(target.iterdir()):
        raise ScaffoldError(f"'{target}' already exists and is not empty.")
    return target


def _write(path: Path, content: str, created: List[Path]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    created.append(path)


def startproject(name: str, directory: Union[str, Path, None] = None) -> List[Path]:
    """Create a project directory for serving a model.

    Parameters
    ----------
    name : str
        Project name; also the default directory name.
    directory : str or Path, optional
        Where to create the project instead of ``./<name>``.

    Returns
    -------
    list of Path
        Files created, in creation order.
    """
    target = _target(name, directory)
    created: List[Path] = []

    _write(target / ".env", ENV_TEMPLATE.format(title=name.replace("_", " ").title()), created)
    _write(target / "requirements.txt", "\n".join(REQUIREMENTS) + "\n", created)
    _write(target / "models" / ".gitkeep", "", created)

    for sub, filename in (("templates", "predict.html"), ("static", "style.css")):
        destination = target / sub / filename
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(APP_DIR / sub / filename, destination)
        created.append(destination)

    logger.info("project_created", name=name, path=str(target), files=len(created))
    return created


def startapp(name: str, directory: Union[str, Path, None] = None) -> List[Path]:
    """Create an application package with a router stub."""
    target = _target(name, directory)
    created: List[Path] = []

    _write(target / "__init__.py", f'"""The {name} application."""\n', created)
    _write(target / "routes.py", ROUTES_TEMPLATE.format(name=name), created)
    _write(target / "templates" / ".gitkeep", "", created)
    _write(target / "static" / ".gitkeep", "", created)

    logger.info("app_created", name=name, path=str(target), files=len(created))
    return created
