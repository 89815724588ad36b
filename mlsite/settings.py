"""Project settings.

Values are read from ``MLSITE_``-prefixed environment variables and from a
``.env`` file in the working directory, which is what ``mlsite
startproject`` writes.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

# Directory holding the default templates and static assets
PACKAGE_DIR = Path(__file__).parent.absolute()
APP_DIR = PACKAGE_DIR / "predictor"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="MLSITE_",
        env_file=".env",
        extra="ignore",
        protected_namespaces=(),
    )

    TITLE: str = "Model Prediction"

    # Model settings
    MODEL_PATH: str = str(Path("models") / "model.joblib")
    INPUT_FIELD: str = "text"
    EAGER_LOAD: bool = True
    STRICT_VERSIONS: bool = False

    # Templates and static files
    TEMPLATES_DIR: str = str(APP_DIR / "templates")
    STATIC_DIR: str = str(APP_DIR / "static")

    # Development server
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    RELOAD: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Routers of additional applications, as "package.module:attribute"
    EXTRA_ROUTERS: List[str] = []

    ENABLE_METRICS: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the settings of the running process."""
    return Settings()
