"""
Test configuration and fixtures for mlsite tests.
"""
import pytest
from fastapi.testclient import TestClient

from mlsite.main import create_app
from mlsite.settings import Settings, get_settings
from training.train import train_model


@pytest.fixture(scope="session")
def model_path(tmp_path_factory):
    """Train the demonstration model once for the whole test session."""
    path = tmp_path_factory.mktemp("models") / "model.joblib"
    train_model(path)
    return path


@pytest.fixture
def make_settings(model_path):
    """Build settings pointing at the trained model, with overrides."""
    def _make(**overrides):
        values = {
            "MODEL_PATH": str(model_path),
            "ENABLE_METRICS": False,
            "LOG_LEVEL": "WARNING",
        }
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def client(settings):
    """Test client for an app built from the test settings."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Environment changes made by a test must not leak into cached settings."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
