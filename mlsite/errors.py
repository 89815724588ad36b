"""Exceptions raised while loading, serving and scaffolding.

Loader errors subclass the matching builtin (``FileNotFoundError``,
``PermissionError``) so callers that only know the builtin still catch them.
"""


class ModelLoadError(RuntimeError):
    """The serialized model could not be turned into a predictor."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class ModelNotFoundError(ModelLoadError, FileNotFoundError):
    """No file exists at the configured model path."""


class ModelPermissionError(ModelLoadError, PermissionError):
    """The model file exists but cannot be read by this process."""


class ModelFormatError(ModelLoadError):
    """The file is not a deserializable model exposing ``predict``."""


class ModelVersionError(ModelLoadError):
    """The model was serialized with different library versions."""

    def __init__(self, message: str, path: str = "", mismatches=None):
        super().__init__(message, path)
        self.mismatches = mismatches or {}


class PredictionError(RuntimeError):
    """The loaded estimator raised while predicting."""


class ScaffoldError(RuntimeError):
    """A project or application directory could not be created."""


class PortInUseError(OSError):
    """The development server port is already bound."""

    def __init__(self, host: str, port: int):
        super().__init__(
            f"Port {port} on {host} is already in use. Stop the other process "
            f"or pass another port, e.g. 'mlsite runserver {port + 1}'."
        )
        self.host = host
        self.port = port
