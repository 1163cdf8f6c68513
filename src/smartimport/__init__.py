"""SmartImport - Détection et normalisation de données collées ou importées."""

from smartimport.config import (
    ConfigError,
    ConfigFileError,
    InputFileError,
    SmartImportError,
    UnknownTargetError,
)

__all__ = [
    "__version__",
    "SmartImportError",
    "ConfigError",
    "ConfigFileError",
    "InputFileError",
    "UnknownTargetError",
]

__version__ = "0.1.0"
