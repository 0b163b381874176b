"""Online binary classifiers backed by a durable weight store."""

from importlib import metadata

from .classifiers import Classifier, create_classifier
from .features import make_vector
from .store import MemoryWeightStore, SqliteWeightStore, StorageError


def _discover_version() -> str:
    """Return the installed package version, falling back to dev marker."""
    try:
        return metadata.version("oll")
    except metadata.PackageNotFoundError:  # pragma: no cover - source checkout without install
        return "0.0.0"


__all__ = [
    "Classifier",
    "MemoryWeightStore",
    "SqliteWeightStore",
    "StorageError",
    "__version__",
    "create_classifier",
    "make_vector",
]
__version__ = _discover_version()
