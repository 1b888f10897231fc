__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .core import InnerbindApp
from .runners import FileOutcome, TransformReport, TransformRunner

__all__ = ["InnerbindApp", "FileOutcome", "TransformReport", "TransformRunner"]
