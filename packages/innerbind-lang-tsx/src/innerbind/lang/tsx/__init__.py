__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .grammar import DEFAULT_EXTENSIONS, coerce_dialect, dialect_for_path, get_language
from .parser import ParsedModule, TreeSitterParser
from .scope import Scope, ScopeAnalyzer, pattern_names

__all__ = [
    "DEFAULT_EXTENSIONS",
    "coerce_dialect",
    "dialect_for_path",
    "get_language",
    "ParsedModule",
    "TreeSitterParser",
    "Scope",
    "ScopeAnalyzer",
    "pattern_names",
]
