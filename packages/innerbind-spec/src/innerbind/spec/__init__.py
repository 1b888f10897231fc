# This must be the very first line to allow this package to coexist with other
# namespace packages in editable installs.
__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .models import (
    ComponentMethod,
    Diagnostic,
    Dialect,
    InsertionPoint,
    MemberTagPolicy,
    PatchPlan,
    TagReference,
    TransformResult,
)
from .errors import (
    ConfigError,
    InnerbindError,
    TransformSyntaxError,
    UnsupportedConstructError,
)
from .protocols import (
    LanguageParserProtocol,
    ParsedModuleProtocol,
    ScopeQueryProtocol,
    SourceTransformerProtocol,
)

__all__ = [
    "LanguageParserProtocol",
    "ParsedModuleProtocol",
    "ScopeQueryProtocol",
    "SourceTransformerProtocol",
    "ComponentMethod",
    "Diagnostic",
    "Dialect",
    "InsertionPoint",
    "MemberTagPolicy",
    "PatchPlan",
    "TagReference",
    "TransformResult",
    # Errors
    "InnerbindError",
    "TransformSyntaxError",
    "UnsupportedConstructError",
    "ConfigError",
]
