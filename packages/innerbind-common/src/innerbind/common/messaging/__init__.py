from .bus import MessageBus
from .catalog import MessageCatalog
from .pointer import L, SemanticPointer
from .protocols import Renderer
from .renderers import LoggingRenderer

__all__ = [
    "MessageBus",
    "MessageCatalog",
    "L",
    "SemanticPointer",
    "Renderer",
    "LoggingRenderer",
]
