__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from pathlib import Path
from typing import Optional

from .messaging import L, LoggingRenderer, MessageBus, MessageCatalog, SemanticPointer

# --- Composition Root for Innerbind's Core Services ---


def find_project_root(start_dir: Optional[Path] = None) -> Path:
    """Searches upwards for pyproject.toml, then .git."""
    start = (start_dir or Path.cwd()).resolve()
    current = start
    while current.parent != current:
        if (current / "pyproject.toml").is_file() or (current / ".git").is_dir():
            return current
        current = current.parent
    return start


def _create_catalog() -> MessageCatalog:
    # Priority: project overrides (.innerbind/needle) > packaged defaults.
    return MessageCatalog(
        [
            find_project_root() / ".innerbind" / "needle",
            Path(__file__).parent / "assets" / "needle",
        ]
    )


catalog = _create_catalog()
bus = MessageBus(catalog)

__all__ = [
    "bus",
    "catalog",
    "find_project_root",
    "L",
    "LoggingRenderer",
    "MessageBus",
    "MessageCatalog",
    "SemanticPointer",
]
