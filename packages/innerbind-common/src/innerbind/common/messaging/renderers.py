import logging
from typing import Optional

from .protocols import Renderer

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class LoggingRenderer(Renderer):
    """Forwards bus messages to stdlib logging, for hosts without a console UI."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("innerbind")

    def render(self, message: str, level: str) -> None:
        self.logger.log(_LEVELS.get(level, logging.INFO), message)
