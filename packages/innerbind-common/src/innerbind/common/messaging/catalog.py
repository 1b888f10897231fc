import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from .pointer import SemanticPointer

log = logging.getLogger(__name__)

LANG_ENV = "INNERBIND_LANG"


class MessageCatalog:
    """
    Resolves message pointers to format templates.

    Each root holds ``<lang>/*.json`` files whose top-level keys are full
    dotted ids. Earlier roots override later ones. Lookup order: requested
    language, default language, then the id itself.
    """

    def __init__(self, roots: List[Path], default_lang: str = "en"):
        self.roots = roots
        self.default_lang = default_lang
        self._registry: Dict[str, Dict[str, str]] = {}

    def _load_lang(self, lang: str) -> Dict[str, str]:
        if lang in self._registry:
            return self._registry[lang]

        merged: Dict[str, str] = {}
        # Lowest priority first so overrides win.
        for root in reversed(self.roots):
            lang_dir = root / lang
            if not lang_dir.is_dir():
                continue
            for path in sorted(lang_dir.glob("*.json")):
                try:
                    with path.open("r", encoding="utf-8") as f:
                        data = json.load(f)
                except (OSError, ValueError) as e:
                    log.warning(f"Skipping message catalog {path}: {e}")
                    continue
                merged.update({str(k): str(v) for k, v in data.items()})

        self._registry[lang] = merged
        return merged

    def get(self, pointer: Union[SemanticPointer, str], lang: Optional[str] = None) -> str:
        key = str(pointer)
        target = lang or os.getenv(LANG_ENV, self.default_lang)

        value = self._load_lang(target).get(key)
        if value is None and target != self.default_lang:
            value = self._load_lang(self.default_lang).get(key)
        return value if value is not None else key
