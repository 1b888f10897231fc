from functools import lru_cache
from pathlib import PurePath
from typing import Dict, Mapping, Optional, Union

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser

from innerbind.spec import ConfigError, Dialect

# JS-family modules may carry type annotations and parse as TSX;
# `javascript` is opt-in through overrides.
DEFAULT_EXTENSIONS: Dict[str, Dialect] = {
    ".js": Dialect.TSX,
    ".jsx": Dialect.TSX,
    ".mjs": Dialect.TSX,
    ".cjs": Dialect.TSX,
    ".njs": Dialect.TSX,
    ".ts": Dialect.TYPESCRIPT,
    ".mts": Dialect.TYPESCRIPT,
    ".cts": Dialect.TYPESCRIPT,
    ".tsx": Dialect.TSX,
    ".nts": Dialect.TSX,
}


@lru_cache(maxsize=None)
def get_language(dialect: Dialect) -> Language:
    if dialect is Dialect.JAVASCRIPT:
        return Language(tsjavascript.language())
    if dialect is Dialect.TYPESCRIPT:
        return Language(tstypescript.language_typescript())
    return Language(tstypescript.language_tsx())


def create_parser(dialect: Dialect) -> Parser:
    # Parsers hold per-parse state, so each call gets its own.
    return Parser(get_language(dialect))


def coerce_dialect(value: Union[str, Dialect]) -> Dialect:
    if isinstance(value, Dialect):
        return value
    try:
        return Dialect(str(value).lower())
    except ValueError:
        allowed = ", ".join(d.value for d in Dialect)
        raise ConfigError(f"Unknown dialect '{value}' (expected one of: {allowed})")


def dialect_for_path(
    file_path: Union[str, PurePath],
    overrides: Optional[Mapping[str, Union[str, Dialect]]] = None,
    default: Dialect = Dialect.TSX,
) -> Dialect:
    suffix = PurePath(file_path).suffix.lower() if file_path else ""
    if overrides and suffix in overrides:
        return coerce_dialect(overrides[suffix])
    return DEFAULT_EXTENSIONS.get(suffix, default)
