"""
Bundler-facing loader stage.

A host pipeline calls :func:`register_inner_components` once per module, with
the module text and the path it was loaded from. The path only selects the
dialect and labels errors; nothing is read from disk.
"""

from typing import Optional

from innerbind.common import L, bus
from innerbind.config import InnerbindConfig
from innerbind.spec import Dialect, TransformResult
from .collector import MEMBER_ROOT_ALIASED
from .engine import InnerComponentTransformer


def create_transformer(config: Optional[InnerbindConfig] = None) -> InnerComponentTransformer:
    config = config or InnerbindConfig()
    return InnerComponentTransformer(
        prefix=config.prefix,
        member_tags=config.member_tags,
        extensions=config.extensions,
    )


def report_diagnostics(result: TransformResult, prefix: str) -> None:
    for diagnostic in result.diagnostics:
        if diagnostic.code == MEMBER_ROOT_ALIASED:
            bus.warning(
                L.transform.member_root,
                path=result.file_path or "<source>",
                line=diagnostic.line,
                column=diagnostic.column,
                name=diagnostic.name,
                method=diagnostic.method,
                target=f"{prefix}{diagnostic.name}",
            )


def register_inner_components(
    source: str,
    resource_path: str = "",
    dialect: Optional[Dialect] = None,
    config: Optional[InnerbindConfig] = None,
) -> str:
    transformer = create_transformer(config)
    result = transformer.transform(source, resource_path, dialect)
    report_diagnostics(result, transformer.prefix)
    return result.code
