import logging
from typing import Mapping, Optional, Union

from innerbind.spec import (
    ConfigError,
    Dialect,
    LanguageParserProtocol,
    MemberTagPolicy,
    TransformResult,
)
from innerbind.lang.tsx import TreeSitterParser
from .collector import AliasCollector
from .patcher import apply_patch_plan

log = logging.getLogger(__name__)

DEFAULT_PREFIX = "render"


class InnerComponentTransformer:
    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        member_tags: Union[str, MemberTagPolicy] = MemberTagPolicy.ALIAS,
        parser: Optional[LanguageParserProtocol] = None,
        extensions: Optional[Mapping[str, Union[str, Dialect]]] = None,
    ):
        if not prefix or not prefix.isidentifier():
            raise ConfigError(f"Invalid method prefix: {prefix!r}")
        try:
            policy = MemberTagPolicy(member_tags)
        except ValueError:
            raise ConfigError(f"Unknown member tag policy: {member_tags!r}")
        self.prefix = prefix
        self.parser = parser or TreeSitterParser(extensions=extensions)
        self.collector = AliasCollector(prefix, policy)

    def transform(
        self, source_code: str, file_path: str = "", dialect: Optional[Dialect] = None
    ) -> TransformResult:
        module = self.parser.parse(source_code, file_path, dialect)
        plan, diagnostics = self.collector.collect(module)

        if plan.is_empty():
            return TransformResult(
                file_path=file_path,
                original=source_code,
                code=source_code,
                plan=plan,
                diagnostics=diagnostics,
            )

        log.debug(
            "%s: %d insertion point(s): %s",
            file_path or "<source>",
            len(plan),
            {p.method: p.names for p in plan.descending()},
        )
        patched = apply_patch_plan(module.source_bytes, plan, self.prefix)
        return TransformResult(
            file_path=file_path,
            original=source_code,
            code=patched.decode("utf-8"),
            plan=plan,
            diagnostics=diagnostics,
        )


def transform_source(
    source_code: str,
    file_path: str = "",
    dialect: Optional[Dialect] = None,
    prefix: str = DEFAULT_PREFIX,
) -> str:
    return InnerComponentTransformer(prefix=prefix).transform(
        source_code, file_path, dialect
    ).code
