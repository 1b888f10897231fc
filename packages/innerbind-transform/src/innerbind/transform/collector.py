from typing import List, Tuple

from innerbind.spec import (
    ComponentMethod,
    Diagnostic,
    MemberTagPolicy,
    ParsedModuleProtocol,
    PatchPlan,
    TagReference,
    UnsupportedConstructError,
)

MEMBER_ROOT_ALIASED = "member-root-aliased"


class AliasCollector:
    """
    Walks every component method of a parsed module and decides which tag
    names need a local alias. Produces the PatchPlan; never touches text.
    """

    def __init__(self, prefix: str, member_tags: MemberTagPolicy = MemberTagPolicy.ALIAS):
        self.prefix = prefix
        self.member_tags = member_tags

    def _qualifies(self, module: ParsedModuleProtocol, ref: TagReference) -> bool:
        if not ref.is_component:
            return False
        if ref.is_member_root and self.member_tags is MemberTagPolicy.SKIP:
            return False
        return not module.scopes.has_binding(ref.name, ref)

    def _unsupported(
        self, module: ParsedModuleProtocol, method: ComponentMethod, ref: TagReference
    ) -> UnsupportedConstructError:
        return UnsupportedConstructError(
            f"Component method '{method.name}' has no body to receive "
            f"the alias for <{ref.name}>",
            file_path=module.file_path,
            line=ref.line,
            column=ref.column,
            method=method.name,
        )

    def collect(self, module: ParsedModuleProtocol) -> Tuple[PatchPlan, List[Diagnostic]]:
        plan = PatchPlan()
        diagnostics: List[Diagnostic] = []

        for method in module.component_methods(self.prefix):
            for ref in module.tag_references(method, self.prefix):
                if not self._qualifies(module, ref):
                    continue
                if not method.has_body or method.body_start is None:
                    raise self._unsupported(module, method, ref)

                point = plan.point_for(method, module.statement_separator(method))
                if point.add(ref.name) and ref.is_member_root:
                    diagnostics.append(
                        Diagnostic(
                            code=MEMBER_ROOT_ALIASED,
                            message=(
                                f"<{ref.name}.…> in '{method.name}' aliased "
                                f"to this.{self.prefix}{ref.name}"
                            ),
                            name=ref.name,
                            method=method.name,
                            line=ref.line,
                            column=ref.column,
                        )
                    )
        return plan, diagnostics
