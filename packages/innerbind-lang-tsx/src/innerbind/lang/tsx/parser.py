from typing import Iterator, List, Mapping, Optional, Tuple, Union

from tree_sitter import Node, Tree

from innerbind.spec import (
    ComponentMethod,
    Dialect,
    TagReference,
    TransformSyntaxError,
)
from .grammar import create_parser, dialect_for_path
from .scope import ScopeAnalyzer, node_text

CLASS_METHODS = {"method_definition", "method_signature", "abstract_method_signature"}
TAG_ELEMENTS = {"jsx_opening_element", "jsx_self_closing_element"}
MEMBER_TAGS = {"member_expression", "nested_identifier"}


class _TreeScopes:
    def __init__(self, analyzer: ScopeAnalyzer):
        self.analyzer = analyzer

    def has_binding(self, name: str, at: TagReference) -> bool:
        return self.analyzer.has_binding(name, at.node)


class ParsedModule:
    def __init__(self, tree: Tree, source_bytes: bytes, file_path: str, dialect: Dialect):
        self.tree = tree
        self.source_bytes = source_bytes
        self.file_path = file_path
        self.dialect = dialect
        self._scopes: Optional[_TreeScopes] = None

    @property
    def scopes(self) -> _TreeScopes:
        if self._scopes is None:
            self._scopes = _TreeScopes(ScopeAnalyzer(self.tree.root_node, self.source_bytes))
        return self._scopes

    def position(self, node: Node) -> Tuple[int, int]:
        row, byte_col = node.start_point
        line_start = node.start_byte - byte_col
        column = len(self.source_bytes[line_start : node.start_byte].decode("utf-8"))
        return row + 1, column + 1

    def _method_name(self, node: Node, prefix: str) -> Optional[str]:
        if node.type not in CLASS_METHODS:
            return None
        parent = node.parent
        if parent is None or parent.type != "class_body":
            return None
        name_node = node.child_by_field_name("name")
        # Computed, string and #private keys never name a component.
        if name_node is None or name_node.type not in ("property_identifier", "identifier"):
            return None
        name = node_text(name_node, self.source_bytes)
        return name if name.startswith(prefix) else None

    def _body_start(self, body: Node) -> Tuple[int, str]:
        statements = [c for c in body.named_children if c.type != "comment"]
        directives = 0
        for statement in statements:
            first = statement.named_children[0] if statement.named_children else None
            if statement.type == "expression_statement" and first is not None and first.type == "string":
                directives += 1
                continue
            break
        if directives < len(statements):
            return statements[directives].start_byte, ""
        if directives:
            # Only a directive prologue: declarations go right after it, and a
            # directive relying on ASI needs its `;` first.
            last = statements[directives - 1]
            terminated = self.source_bytes[last.end_byte - 1 : last.end_byte] == b";"
            return last.end_byte, " " if terminated else "; "
        return body.children[0].end_byte, ""

    def component_methods(self, prefix: str) -> Iterator[ComponentMethod]:
        stack: List[Node] = [self.tree.root_node]
        while stack:
            node = stack.pop()
            name = self._method_name(node, prefix)
            if name is not None:
                body = node.child_by_field_name("body")
                line, column = self.position(node)
                body_start, body_lead = (
                    self._body_start(body) if body is not None else (None, "")
                )
                yield ComponentMethod(
                    name=name,
                    body_start=body_start,
                    has_body=body is not None,
                    body_lead=body_lead,
                    line=line,
                    column=column,
                    node=node,
                )
            stack.extend(reversed(node.children))

    def _tag_reference(self, element: Node) -> Optional[TagReference]:
        name_node = element.child_by_field_name("name")
        if name_node is None:
            return None  # fragment
        is_member = False
        while name_node.type in MEMBER_TAGS:
            is_member = True
            inner = name_node.child_by_field_name("object")
            if inner is None and name_node.named_children:
                inner = name_node.named_children[0]
            if inner is None:
                return None
            name_node = inner
        if name_node.type != "identifier":
            # `this.x`, `svg:rect`
            return None
        line, column = self.position(name_node)
        return TagReference(
            name=node_text(name_node, self.source_bytes),
            is_member_root=is_member,
            line=line,
            column=column,
            node=name_node,
        )

    def tag_references(self, method: ComponentMethod, prefix: str) -> Iterator[TagReference]:
        root: Node = method.node
        stack: List[Node] = [root]
        while stack:
            node = stack.pop()
            if node.id != root.id and self._method_name(node, prefix) is not None:
                # Visited on its own.
                continue
            if node.type in TAG_ELEMENTS:
                reference = self._tag_reference(node)
                if reference is not None:
                    yield reference
            stack.extend(reversed(node.children))

    def statement_separator(self, method: ComponentMethod) -> str:
        offset = method.body_start
        if offset is None:
            return " "
        src = self.source_bytes
        line_start = src.rfind(b"\n", 0, offset) + 1
        indent = src[line_start:offset]
        if line_start == 0 or indent.strip():
            return " "
        newline = "\r\n" if src[line_start - 2 : line_start] == b"\r\n" else "\n"
        return newline + indent.decode("utf-8")


class TreeSitterParser:
    def __init__(
        self,
        default_dialect: Dialect = Dialect.TSX,
        extensions: Optional[Mapping[str, Union[str, Dialect]]] = None,
    ):
        self.default_dialect = default_dialect
        self.extensions = dict(extensions or {})

    def resolve_dialect(self, file_path: str = "", dialect: Optional[Dialect] = None) -> Dialect:
        if dialect is not None:
            return Dialect(dialect)
        return dialect_for_path(file_path, self.extensions, self.default_dialect)

    def parse(
        self, source_code: str, file_path: str = "", dialect: Optional[Dialect] = None
    ) -> ParsedModule:
        resolved = self.resolve_dialect(file_path, dialect)
        source_bytes = source_code.encode("utf-8")
        tree = create_parser(resolved).parse(source_bytes)
        module = ParsedModule(tree, source_bytes, file_path, resolved)
        if tree.root_node.has_error:
            raise self._syntax_error(module)
        return module

    def _syntax_error(self, module: ParsedModule) -> TransformSyntaxError:
        node = _first_error(module.tree.root_node) or module.tree.root_node
        line, column = module.position(node)
        if node.is_missing:
            message = f"Missing '{node.type}' ({module.dialect.value})"
        else:
            snippet = node_text(node, module.source_bytes).strip().splitlines()
            token = snippet[0][:30] if snippet else ""
            message = f"Unexpected token '{token}' ({module.dialect.value})"
        return TransformSyntaxError(message, module.file_path, line, column)


def _first_error(root: Node) -> Optional[Node]:
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None
