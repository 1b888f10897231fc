"""
Lexical scope resolution over tree-sitter trees.

Answers one question for the transform: does a name have a declaration that is
reachable from a given node? Scopes follow ECMAScript rules closely enough for
that purpose:

- ``program``: imports, top-level declarations.
- ``function``: parameters and the function body share one scope; ``var``
  declarations hoist here. Named function/class expressions bind their own name
  inside themselves.
- ``block``: blocks, ``for`` heads, ``catch`` clauses and ``switch`` bodies hold
  ``let``/``const``/``class``/``function`` declarations.

A binding is visible throughout its scope regardless of textual position.
Type-only declarations (interfaces, type aliases) are not value bindings.
"""

from typing import Dict, List, Optional, Set, Tuple

from tree_sitter import Node

FUNCTION_NODES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
    "function_signature",
    "class_static_block",
}
DECLARED_FUNCTIONS = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
}
NAMED_FUNCTION_EXPRESSIONS = {"function_expression", "function", "generator_function"}
CLASS_DECLARATIONS = {"class_declaration", "abstract_class_declaration"}
BLOCK_NODES = {"statement_block", "for_statement", "for_in_statement", "catch_clause", "switch_body"}


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def pattern_names(node: Optional[Node], source: bytes) -> List[str]:
    """Names bound by a declarator, parameter or destructuring pattern."""
    if node is None:
        return []
    kind = node.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        return [node_text(node, source)]
    if kind in ("required_parameter", "optional_parameter"):
        return pattern_names(node.child_by_field_name("pattern"), source)
    if kind == "variable_declarator":
        return pattern_names(node.child_by_field_name("name"), source)
    if kind in ("assignment_pattern", "object_assignment_pattern"):
        return pattern_names(node.child_by_field_name("left"), source)
    if kind == "pair_pattern":
        return pattern_names(node.child_by_field_name("value"), source)
    if kind in ("object_pattern", "array_pattern", "rest_pattern"):
        names: List[str] = []
        for child in node.named_children:
            names.extend(pattern_names(child, source))
        return names
    return []


class Scope:
    def __init__(self, kind: str, parent: Optional["Scope"] = None):
        self.kind = kind
        self.parent = parent
        self.bindings: Dict[str, str] = {}

    def declare(self, name: str, binding_kind: str) -> None:
        if name:
            self.bindings.setdefault(name, binding_kind)

    def lookup(self, name: str) -> Optional[str]:
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope.bindings:
                return scope.bindings[name]
            scope = scope.parent
        return None

    def has_binding(self, name: str) -> bool:
        return self.lookup(name) is not None

    def function_scope(self) -> "Scope":
        scope = self
        while scope.kind not in ("function", "program") and scope.parent is not None:
            scope = scope.parent
        return scope

    def __repr__(self) -> str:
        return f"<Scope {self.kind} {sorted(self.bindings)}>"


class ScopeAnalyzer:
    def __init__(self, root: Node, source: bytes):
        self.source = source
        self._scopes: Dict[int, Scope] = {}
        self._function_bodies: Set[int] = set()
        self.program = Scope("program")
        self._scopes[root.id] = self.program
        self._build(root)

    def scope_at(self, node: Node) -> Scope:
        current: Optional[Node] = node
        while current is not None:
            scope = self._scopes.get(current.id)
            if scope is not None:
                return scope
            current = current.parent
        return self.program

    def has_binding(self, name: str, node: Node) -> bool:
        return self.scope_at(node).has_binding(name)

    def _build(self, root: Node) -> None:
        # Iterative to survive deeply nested markup.
        stack: List[Tuple[Node, Scope]] = [(root, self.program)]
        while stack:
            node, scope = stack.pop()
            inner = self._enter(node, scope)
            for child in reversed(node.children):
                stack.append((child, inner))

    def _open(self, node: Node, kind: str, parent: Scope) -> Scope:
        scope = Scope(kind, parent)
        self._scopes[node.id] = scope
        return scope

    def _enter(self, node: Node, scope: Scope) -> Scope:
        kind = node.type
        src = self.source

        if kind in FUNCTION_NODES:
            name_node = node.child_by_field_name("name")
            if kind in DECLARED_FUNCTIONS and name_node is not None:
                scope.declare(node_text(name_node, src), "function")
            inner = self._open(node, "function", scope)
            if kind in NAMED_FUNCTION_EXPRESSIONS and name_node is not None:
                inner.declare(node_text(name_node, src), "local")
            params = node.child_by_field_name("parameters")
            if params is not None:
                for param in params.named_children:
                    for name in pattern_names(param, src):
                        inner.declare(name, "param")
            single = node.child_by_field_name("parameter")
            if single is not None:
                for name in pattern_names(single, src):
                    inner.declare(name, "param")
            body = node.child_by_field_name("body")
            if body is not None:
                self._function_bodies.add(body.id)
            return inner

        if kind in CLASS_DECLARATIONS:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                scope.declare(node_text(name_node, src), "class")
            return scope

        if kind == "class":
            name_node = node.child_by_field_name("name")
            if name_node is None:
                return scope
            inner = self._open(node, "class", scope)
            inner.declare(node_text(name_node, src), "local")
            return inner

        if kind in BLOCK_NODES:
            if node.id in self._function_bodies:
                return scope
            inner = self._open(node, "block", scope)
            if kind == "for_in_statement":
                self._declare_for_in(node, inner)
            elif kind == "catch_clause":
                for name in pattern_names(node.child_by_field_name("parameter"), src):
                    inner.declare(name, "param")
            return inner

        if kind == "variable_declaration":
            target = scope.function_scope()
            for declarator in node.named_children:
                for name in pattern_names(declarator, src):
                    target.declare(name, "var")
        elif kind == "lexical_declaration":
            kind_node = node.child_by_field_name("kind")
            binding_kind = node_text(kind_node, src) if kind_node is not None else "let"
            for declarator in node.named_children:
                for name in pattern_names(declarator, src):
                    scope.declare(name, binding_kind)
        elif kind == "import_statement":
            for name in self._import_names(node):
                scope.declare(name, "module")
        elif kind == "import_alias":
            alias = next(
                (c for c in node.named_children if c.type == "identifier"), None
            )
            if alias is not None:
                scope.declare(node_text(alias, src), "module")
        elif kind == "enum_declaration":
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                scope.declare(node_text(name_node, src), "enum")
        elif kind in ("internal_module", "module"):
            name_node = node.child_by_field_name("name")
            # `declare module "pkg"` names a string, not a binding.
            if name_node is not None and name_node.type == "identifier":
                scope.declare(node_text(name_node, src), "namespace")
        return scope

    def _declare_for_in(self, node: Node, scope: Scope) -> None:
        kind_node = node.child_by_field_name("kind")
        if kind_node is None:
            # `for (x of xs)` assigns to an existing binding.
            return
        names = pattern_names(node.child_by_field_name("left"), self.source)
        target = scope.function_scope() if node_text(kind_node, self.source) == "var" else scope
        for name in names:
            target.declare(name, node_text(kind_node, self.source))

    def _import_names(self, node: Node) -> List[str]:
        src = self.source
        names: List[str] = []
        for clause in node.named_children:
            if clause.type == "import_require_clause":
                names.extend(
                    node_text(c, src) for c in clause.named_children if c.type == "identifier"
                )
                continue
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    names.append(node_text(part, src))
                elif part.type == "namespace_import":
                    names.extend(
                        node_text(c, src) for c in part.named_children if c.type == "identifier"
                    )
                elif part.type == "named_imports":
                    for spec in part.named_children:
                        if spec.type != "import_specifier":
                            continue
                        local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                        if local is not None and local.type == "identifier":
                            names.append(node_text(local, src))
        return names
