import pytest

from innerbind.spec import (
    ConfigError,
    Dialect,
    MemberTagPolicy,
    TransformSyntaxError,
)
from innerbind.transform import InnerComponentTransformer, transform_source
from innerbind.transform.collector import MEMBER_ROOT_ALIASED


def run(source, path="App.jsx", **kwargs):
    return InnerComponentTransformer(**kwargs).transform(source, path)


# --- Core aliasing ---


def test_single_line_method_gets_declarations_in_first_seen_order():
    source = 'class App {\n  render() { return <Card title="x"><Header/></Card>; }\n}\n'

    result = run(source)

    assert result.code == (
        "class App {\n"
        "  render() { const Card = this.renderCard; const Header = this.renderHeader; "
        'return <Card title="x"><Header/></Card>; }\n'
        "}\n"
    )
    assert result.aliases() == {"render": ["Card", "Header"]}


def test_multi_line_method_keeps_indentation():
    source = (
        "class App {\n"
        "  render() {\n"
        "    return (\n"
        "      <main>\n"
        "        <Header />\n"
        "        <Card />\n"
        "      </main>\n"
        "    );\n"
        "  }\n"
        "}\n"
    )

    result = run(source)

    assert result.code == (
        "class App {\n"
        "  render() {\n"
        "    const Header = this.renderHeader;\n"
        "    const Card = this.renderCard;\n"
        "    return (\n"
        "      <main>\n"
        "        <Header />\n"
        "        <Card />\n"
        "      </main>\n"
        "    );\n"
        "  }\n"
        "}\n"
    )


def test_repeated_names_are_declared_once_in_first_seen_order():
    source = "class C {\n  render() { return <div><B/><A/><B/></div>; }\n}\n"

    result = run(source)

    assert "const B = this.renderB; const A = this.renderA; return" in result.code
    assert result.code.count("const B =") == 1


def test_every_prefixed_method_is_handled_separately():
    source = (
        "class Page {\n"
        "  render() { return <Layout><Body/></Layout>; }\n"
        "  renderBody() { return <section><Item/><Layout/></section>; }\n"
        "  helper() { return <Ignored/>; }\n"
        "}\n"
    )

    result = run(source)

    assert result.aliases() == {
        "render": ["Layout", "Body"],
        "renderBody": ["Item", "Layout"],
    }
    assert "Ignored = " not in result.code


def test_static_methods_are_component_methods():
    source = "class A {\n  static renderBadge() { return <Icon/>; }\n}\n"

    result = run(source)

    assert "static renderBadge() { const Icon = this.renderIcon; return <Icon/>; }" in result.code


def test_object_literal_methods_are_not_component_methods():
    source = "const o = {\n  render() { return <Foo/>; }\n};\n"

    result = run(source)

    assert result.code is source
    assert not result.changed


def test_custom_prefix():
    source = (
        "class A {\n"
        "  view() { return <Nav/>; }\n"
        "  render() { return <Other/>; }\n"
        "}\n"
    )

    result = run(source, prefix="view")

    assert "view() { const Nav = this.viewNav; return <Nav/>; }" in result.code
    assert "render() { return <Other/>; }" in result.code


def test_invalid_prefix_is_a_configuration_error():
    with pytest.raises(ConfigError):
        InnerComponentTransformer(prefix="not valid")
    with pytest.raises(ConfigError):
        InnerComponentTransformer(member_tags="sometimes")


# --- Case rule ---


def test_lower_case_tags_are_never_aliased():
    source = "class A {\n  render() { return <div><span/><my-widget/></div>; }\n}\n"

    result = run(source)

    assert result.code is source


def test_fragments_are_ignored():
    source = "class A {\n  render() { return <><p/></>; }\n}\n"

    assert run(source).code is source


# --- Scope suppression ---


@pytest.mark.parametrize(
    "source",
    [
        "import Foo from './Foo';\nclass A {\n  render() { return <Foo/>; }\n}\n",
        "import { Bar as Foo } from './Bar';\nclass A {\n  render() { return <Foo/>; }\n}\n",
        "import * as Foo from './Foo';\nclass A {\n  render() { return <Foo/>; }\n}\n",
        "function Foo() {}\nclass A {\n  render() { return <Foo/>; }\n}\n",
        "class Foo {\n  render() { return <Foo/>; }\n}\n",
        "class A {\n  render({ Foo }) { return <Foo/>; }\n}\n",
        "class A {\n  render(Foo = Default) { return <Foo/>; }\n}\n",
        "class A {\n  render() { const Foo = this.props.as; return <Foo/>; }\n}\n",
        "class A {\n  render() { const [Foo] = this.props.pair; return <Foo/>; }\n}\n",
        "class A {\n  render() { if (x) { var Foo = y; } return <Foo/>; }\n}\n",
        "class A {\n  render() { return <Foo/>; function Foo() {} }\n}\n",
        "const Foo = () => null;\nclass A {\n  render() { return <Foo/>; }\n}\n",
    ],
)
def test_reachable_bindings_suppress_aliases(source):
    result = run(source)

    assert result.code is source
    assert result.plan.is_empty()


def test_block_scoped_binding_does_not_reach_outer_tag():
    source = "class A {\n  render() { if (x) { const Foo = y; } return <Foo/>; }\n}\n"

    result = run(source)

    assert result.aliases() == {"render": ["Foo"]}


def test_closure_parameter_suppresses_only_inside_closure():
    source = (
        "class A {\n"
        "  render() { const items = xs.map((Item) => <Item/>); return <List>{items}</List>; }\n"
        "}\n"
    )

    result = run(source)

    assert result.aliases() == {"render": ["List"]}


def test_closure_tags_are_aliased_at_method_start():
    source = (
        "class A {\n"
        "  render() {\n"
        "    const rows = xs.map((x) => {\n"
        "      return <Row value={x} />;\n"
        "    });\n"
        "    return <table>{rows}</table>;\n"
        "  }\n"
        "}\n"
    )

    result = run(source)

    assert result.code == source.replace(
        "  render() {\n", "  render() {\n    const Row = this.renderRow;\n", 1
    )


def test_catch_and_loop_bindings():
    source = (
        "class A {\n"
        "  render() {\n"
        "    for (const Cell of cells) { out.push(<Cell/>); }\n"
        "    try { go(); } catch (Fallback) { return <Fallback/>; }\n"
        "    return <Cell/>;\n"
        "  }\n"
        "}\n"
    )

    result = run(source)

    assert result.aliases() == {"render": ["Cell"]}


# --- Nested component methods ---


def test_nested_class_methods_get_their_own_declarations():
    source = (
        "class Outer {\n"
        "  render() {\n"
        "    class Inner {\n"
        "      renderBody() { return <Body/>; }\n"
        "    }\n"
        "    return <Frame/>;\n"
        "  }\n"
        "}\n"
    )

    result = run(source)

    assert result.aliases() == {"render": ["Frame"], "renderBody": ["Body"]}
    assert "renderBody() { const Body = this.renderBody; return <Body/>; }" in result.code
    assert "  render() {\n    const Frame = this.renderFrame;\n    class Inner {" in result.code


# --- Body start edge cases ---


def test_empty_body_receives_declarations_after_brace():
    source = "class A {\n  render(content = <Empty/>) {}\n}\n"

    result = run(source)

    assert result.code == "class A {\n  render(content = <Empty/>) {const Empty = this.renderEmpty; }\n}\n"


def test_directive_prologue_stays_first():
    source = (
        "class A {\n"
        "  render() {\n"
        '    "use strict";\n'
        "    return <Foo/>;\n"
        "  }\n"
        "}\n"
    )

    result = run(source)

    assert '    "use strict";\n    const Foo = this.renderFoo;\n    return <Foo/>;' in result.code


def test_unterminated_directive_gets_its_semicolon():
    source = 'class A {\n  render(x = <Foo/>) { "use client" }\n}\n'

    once = run(source)

    assert once.code == (
        'class A {\n  render(x = <Foo/>) { "use client"; const Foo = this.renderFoo;  }\n}\n'
    )
    assert run(once.code).code == once.code


def test_terminated_directive_only_body():
    source = 'class A {\n  render(x = <Foo/>) { "use client"; }\n}\n'

    once = run(source)

    assert '{ "use client"; const Foo = this.renderFoo;  }' in once.code
    assert run(once.code).code == once.code


def test_leading_comment_is_kept_before_declarations():
    source = (
        "class A {\n"
        "  render() {\n"
        "    // heading\n"
        "    return <Foo/>;\n"
        "  }\n"
        "}\n"
    )

    result = run(source)

    assert "    // heading\n    const Foo = this.renderFoo;\n    return <Foo/>;" in result.code


# --- Member tags ---


def test_member_root_is_aliased_and_flagged_by_default():
    source = "class A {\n  render() { return <Ui.Button/>; }\n}\n"

    result = run(source)

    assert "const Ui = this.renderUi; return <Ui.Button/>;" in result.code
    assert [d.code for d in result.diagnostics] == [MEMBER_ROOT_ALIASED]
    assert result.diagnostics[0].name == "Ui"
    assert result.diagnostics[0].method == "render"
    assert (result.diagnostics[0].line, result.diagnostics[0].column) == (2, 22)


def test_member_root_skip_policy():
    source = "class A {\n  render() { return <Ui.Button/>; }\n}\n"

    result = run(source, member_tags=MemberTagPolicy.SKIP)

    assert result.code is source
    assert result.diagnostics == []


def test_imported_member_root_is_left_alone():
    source = "import * as Ui from './ui';\nclass A {\n  render() { return <Ui.Button/>; }\n}\n"

    result = run(source)

    assert result.code is source
    assert result.diagnostics == []


# --- Fidelity and idempotence ---


def test_no_change_returns_the_same_object():
    source = "// nothing here\nclass A {\n  helper() { return 1; }\n}\n"

    assert transform_source(source, "A.jsx") is source


def test_transform_is_idempotent():
    source = (
        "class App {\n"
        "  render() {\n"
        "    return <Layout><Card/><Layout.Slot/></Layout>;\n"
        "  }\n"
        "}\n"
    )

    once = transform_source(source, "App.jsx")
    twice = transform_source(once, "App.jsx")

    assert once != source
    assert twice == once


def test_crlf_and_non_ascii_text_are_preserved():
    source = (
        "class A {\r\n"
        "  render() {\r\n"
        "    // café ☕\r\n"
        "    return <Foo title=\"naïve\"/>;\r\n"
        "  }\r\n"
        "}\r\n"
    )

    result = run(source)

    assert result.code == (
        "class A {\r\n"
        "  render() {\r\n"
        "    // café ☕\r\n"
        "    const Foo = this.renderFoo;\r\n"
        "    return <Foo title=\"naïve\"/>;\r\n"
        "  }\r\n"
        "}\r\n"
    )


def test_only_declarations_are_added():
    source = "class A {\n  render() {\n\treturn <X/>;   \n  }\n}\n"

    result = run(source)

    assert result.code.replace("const X = this.renderX;\n\t", "", 1) == source


# --- Dialects ---


def test_typescript_syntax_in_tsx_files():
    source = (
        "import React from 'react';\n"
        "interface Props { title: string }\n"
        "export class App extends React.Component<Props> {\n"
        "  render(): JSX.Element {\n"
        "    const count: number = 1;\n"
        "    return <Panel count={count} />;\n"
        "  }\n"
        "}\n"
    )

    result = run(source, path="App.tsx")

    assert result.aliases() == {"render": ["Panel"]}


def test_type_only_declarations_are_not_bindings():
    source = (
        "interface Panel { x: number }\n"
        "type Card = string;\n"
        "class App {\n"
        "  render() { return <Panel><Card/></Panel>; }\n"
        "}\n"
    )

    result = run(source, path="App.tsx")

    assert result.aliases() == {"render": ["Panel", "Card"]}


def test_component_modules_accept_type_annotations():
    source = "class A {\n  render({ name }: Props): any { return <Foo label={name} />; }\n}\n"

    result = InnerComponentTransformer().transform(source, "A.njs")

    assert "render({ name }: Props): any { const Foo = this.renderFoo; return" in result.code


def test_explicit_dialect_overrides_extension():
    source = "class A {\n  render(): any { return <Foo/>; }\n}\n"

    with pytest.raises(TransformSyntaxError):
        InnerComponentTransformer().transform(source, "A.njs", Dialect.JAVASCRIPT)

    result = InnerComponentTransformer().transform(source, "A.njs", Dialect.TSX)
    assert result.aliases() == {"render": ["Foo"]}


# --- Errors ---


def test_syntax_error_names_file_and_position():
    source = "class A {\n  render() {\n    return <div>;\n  }\n}\n"

    with pytest.raises(TransformSyntaxError) as excinfo:
        run(source, path="src/Broken.jsx")

    error = excinfo.value
    assert error.file_path == "src/Broken.jsx"
    assert error.line >= 1
    assert error.column >= 1
    assert str(error).startswith("src/Broken.jsx:")
