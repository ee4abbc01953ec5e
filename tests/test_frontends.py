"""
Tests for language front-ends.

Checks that tree-sitter and ast parse trees are exposed through the
syntax contract with the right kinds, operators and symbols.
"""

import pytest

from protein_hash.analysis import FrontendRegistry, NodeKind, compute_ast_hash
from protein_hash.core.exceptions import InvalidInputError

# Importing the package registers the built-in front-ends
from protein_hash.analysis.languages import javascript_frontend, python_frontend


def walk(root):
    """All nodes of a syntax tree in pre-order."""
    stack = [root]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))


def find(root, kind):
    return [n for n in walk(root) if n.kind == kind]


class TestFrontendRegistry:
    """Test front-end registration and retrieval."""

    def test_builtin_languages_registered(self):
        registered = set(FrontendRegistry.list_languages())
        assert {"javascript", "typescript", "tsx", "python"}.issubset(registered)

    def test_language_for_path(self):
        assert FrontendRegistry.language_for_path("src/app.js") == "javascript"
        assert FrontendRegistry.language_for_path("src/app.TS") == "typescript"
        assert FrontendRegistry.language_for_path("src/App.tsx") == "tsx"
        assert FrontendRegistry.language_for_path("tool.py") == "python"
        assert FrontendRegistry.language_for_path("README.md") is None

    def test_unknown_language(self):
        assert FrontendRegistry.get_frontend("cobol") is None
        assert not FrontendRegistry.has_frontend("cobol")

    def test_instances_are_cached(self):
        assert FrontendRegistry.get_frontend("python") is FrontendRegistry.get_frontend("python")

    def test_extensions(self):
        assert ".jsx" in FrontendRegistry.extensions_for_language("javascript")
        assert FrontendRegistry.extensions_for_language("cobol") == []


class TestJavaScriptFrontend:
    """Test the tree-sitter JavaScript front-end."""

    @pytest.fixture
    def frontend(self):
        return javascript_frontend.JavaScriptFrontend()

    def test_function_declaration(self, frontend):
        root = frontend.parse("function add(a, b) { return a + b; }")

        assert root.type == "program"
        functions = find(root, NodeKind.FUNCTION)
        assert [f.symbol for f in functions] == ["add"]
        assert [b.operator for b in find(root, NodeKind.BINARY)] == ["+"]
        assert len(find(root, NodeKind.RETURN)) == 1

    def test_arrow_function_takes_binding_name(self, frontend):
        root = frontend.parse("const add = (x, y) => x + y;")

        functions = find(root, NodeKind.FUNCTION)
        assert len(functions) == 1
        assert functions[0].type == "arrow_function"
        assert functions[0].symbol == "add"

    def test_method_name(self, frontend):
        root = frontend.parse("class A { run() { return 1; } }")
        assert [f.symbol for f in find(root, NodeKind.FUNCTION)] == ["run"]

    def test_call_symbols(self, frontend):
        root = frontend.parse("Math.max(a, b); new Promise(resolve => resolve());")

        symbols = [c.symbol for c in find(root, NodeKind.CALL)]
        assert symbols[:2] == ["Math.max", "Promise"]

    def test_operators(self, frontend):
        root = frontend.parse("x = 1; x += 2; i++; !ok; a * b;")

        assignments = [n.operator for n in find(root, NodeKind.ASSIGNMENT)]
        unary = [n.operator for n in find(root, NodeKind.UNARY)]
        binary = [n.operator for n in find(root, NodeKind.BINARY)]
        assert assignments == ["=", "+="]
        assert unary == ["++", "!"]
        assert binary == ["*"]

    def test_control_constructs(self, frontend):
        source = """
        for (let i = 0; i < 3; i++) {}
        for (const k in obj) {}
        while (x) {}
        do {} while (x);
        if (x) {}
        switch (x) { default: break; }
        try {} catch (e) {}
        """
        root = frontend.parse(source)

        loops = [n.construct for n in find(root, NodeKind.LOOP)]
        controls = [n.construct for n in find(root, NodeKind.CONTROL)]
        assert loops == ["For", "ForIn", "While", "DoWhile"]
        assert controls == ["If", "Switch", "Try"]

    def test_comments_dropped(self, frontend):
        root = frontend.parse("// leading\nfoo(); /* trailing */")
        assert all(n.type != "comment" for n in walk(root))

    def test_literals_are_leaves(self, frontend):
        root = frontend.parse('const s = "abc" + `t${x}`;')

        literals = find(root, NodeKind.LITERAL)
        assert len(literals) == 2
        assert all(lit.children() == [] for lit in literals)

    def test_identifiers_marked(self, frontend):
        root = frontend.parse("foo.bar = this.baz;")
        types = {n.type for n in find(root, NodeKind.IDENTIFIER)}
        assert {"identifier", "property_identifier", "this"}.issubset(types)

    def test_empty_source(self, frontend):
        root = frontend.parse("")
        assert root.children() == []

    def test_comment_only_source(self, frontend):
        root = frontend.parse("// nothing here")
        assert root.children() == []

    def test_syntax_error(self, frontend):
        with pytest.raises(InvalidInputError):
            frontend.parse("function (")

    def test_missing_source(self, frontend):
        with pytest.raises(InvalidInputError):
            frontend.parse(None)


class TestTypeScriptFrontend:
    """Test the tree-sitter TypeScript front-end."""

    @pytest.fixture
    def frontend(self):
        return javascript_frontend.TypeScriptFrontend()

    def test_typed_function(self, frontend):
        root = frontend.parse("function add(a: number, b: number): number { return a + b; }")

        assert [f.symbol for f in find(root, NodeKind.FUNCTION)] == ["add"]
        assert [b.operator for b in find(root, NodeKind.BINARY)] == ["+"]

    def test_type_names_are_identifiers(self, frontend):
        root = frontend.parse("let a: Widget = make(); let b: string = 'x';")

        types = {n.type for n in find(root, NodeKind.IDENTIFIER)}
        assert "type_identifier" in types
        assert "predefined_type" in types

    def test_rejects_jsx(self, frontend):
        with pytest.raises(InvalidInputError):
            frontend.parse("const C = () => <div>{1 + 2}</div>;")


class TestTsxFrontend:
    """Test the tree-sitter TSX front-end."""

    @pytest.fixture
    def frontend(self):
        return javascript_frontend.TsxFrontend()

    def test_jsx_component(self, frontend):
        root = frontend.parse("const C = () => <div>{1 + 2}</div>;")

        assert [f.symbol for f in find(root, NodeKind.FUNCTION)] == ["C"]
        assert [b.operator for b in find(root, NodeKind.BINARY)] == ["+"]
        assert any(n.type == "jsx_element" for n in walk(root))

    def test_typed_props(self, frontend):
        root = frontend.parse(
            "function Label(props: { text: string }) { return <span>{props.text}</span>; }"
        )

        assert [f.symbol for f in find(root, NodeKind.FUNCTION)] == ["Label"]
        types = {n.type for n in find(root, NodeKind.IDENTIFIER)}
        assert "predefined_type" in types


class TestPythonFrontend:
    """Test the ast based Python front-end."""

    @pytest.fixture
    def frontend(self):
        return python_frontend.PythonFrontend()

    def test_function(self, frontend):
        root = frontend.parse("def add(a, b):\n    return a + b\n")

        assert root.type == "Module"
        assert [f.symbol for f in find(root, NodeKind.FUNCTION)] == ["add"]
        assert [b.operator for b in find(root, NodeKind.BINARY)] == ["+"]

    def test_lambda_binding(self, frontend):
        root = frontend.parse("fact = lambda n: n * fact(n - 1)\n")

        functions = find(root, NodeKind.FUNCTION)
        assert functions[0].type == "Lambda"
        assert functions[0].symbol == "fact"
        assert [c.symbol for c in find(root, NodeKind.CALL)] == ["fact"]

    def test_attribute_calls(self, frontend):
        root = frontend.parse("self.helper.run(x)\nmath.sqrt(2)\nfactory()(1)\n")

        symbols = [c.symbol for c in find(root, NodeKind.CALL)]
        assert symbols == ["self.helper.run", "math.sqrt", None, "factory"]

    def test_operators(self, frontend):
        source = "x = 1\nx += 2\ny = -x\nz = a < b\nw = a and b\nv = a // b\n"
        root = frontend.parse(source)

        assignments = [n.operator for n in find(root, NodeKind.ASSIGNMENT)]
        unary = [n.operator for n in find(root, NodeKind.UNARY)]
        binary = [n.operator for n in find(root, NodeKind.BINARY)]
        assert assignments == ["=", "+=", "=", "=", "=", "="]
        assert unary == ["-"]
        assert binary == ["<", "and", "//"]

    def test_chained_comparison_split(self, frontend):
        root = frontend.parse("a < b == c\n")

        binary = find(root, NodeKind.BINARY)
        assert [n.operator for n in binary] == ["and", "<", "=="]
        assert [n.type for n in binary] == ["BoolOp", "Compare", "Compare"]

    def test_chained_comparisons_hash_apart(self, frontend):
        first = frontend.parse("ok = a < b < c\n")
        second = frontend.parse("ok = a < b == c\n")

        assert compute_ast_hash(first) != compute_ast_hash(second)

    def test_control_constructs(self, frontend):
        source = (
            "for i in range(3):\n    pass\n"
            "while x:\n    pass\n"
            "if x:\n    pass\n"
            "try:\n    pass\nexcept Exception:\n    pass\n"
        )
        root = frontend.parse(source)

        assert [n.construct for n in find(root, NodeKind.LOOP)] == ["For", "While"]
        assert [n.construct for n in find(root, NodeKind.CONTROL)] == ["If", "Try"]

    def test_expression_contexts_skipped(self, frontend):
        root = frontend.parse("a = b + c\n")
        types = {n.type for n in walk(root)}

        assert "Load" not in types
        assert "Store" not in types
        assert "Add" not in types

    def test_await(self, frontend):
        root = frontend.parse("async def f():\n    await g()\n")
        assert len(find(root, NodeKind.AWAIT)) == 1

    def test_syntax_error(self, frontend):
        with pytest.raises(InvalidInputError):
            frontend.parse("def (:\n")

    def test_empty_module(self, frontend):
        assert frontend.parse("").children() == []


class TestAstHash:
    """Test the normalized syntax tree hash."""

    @pytest.fixture
    def frontend(self):
        return javascript_frontend.JavaScriptFrontend()

    def test_renaming_invariant(self, frontend):
        first = frontend.parse("function add(a, b) { return a + b; }")
        second = frontend.parse("function sum(x, y) { return x + y; }")

        assert compute_ast_hash(first) == compute_ast_hash(second)

    def test_operator_sensitive(self, frontend):
        first = frontend.parse("function add(a, b) { return a + b; }")
        second = frontend.parse("function add(a, b) { return a - b; }")

        assert compute_ast_hash(first) != compute_ast_hash(second)

    def test_format(self, frontend):
        value = compute_ast_hash(frontend.parse("x;"))
        assert len(value) == 16
        int(value, 16)

    def test_missing_tree(self):
        with pytest.raises(InvalidInputError):
            compute_ast_hash(None)
