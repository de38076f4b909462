"""
Unit tests for traversal.py

Tests declaration extraction, doc comment attachment, the file docblock rule
and strategy dispatch over parsed PHP snippets and fixtures.
"""

import unittest
from pathlib import Path

from reflection.parser import parse_bytes, parse_file
from reflection.traversal import (
    ExtractionContext,
    callee_name,
    extract_source_file,
    statement_expression,
)


FIXTURES_DIR = Path(__file__).parent / "fixtures" / "plugin"


def _reflect(source: str, strategies=()):
    source_bytes = source.encode("utf-8")
    tree = parse_bytes(source_bytes)
    return extract_source_file(tree, source_bytes, "test.php", strategies)


class RecordingStrategy:
    """Collects the callee name of every expression statement offered."""

    def __init__(self):
        self.seen = []

    def matches(self, node, context):
        return True

    def create(self, node, context):
        expression = statement_expression(node)
        if expression is not None and expression.type == "function_call_expression":
            self.seen.append(callee_name(expression))


class TestExtractionContext(unittest.TestCase):

    def test_hooks_start_unset(self):
        ctx = ExtractionContext(file_path="a.php", source_bytes=b"")
        self.assertIsNone(ctx.hooks)


class TestFunctions(unittest.TestCase):
    """Test function extraction."""

    def test_global_function(self):
        source_file = _reflect("<?php\nfunction foo( $a, $b = null ) {}\n")

        self.assertEqual(len(source_file.functions), 1)
        function = source_file.functions[0]
        self.assertEqual(function.name, "foo")
        self.assertEqual(function.fqsen, "\\foo()")
        self.assertEqual(function.line, 2)
        self.assertEqual([a.name for a in function.arguments], ["a", "b"])
        self.assertIsNone(function.arguments[0].default)
        self.assertEqual(function.arguments[1].default, "null")
        self.assertEqual(function.arguments[0].type, "")
        self.assertIsNone(function.docblock)

    def test_namespaced_function_with_types(self):
        source = (
            "<?php\n"
            "namespace Foo\\Bar;\n"
            "\n"
            "use Vendor\\Lib\\Thing as Alias;\n"
            "\n"
            "/**\n"
            " * Does baz.\n"
            " */\n"
            "function baz( Alias $thing, int $count = 10, array $opts = array(), ...$rest ) {}\n"
        )
        function = _reflect(source).functions[0]

        self.assertEqual(function.fqsen, "\\Foo\\Bar\\baz()")
        self.assertEqual(function.docblock.summary, "Does baz.")
        args = function.arguments
        self.assertEqual(args[0].type, "\\Vendor\\Lib\\Thing")
        self.assertEqual(args[1].type, "int")
        self.assertEqual(args[1].default, "10")
        self.assertEqual(args[2].default, "array()")
        self.assertIsNone(args[3].default)
        self.assertEqual(args[3].name, "rest")

    def test_conditional_declaration(self):
        source = (
            "<?php\n"
            "if ( ! function_exists( 'wp_cache_get' ) ) {\n"
            "    function wp_cache_get( $key ) {}\n"
            "}\n"
        )
        self.assertEqual([f.name for f in _reflect(source).functions], ["wp_cache_get"])

    def test_braced_namespaces(self):
        source = (
            "<?php\n"
            "namespace A {\n"
            "    function f() {}\n"
            "}\n"
            "namespace {\n"
            "    function g() {}\n"
            "}\n"
        )
        fqsens = [f.fqsen for f in _reflect(source).functions]
        self.assertEqual(fqsens, ["\\A\\f()", "\\g()"])


class TestClasses(unittest.TestCase):
    """Test class extraction against the widget fixture."""

    def setUp(self):
        path = str(FIXTURES_DIR / "includes" / "class-example-widget.php")
        tree, source = parse_file(path)
        self.source_file = extract_source_file(tree, source, path)
        self.cls = self.source_file.classes[0]

    def test_class_declaration(self):
        cls = self.cls
        self.assertEqual(cls.name, "Widget")
        self.assertEqual(cls.fqsen, "\\Example\\Widgets\\Widget")
        self.assertEqual(cls.line, 15)
        self.assertEqual(cls.end_line, 39)
        self.assertTrue(cls.final)
        self.assertFalse(cls.abstract)
        self.assertEqual(cls.parent, "\\Example\\Widgets\\Base_Widget")
        self.assertEqual(cls.interfaces, ("\\Example\\Contracts\\Renderable",))
        self.assertEqual(cls.docblock.summary, "Renders the example widget.")

    def test_properties(self):
        count, title = self.cls.properties
        self.assertEqual(count.name, "count")
        self.assertEqual(count.line, 21)
        self.assertTrue(count.static)
        self.assertEqual(count.visibility, "public")
        self.assertEqual(count.default, "0")
        self.assertEqual(count.docblock.tags[0].name, "var")

        self.assertEqual(title.name, "title")
        self.assertFalse(title.static)
        self.assertEqual(title.visibility, "protected")
        self.assertEqual(title.default, "'Example'")
        self.assertIsNone(title.docblock)

    def test_methods(self):
        render, make = self.cls.methods
        self.assertEqual(render.fqsen, "\\Example\\Widgets\\Widget::render()")
        self.assertEqual((render.line, render.end_line), (30, 34))
        self.assertEqual(render.visibility, "public")
        self.assertFalse(render.static)
        self.assertEqual(render.docblock.summary, "Renders the widget.")
        self.assertEqual([a.type for a in render.arguments], ["array", "\\WP_Post"])
        self.assertEqual(render.arguments[1].default, "null")

        self.assertEqual(make.name, "make")
        self.assertTrue(make.static)
        self.assertEqual(make.visibility, "private")
        self.assertIsNone(make.docblock)

    def test_multiple_properties_share_docblock(self):
        source = (
            "<?php\n"
            "class C {\n"
            "    /** Shared. */\n"
            "    public $a, $b = 1;\n"
            "}\n"
        )
        props = _reflect(source).classes[0].properties
        self.assertEqual([p.name for p in props], ["a", "b"])
        self.assertEqual(props[1].default, "1")
        self.assertEqual(props[0].docblock, props[1].docblock)

    def test_abstract_class_without_parent(self):
        cls = _reflect("<?php\nabstract class Base { abstract protected function run(); }\n").classes[0]
        self.assertTrue(cls.abstract)
        self.assertIsNone(cls.parent)
        self.assertEqual(cls.interfaces, ())
        self.assertTrue(cls.methods[0].abstract)
        self.assertEqual(cls.methods[0].visibility, "protected")


class TestIncludesAndConstants(unittest.TestCase):

    def test_include_kinds(self):
        source = (
            "<?php\n"
            "include 'a.php';\n"
            "include_once 'b.php';\n"
            "require 'c.php';\n"
            "require_once ABSPATH . 'd.php';\n"
            "$config = require 'e.php';\n"
        )
        includes = _reflect(source).includes
        self.assertEqual(
            [(i.name, i.line, i.type) for i in includes],
            [
                ("'a.php'", 2, "Include"),
                ("'b.php'", 3, "Include Once"),
                ("'c.php'", 4, "Require"),
                ("ABSPATH . 'd.php'", 5, "Require Once"),
                ("'e.php'", 6, "Require"),
            ],
        )

    def test_constants(self):
        source = (
            "<?php\n"
            "const A = 1, B = 'two';\n"
            "define( 'C', true );\n"
        )
        constants = _reflect(source).constants
        self.assertEqual(
            [(c.name, c.line, c.value) for c in constants],
            [("A", 2, "1"), ("B", 2, "'two'"), ("C", 3, "true")],
        )
        self.assertEqual(constants[2].fqsen, "\\C")

    def test_closure_bodies_are_not_walked(self):
        source = (
            "<?php\n"
            "add_action( 'init', function () {\n"
            "    define( 'INNER', 1 );\n"
            "} );\n"
        )
        self.assertEqual(_reflect(source).constants, ())

    def test_trait_method_bodies_are_walked(self):
        source = (
            "<?php\n"
            "trait T {\n"
            "    function m() { define( 'IN_TRAIT', 1 ); }\n"
            "}\n"
        )
        source_file = _reflect(source)
        self.assertEqual([c.name for c in source_file.constants], ["IN_TRAIT"])
        self.assertEqual(source_file.classes, ())


class TestFileDocblock(unittest.TestCase):
    """Test the file docblock rule."""

    def test_single_docblock_before_function_belongs_to_function(self):
        source_file = _reflect("<?php\n/**\n * Function doc.\n */\nfunction f() {}\n")
        self.assertIsNone(source_file.docblock)
        self.assertEqual(source_file.functions[0].docblock.summary, "Function doc.")

    def test_two_docblocks_before_function(self):
        source = (
            "<?php\n"
            "/**\n * File doc.\n */\n"
            "\n"
            "/**\n * Function doc.\n */\n"
            "function f() {}\n"
        )
        source_file = _reflect(source)
        self.assertEqual(source_file.docblock.summary, "File doc.")
        self.assertEqual(source_file.functions[0].docblock.summary, "Function doc.")

    def test_docblock_before_plain_statement(self):
        path = str(FIXTURES_DIR / "example.php")
        tree, source = parse_file(path)
        source_file = extract_source_file(tree, source, path)

        self.assertEqual(source_file.docblock.summary, "Plugin bootstrap.")
        self.assertEqual(source_file.docblock.description, "Loads the plugin and registers its hooks.")
        self.assertEqual(source_file.docblock.tags[0].name, "package")

    def test_plain_comment_is_ignored(self):
        source_file = _reflect("<?php\n/* Not a docblock. */\necho 1;\n")
        self.assertIsNone(source_file.docblock)


class TestSourceFile(unittest.TestCase):

    def test_path_and_error_count(self):
        source = "<?php\necho 1;\n"
        source_file = _reflect(source)
        self.assertEqual(source_file.path, "test.php")
        self.assertEqual(source_file.parse_error_count, 0)

    def test_no_strategies_leaves_hooks_unset(self):
        source_file = _reflect("<?php\ndo_action( 'init' );\n")
        self.assertIsNone(source_file.hooks)

    def test_strategies_see_nested_statements(self):
        source = (
            "<?php\n"
            "foo();\n"
            "function wrap() {\n"
            "    foreach ( $items as $item ) {\n"
            "        bar();\n"
            "    }\n"
            "}\n"
            "class K {\n"
            "    public function m() {\n"
            "        if ( true ) { baz(); } else { qux(); }\n"
            "    }\n"
            "}\n"
        )
        strategy = RecordingStrategy()
        _reflect(source, [strategy])
        self.assertEqual(strategy.seen, ["foo", "bar", "baz", "qux"])

    def test_syntax_errors_are_counted(self):
        source_file = _reflect("<?php\nfunction ok() {}\n$broken = ;\n")
        self.assertGreater(source_file.parse_error_count, 0)


if __name__ == "__main__":
    unittest.main()
