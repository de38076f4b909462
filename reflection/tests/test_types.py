"""
Unit tests for types.py

Tests name qualification and type resolution against namespace context.
"""

import unittest

from reflection.types import (
    TypeContext,
    qualify,
    resolve_class_name,
    resolve_type,
    split_union,
)


class TestTypeContext(unittest.TestCase):
    """Test namespace and alias bookkeeping."""

    def test_with_namespace_resets_aliases(self):
        ctx = TypeContext().with_alias("Foo", "Vendor\\Foo").with_namespace("App")
        self.assertEqual(ctx.namespace, "App")
        self.assertEqual(dict(ctx.aliases), {})

    def test_with_alias_is_case_insensitive(self):
        ctx = TypeContext().with_alias("Renderable", "\\Example\\Contracts\\Renderable")
        self.assertEqual(ctx.aliases["renderable"], "Example\\Contracts\\Renderable")

    def test_contexts_are_immutable(self):
        base = TypeContext(namespace="App")
        base.with_alias("X", "Y")
        self.assertEqual(dict(base.aliases), {})


class TestQualify(unittest.TestCase):

    def test_global_namespace(self):
        self.assertEqual(qualify("foo", TypeContext()), "\\foo")

    def test_namespaced(self):
        self.assertEqual(qualify("Baz", TypeContext(namespace="Foo\\Bar")), "\\Foo\\Bar\\Baz")


class TestResolveClassName(unittest.TestCase):
    """Test class-name resolution."""

    def setUp(self):
        self.ctx = (
            TypeContext()
            .with_namespace("App\\Models")
            .with_alias("Post", "WP\\Post")
        )

    def test_keywords_are_normalised(self):
        self.assertEqual(resolve_class_name("integer", self.ctx), "int")
        self.assertEqual(resolve_class_name("boolean", self.ctx), "bool")
        self.assertEqual(resolve_class_name("double", self.ctx), "float")
        self.assertEqual(resolve_class_name("callback", self.ctx), "callable")
        self.assertEqual(resolve_class_name("Self", self.ctx), "self")

    def test_fully_qualified_kept(self):
        self.assertEqual(resolve_class_name("\\WP_Error", self.ctx), "\\WP_Error")

    def test_relative_to_namespace(self):
        self.assertEqual(resolve_class_name("User", self.ctx), "\\App\\Models\\User")

    def test_alias(self):
        self.assertEqual(resolve_class_name("post", self.ctx), "\\WP\\Post")
        self.assertEqual(resolve_class_name("Post\\Meta", self.ctx), "\\WP\\Post\\Meta")


class TestResolveType(unittest.TestCase):
    """Test type expression resolution."""

    def test_union(self):
        self.assertEqual(
            resolve_type("string|WP_Post[]|null", TypeContext()),
            ["string", "\\WP_Post[]", "null"],
        )

    def test_nullable(self):
        self.assertEqual(resolve_type("?WP_Term", TypeContext()), ["?\\WP_Term"])

    def test_generics_kept_verbatim(self):
        self.assertEqual(
            resolve_type("array<int, string>|false", TypeContext()),
            ["array<int, string>", "false"],
        )

    def test_split_union_respects_brackets(self):
        self.assertEqual(
            split_union("array<int|string, mixed>|null"),
            ["array<int|string, mixed>", "null"],
        )

    def test_empty(self):
        self.assertEqual(resolve_type("", TypeContext()), [])


if __name__ == "__main__":
    unittest.main()
