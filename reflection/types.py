"""
Name and type resolution against a namespace context.

Mirrors how phpDocumentor renders types: keywords are normalised, class
names are expanded to their fully qualified form using the active namespace
and ``use`` imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping

NAMESPACE_SEPARATOR = "\\"

# Type keywords that never resolve against the namespace
_KEYWORD_TYPES: dict[str, str] = {
    "string": "string",
    "int": "int",
    "integer": "int",
    "bool": "bool",
    "boolean": "bool",
    "float": "float",
    "double": "float",
    "array": "array",
    "callable": "callable",
    "callback": "callable",
    "iterable": "iterable",
    "object": "object",
    "mixed": "mixed",
    "void": "void",
    "null": "null",
    "false": "false",
    "true": "true",
    "resource": "resource",
    "never": "never",
    "scalar": "scalar",
    "numeric": "numeric",
    "self": "self",
    "static": "static",
    "parent": "parent",
    "$this": "$this",
}


@dataclass(frozen=True)
class TypeContext:
    """Namespace and import aliases in effect at a point of a file."""

    namespace: str = ""
    aliases: Mapping[str, str] = field(default_factory=dict)

    def with_namespace(self, namespace: str) -> "TypeContext":
        """Enter a new namespace; imports do not carry over."""
        return TypeContext(namespace=namespace.strip(NAMESPACE_SEPARATOR), aliases={})

    def with_alias(self, alias: str, target: str) -> "TypeContext":
        aliases = dict(self.aliases)
        aliases[alias.lower()] = target.strip(NAMESPACE_SEPARATOR)
        return TypeContext(namespace=self.namespace, aliases=aliases)


def qualify(name: str, context: TypeContext) -> str:
    """Prefix a declared (unqualified) name with the context namespace."""
    if context.namespace:
        return f"{NAMESPACE_SEPARATOR}{context.namespace}{NAMESPACE_SEPARATOR}{name}"
    return f"{NAMESPACE_SEPARATOR}{name}"


def resolve_class_name(name: str, context: TypeContext) -> str:
    """Resolve a class-like name to its fully qualified form.

    Args:
        name: Name as written in source or a doc comment.
        context: Namespace context of the reference.

    Returns:
        ``\\Fully\\Qualified`` name, or the normalised keyword for
        built-in types.
    """
    name = name.strip()
    if not name:
        return name
    keyword = _KEYWORD_TYPES.get(name.lower())
    if keyword is not None:
        return keyword
    if name.startswith(NAMESPACE_SEPARATOR):
        return name

    head, _, rest = name.partition(NAMESPACE_SEPARATOR)
    target = context.aliases.get(head.lower())
    if target is not None:
        resolved = f"{NAMESPACE_SEPARATOR}{target}"
        return f"{resolved}{NAMESPACE_SEPARATOR}{rest}" if rest else resolved
    return qualify(name, context)


def split_union(text: str) -> List[str]:
    """Split a type expression on top-level ``|`` separators."""
    parts: List[str] = []
    depth = 0
    current = []
    for char in text:
        if char in "<({[":
            depth += 1
        elif char in ">)}]" and depth > 0:
            depth -= 1
        if char == "|" and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def _resolve_single(text: str, context: TypeContext) -> str:
    if text.startswith("?"):
        return "?" + _resolve_single(text[1:], context)
    if text.endswith("[]"):
        return _resolve_single(text[:-2], context) + "[]"
    if text.startswith("(") and text.endswith(")"):
        return text
    if "&" in text and "<" not in text:
        return "&".join(_resolve_single(part.strip(), context) for part in text.split("&"))
    # Generics, shapes and literal types are kept verbatim
    if any(char in text for char in "<{ '\"") or text[:1].isdigit():
        return text
    return resolve_class_name(text, context)


def resolve_type(text: str, context: TypeContext) -> List[str]:
    """Resolve a (possibly union) type expression into ordered type names.

    Example:
        >>> resolve_type("string|WP_Post[]|null", TypeContext())
        ['string', '\\\\WP_Post[]', 'null']
    """
    return [_resolve_single(part, context) for part in split_union(text.strip())]
