"""
Expression pretty-printing.

Renders expression nodes back to PHP source text in a normalised layout:
operators separated by single spaces, call arguments and array items joined
by ``", "``, bare interpolations in double-quoted strings wrapped in braces.
Node types without a dedicated rule are emitted verbatim.
"""

from typing import Callable, Dict, List, Optional

from tree_sitter import Node


def node_text(node: Node) -> str:
    """Return the verbatim source text of a node."""
    return node.text.decode("utf-8") if node.text else ""


def _join_items(nodes: List[Node]) -> str:
    return ", ".join(print_expr(child) for child in nodes if child.type != "comment")


def _print_binary(node: Node) -> Optional[str]:
    left = node.child_by_field_name("left")
    operator = node.child_by_field_name("operator")
    right = node.child_by_field_name("right")
    if left is None or operator is None or right is None:
        return None
    return f"{print_expr(left)} {node_text(operator)} {print_expr(right)}"


def _print_assignment(node: Node) -> Optional[str]:
    left = node.child_by_field_name("left")
    right = node.child_by_field_name("right")
    if left is None or right is None:
        return None
    return f"{print_expr(left)} = {print_expr(right)}"


def _print_arguments(node: Node) -> str:
    return "(" + _join_items(node.named_children) + ")"


def _print_argument(node: Node) -> Optional[str]:
    if not node.named_children:
        return None
    name = node.child_by_field_name("name")
    value = print_expr(node.named_children[-1])
    if name is not None:
        return f"{node_text(name)}: {value}"
    return value


def _print_call(node: Node) -> Optional[str]:
    function = node.child_by_field_name("function")
    arguments = node.child_by_field_name("arguments")
    if function is None or arguments is None:
        return None
    return print_expr(function) + _print_arguments(arguments)


def _print_member_call(node: Node) -> Optional[str]:
    obj = node.child_by_field_name("object")
    name = node.child_by_field_name("name")
    arguments = node.child_by_field_name("arguments")
    if obj is None or name is None or arguments is None:
        return None
    arrow = "?->" if node.type == "nullsafe_member_call_expression" else "->"
    return f"{print_expr(obj)}{arrow}{node_text(name)}{_print_arguments(arguments)}"


def _print_scoped_call(node: Node) -> Optional[str]:
    scope = node.child_by_field_name("scope")
    name = node.child_by_field_name("name")
    arguments = node.child_by_field_name("arguments")
    if scope is None or name is None or arguments is None:
        return None
    return f"{node_text(scope)}::{node_text(name)}{_print_arguments(arguments)}"


def _print_array(node: Node) -> str:
    items = _join_items(node.named_children)
    if node_text(node).lower().startswith("array"):
        return f"array({items})"
    return f"[{items}]"


def _print_array_element(node: Node) -> Optional[str]:
    children = [child for child in node.named_children if child.type != "comment"]
    if node_text(node).startswith(("&", "...")):
        return None
    if len(children) == 1:
        return print_expr(children[0])
    if len(children) == 2:
        return f"{print_expr(children[0])} => {print_expr(children[1])}"
    return None


def _print_conditional(node: Node) -> Optional[str]:
    condition = node.child_by_field_name("condition")
    body = node.child_by_field_name("body")
    alternative = node.child_by_field_name("alternative")
    if condition is None or alternative is None:
        return None
    if body is None:
        return f"{print_expr(condition)} ?: {print_expr(alternative)}"
    return f"{print_expr(condition)} ? {print_expr(body)} : {print_expr(alternative)}"


def _print_parenthesized(node: Node) -> Optional[str]:
    if len(node.named_children) != 1:
        return None
    return f"({print_expr(node.named_children[0])})"


# Simple interpolation forms inside a double-quoted string
_INTERPOLATED = frozenset({
    "variable_name",
    "member_access_expression",
    "nullsafe_member_access_expression",
    "subscript_expression",
})


def _print_encapsed(node: Node) -> Optional[str]:
    """Brace every bare interpolation: ``"a-$b"`` prints as ``"a-{$b}"``."""
    text = node.text or b""
    base = node.start_byte
    parts: List[bytes] = []
    pos = 0
    for child in node.named_children:
        if child.type not in _INTERPOLATED:
            continue
        start = child.start_byte - base
        end = child.end_byte - base
        if text[start - 1:start] == b"{":
            continue
        parts.extend((text[pos:start], b"{", text[start:end], b"}"))
        pos = end
    if not parts:
        return None
    parts.append(text[pos:])
    return b"".join(parts).decode("utf-8")


_PRINTERS: Dict[str, Callable[[Node], Optional[str]]] = {
    "encapsed_string": _print_encapsed,
    "binary_expression": _print_binary,
    "assignment_expression": _print_assignment,
    "function_call_expression": _print_call,
    "member_call_expression": _print_member_call,
    "nullsafe_member_call_expression": _print_member_call,
    "scoped_call_expression": _print_scoped_call,
    "argument": _print_argument,
    "array_creation_expression": _print_array,
    "array_element_initializer": _print_array_element,
    "conditional_expression": _print_conditional,
    "parenthesized_expression": _print_parenthesized,
}


def print_expr(node: Node) -> str:
    """Pretty-print an expression node to PHP source text.

    Args:
        node: Any expression node.

    Returns:
        Source text; comments inside the expression are dropped by the
        structured rules, verbatim text is used for everything else.

    Example:
        ``'my_'.$thing   .  '_event'`` prints as ``'my_' . $thing . '_event'``.
    """
    printer = _PRINTERS.get(node.type)
    if printer is not None:
        rendered = printer(node)
        if rendered is not None:
            return rendered
    return node_text(node)
