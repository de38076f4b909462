"""
Hook call site detection.

``HookStrategy`` is registered with the reflection traversal and offered
every expression statement. It recognises calls to the six WordPress hook
functions, either as a bare call or as the right-hand side of a single
assignment, and records a ``HookEvent`` on the file's extraction context.
"""

import logging
from typing import Dict, Optional

from tree_sitter import Node

from hooks.names import normalize_hook_name
from reflection.config import CALL_NODE
from reflection.errors import MalformedHookError
from reflection.models import HookEvent, HookKind
from reflection.printer import print_expr
from reflection.traversal import (
    ExtractionContext,
    callee_name,
    get_docblock,
    positional_arguments,
    statement_expression,
    unwrap_assignment,
)

logger = logging.getLogger(__name__)

HOOK_FUNCTIONS: Dict[str, HookKind] = {
    "apply_filters": HookKind.FILTER,
    "apply_filters_ref_array": HookKind.FILTER_REFERENCE,
    "apply_filters_deprecated": HookKind.FILTER_DEPRECATED,
    "do_action": HookKind.ACTION,
    "do_action_ref_array": HookKind.ACTION_REFERENCE,
    "do_action_deprecated": HookKind.ACTION_DEPRECATED,
}


def hook_call(statement: Node) -> Optional[Node]:
    """Return the hook call a statement consists of, if any.

    Args:
        statement: Any statement node.

    Returns:
        The ``function_call_expression`` when the statement is
        ``hook(...);`` or ``$x = hook(...);`` with a statically named hook
        function, otherwise None.
    """
    expression = statement_expression(statement)
    if expression is None:
        return None

    expression = unwrap_assignment(expression)
    if expression.type != CALL_NODE:
        return None

    if callee_name(expression) not in HOOK_FUNCTIONS:
        return None
    return expression


class HookStrategy:
    """Strategy converting hook call statements into ``HookEvent`` records."""

    def matches(self, node: Node, context: ExtractionContext) -> bool:
        return hook_call(node) is not None

    def create(self, node: Node, context: ExtractionContext) -> None:
        """Extract the hook called by ``node`` and record it on ``context``.

        Raises:
            MalformedHookError: If the call has no positional name argument.
        """
        call = hook_call(node)
        if call is None:
            return

        function = callee_name(call)
        kind = HOOK_FUNCTIONS[function]

        values = positional_arguments(call)
        if not values:
            raise MalformedHookError(
                f"{function}() without a hook name at {context.file_path}:{node.start_point.row + 1}"
            )

        hook = HookEvent(
            name=normalize_hook_name(print_expr(values[0])),
            line=node.start_point.row + 1,
            end_line=node.start_point.row + 1,
            kind=kind,
            arguments=tuple(print_expr(value) for value in values[1:]),
            docblock=get_docblock(node, context),
        )
        context.add_hook(hook)
        logger.debug(f"Found {kind.value} hook '{hook.name}' at {context.file_path}:{hook.line}")
