"""Canonical hook name reconstruction.

Hook names are often built at runtime (``'save_post_' . $post_type``). The
canonical form keeps literal text and renders the variable part as a
``{$placeholder}``. This is a heuristic, not an expression evaluator.
"""

import re

# Whole input is one quoted literal with no unescaped quote of its kind inside
_PURE_LITERAL_RE = re.compile(r"""^(['"])((?:\\.|(?!\1).)*)\1$""", re.S)

# [literal .] $variable [. literal]
_CONCATENATION_RE = re.compile(
    r"^(?:(['\"])(?P<prefix>[^'\"]*)\1\s*\.\s*)?"  # leading literal (optional)
    r"(?P<variable>\$[^\s.()]+)"  # variable reference
    r"(?:\s*\.\s*(['\"])(?P<suffix>[^'\"]*)\4)?$"  # trailing literal (optional)
)


def normalize_hook_name(name: str) -> str:
    """Reconstruct a canonical hook name from a printed name expression.

    Args:
        name: Pretty-printed source text of the hook name argument.

    Returns:
        The unquoted literal, a ``prefix{$variable}suffix`` reconstruction,
        or the input unchanged when neither shape applies.

    Example:
        >>> normalize_hook_name("'prefix_' . $type")
        'prefix_{$type}'
    """
    match = _PURE_LITERAL_RE.match(name)
    if match:
        return match.group(2)

    match = _CONCATENATION_RE.match(name)
    if match:
        prefix = match.group("prefix") or ""
        suffix = match.group("suffix") or ""
        return f"{prefix}{{{match.group('variable')}}}{suffix}"

    return name
