"""
Layer 2: Hook Detection

Recognises WordPress hook call sites during reflection and reconstructs
their canonical names.
"""

from hooks.names import normalize_hook_name
from hooks.detector import HOOK_FUNCTIONS, HookStrategy, hook_call

__all__ = [
    "HOOK_FUNCTIONS",
    "HookStrategy",
    "hook_call",
    "normalize_hook_name",
]
