"""
Configuration constants for PHP AST reflection.

Defines the tree-sitter-php node type strings used during traversal.
"""

from typing import Dict, Set

# Statement-level node types that declare entities
FUNCTION_NODE: str = "function_definition"
CLASS_NODE: str = "class_declaration"
METHOD_NODE: str = "method_declaration"
PROPERTY_NODE: str = "property_declaration"
CONST_NODE: str = "const_declaration"
NAMESPACE_NODE: str = "namespace_definition"
NAMESPACE_USE_NODE: str = "namespace_use_declaration"
EXPRESSION_STATEMENT: str = "expression_statement"

# Comment node type (includes //, #, /* */, /** */)
COMMENT_NODE: str = "comment"

# Doc comment prefix
DOC_COMMENT_PREFIX: str = "/**"

# Statement containers whose children we scan for further statements.
# Expressions are never descended into.
STATEMENT_CONTAINERS: Set[str] = {
    "program",
    "compound_statement",
    "colon_block",
    "if_statement",
    "else_clause",
    "else_if_clause",
    "while_statement",
    "do_statement",
    "for_statement",
    "foreach_statement",
    "switch_statement",
    "switch_block",
    "case_statement",
    "default_statement",
    "try_statement",
    "catch_clause",
    "finally_clause",
    "declare_statement",
}

# Nodes that can carry their own docblock; a file docblock in front of one
# of these needs a second doc comment to be claimed by the file.
DOCUMENTABLE_NODES: Set[str] = {
    "function_definition",
    "class_declaration",
    "interface_declaration",
    "trait_declaration",
    "enum_declaration",
    "const_declaration",
}

# Nodes skipped when looking for the first statement of a file
NON_STATEMENT_NODES: Set[str] = {
    "php_tag",
    "text",
    "text_interpolation",
    "comment",
}

# Call expression node types
CALL_NODE: str = "function_call_expression"
ASSIGNMENT_NODE: str = "assignment_expression"
CALLEE_NAME_NODES: Set[str] = {"name", "qualified_name"}

# Include expression node type -> include kind
INCLUDE_TYPE_MAP: Dict[str, str] = {
    "include_expression": "Include",
    "include_once_expression": "Include Once",
    "require_expression": "Require",
    "require_once_expression": "Require Once",
}

# Function used to declare runtime constants
DEFINE_FUNCTION: str = "define"

# Class modifiers
FINAL_MODIFIER: str = "final_modifier"
ABSTRACT_MODIFIER: str = "abstract_modifier"
STATIC_MODIFIER: str = "static_modifier"
VISIBILITY_MODIFIER: str = "visibility_modifier"
DEFAULT_VISIBILITY: str = "public"

# Parameter node types
PARAMETER_NODES: Set[str] = {
    "simple_parameter",
    "variadic_parameter",
    "property_promotion_parameter",
}

# PHP file extensions
PHP_EXTENSIONS: Set[str] = {
    ".php",
}
