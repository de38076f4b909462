"""
Layer 1: Reflection Engine

Tree-sitter-based PHP source code parser and declaration reflector.
Extracts includes, constants, functions, classes and their phpDoc comments,
running registered strategies over every statement.
"""

from reflection.docblock import DocBlock, Tag, TagKind, TagType, parse_docblock
from reflection.errors import (
    DirectoryTraversalError,
    ExtractionError,
    InvalidInputError,
    MalformedHookError,
)
from reflection.models import (
    Argument,
    ClassDecl,
    ConstantDecl,
    FunctionDecl,
    HookEvent,
    HookKind,
    IncludeDecl,
    MethodDecl,
    Project,
    PropertyDecl,
    SourceFile,
)
from reflection.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from reflection.traversal import ExtractionContext, Strategy, extract_source_file
from reflection.discovery import get_source_files
from reflection.project import create_project, reflect_file

__all__ = [
    # Data models
    "Argument",
    "ClassDecl",
    "ConstantDecl",
    "FunctionDecl",
    "HookEvent",
    "HookKind",
    "IncludeDecl",
    "MethodDecl",
    "Project",
    "PropertyDecl",
    "SourceFile",
    "DocBlock",
    "Tag",
    "TagKind",
    "TagType",
    # Errors
    "ExtractionError",
    "InvalidInputError",
    "DirectoryTraversalError",
    "MalformedHookError",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    "parse_docblock",
    # Mid-level extraction
    "ExtractionContext",
    "Strategy",
    "extract_source_file",
    # High-level orchestration
    "get_source_files",
    "reflect_file",
    "create_project",
]
