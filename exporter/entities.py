"""
Entity export.

Walks a reflected ``Project`` and assembles one nested, JSON-serialisable
record per file: its docblock, includes, constants, hooks, functions and
classes.
"""

import logging
import os
from typing import Any, Collection, Dict, Iterable, List, Sequence

from exporter.docblocks import export_docblock
from hooks.detector import HookStrategy
from reflection.config import PHP_EXTENSIONS
from reflection.models import (
    Argument,
    ClassDecl,
    FunctionDecl,
    HookEvent,
    MethodDecl,
    Project,
    PropertyDecl,
    SourceFile,
)
from reflection.project import create_project
from reflection.types import NAMESPACE_SEPARATOR

logger = logging.getLogger(__name__)

GLOBAL_NAMESPACE = "global"


class ExportStats:
    """Statistics for an export operation."""

    def __init__(self):
        self.files_processed = 0
        self.files_failed = 0
        self.parse_errors = 0
        self.hooks = 0
        self.functions = 0
        self.classes = 0
        self.methods = 0

    @classmethod
    def from_project(cls, project: Project) -> "ExportStats":
        stats = cls()
        stats.files_processed = len(project.files)
        stats.files_failed = len(project.failed)
        for source_file in project.files:
            stats.parse_errors += source_file.parse_error_count
            stats.hooks += len(source_file.hooks or ())
            stats.functions += len(source_file.functions)
            stats.classes += len(source_file.classes)
            stats.methods += sum(len(c.methods) for c in source_file.classes)
        return stats

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "parse_errors": self.parse_errors,
            "hooks": self.hooks,
            "functions": self.functions,
            "classes": self.classes,
            "methods": self.methods,
        }

    def __str__(self) -> str:
        return (
            f"ExportStats(processed={self.files_processed}, failed={self.files_failed}, "
            f"parse_errors={self.parse_errors}, hooks={self.hooks}, "
            f"functions={self.functions}, classes={self.classes}, methods={self.methods})"
        )


def get_namespace(fqsen: str) -> str:
    """Extract the namespace from a fully qualified name.

    Example:
        >>> get_namespace("\\\\Foo\\\\Bar\\\\Baz")
        'Foo\\\\Bar'
    """
    parts = fqsen.lstrip(NAMESPACE_SEPARATOR).split(NAMESPACE_SEPARATOR)
    parts.pop()
    return NAMESPACE_SEPARATOR.join(parts)


def relative_path(path: str, root: str) -> str:
    """Strip the project root directory from ``path``.

    The prefix only counts on a path component boundary, so ``/p/wp`` is not
    stripped from ``/p/wp-content/x.php``.
    """
    prefix = root.rstrip(os.sep) + os.sep
    if path.startswith(prefix):
        return path[len(prefix):].lstrip(os.sep)
    return os.path.relpath(path, root)


def export_arguments(arguments: Iterable[Argument]) -> List[Dict[str, Any]]:
    return [
        {
            "name": f"${argument.name}",
            "default": argument.default,
            "type": argument.type,
        }
        for argument in arguments
    ]


def export_properties(properties: Iterable[PropertyDecl]) -> List[Dict[str, Any]]:
    return [
        {
            "name": f"${prop.name}",
            "line": prop.line,
            "end_line": prop.end_line,
            "default": prop.default,
            "static": prop.static,
            "visibility": prop.visibility,
            "doc": export_docblock(prop.docblock),
        }
        for prop in properties
    ]


def export_methods(methods: Iterable[MethodDecl]) -> List[Dict[str, Any]]:
    """Export class methods.

    A method without a namespace keeps an empty string, unlike functions and
    classes which fall back to ``"global"``.
    """
    output = []
    for method in methods:
        output.append(
            {
                "name": method.name,
                "namespace": get_namespace(method.fqsen),
                "line": method.line,
                "end_line": method.end_line,
                "final": method.final,
                "abstract": method.abstract,
                "static": method.static,
                "visibility": method.visibility,
                "arguments": export_arguments(method.arguments),
                "doc": export_docblock(method.docblock),
            }
        )
    return output


def export_hooks(hooks: Iterable[HookEvent]) -> List[Dict[str, Any]]:
    return [
        {
            "name": hook.name,
            "line": hook.line,
            "end_line": hook.end_line,
            "type": hook.kind.value,
            "arguments": list(hook.arguments),
            "doc": export_docblock(hook.docblock),
        }
        for hook in hooks
    ]


def export_function(function: FunctionDecl) -> Dict[str, Any]:
    return {
        "name": function.name,
        "namespace": get_namespace(function.fqsen) or GLOBAL_NAMESPACE,
        "line": function.line,
        "end_line": function.end_line,
        "arguments": export_arguments(function.arguments),
        "doc": export_docblock(function.docblock),
    }


def export_class(cls: ClassDecl) -> Dict[str, Any]:
    return {
        "name": cls.name,
        "namespace": get_namespace(cls.fqsen) or GLOBAL_NAMESPACE,
        "line": cls.line,
        "end_line": cls.end_line,
        "final": cls.final,
        "abstract": cls.abstract,
        "extends": cls.parent if cls.parent is not None else "",
        "implements": list(cls.interfaces),
        "properties": export_properties(cls.properties),
        "methods": export_methods(cls.methods),
        "doc": export_docblock(cls.docblock),
    }


def export_file(source_file: SourceFile, root: str) -> Dict[str, Any]:
    """Export one reflected file.

    Args:
        source_file: The reflected file.
        root: Project root; used only to compute the relative ``path``.

    Returns:
        The file record. The ``hooks`` key is present only when the file
        contains at least one hook call site.
    """
    out: Dict[str, Any] = {
        "file": export_docblock(source_file.docblock),
        "path": relative_path(source_file.path, root),
        "root": root,
        "includes": [
            {"name": include.name, "line": include.line, "type": include.type}
            for include in source_file.includes
        ],
        "constants": [
            {"name": constant.name, "line": constant.line, "value": constant.value}
            for constant in source_file.constants
        ],
    }

    if source_file.hooks is not None:
        out["hooks"] = export_hooks(source_file.hooks)

    out["functions"] = [export_function(function) for function in source_file.functions]
    out["classes"] = [export_class(cls) for cls in source_file.classes]
    return out


def export_project(project: Project, root: str) -> List[Dict[str, Any]]:
    """Export every file of a project, in project order."""
    return [export_file(source_file, root) for source_file in project.files]


def parse_files(
    files: Sequence[str],
    root: str,
    project_name: str = "phpextract",
    continue_on_error: bool = False,
    extensions: Collection[str] = PHP_EXTENSIONS,
) -> List[Dict[str, Any]]:
    """Reflect ``files`` with hook detection enabled and export the result.

    Args:
        files: Ordered PHP file paths.
        root: Project root used for relative paths.
        project_name: Name given to the reflected project.
        continue_on_error: Skip files that fail to reflect instead of raising.
        extensions: Accepted file extensions, with leading dot.

    Returns:
        One record per successfully reflected file.
    """
    project = create_project(
        project_name,
        files,
        strategies=[HookStrategy()],
        continue_on_error=continue_on_error,
        extensions=extensions,
    )
    output = export_project(project, root)
    logger.info(f"Export complete: {ExportStats.from_project(project)}")
    return output
