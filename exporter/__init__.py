"""
Layer 3: Export

Turns reflected projects into the nested JSON-ready records consumed by
documentation renderers.
"""

from exporter.docblocks import (
    collapse_newlines,
    export_docblock,
    export_tag,
    export_types,
    fix_newlines,
)
from exporter.entities import (
    ExportStats,
    export_file,
    export_project,
    get_namespace,
    parse_files,
)

__all__ = [
    "collapse_newlines",
    "export_docblock",
    "export_tag",
    "export_types",
    "fix_newlines",
    "ExportStats",
    "export_file",
    "export_project",
    "get_namespace",
    "parse_files",
]
