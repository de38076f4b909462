"""
High-level orchestrator for project reflection.

Parses each file once and runs the registered strategies during the
traversal, producing a ``Project`` of ``SourceFile`` models.
"""

import logging
import os
from typing import Collection, Iterable, Sequence

from core.structured_logging import file_scope
from reflection.config import PHP_EXTENSIONS
from reflection.models import Project, SourceFile
from reflection.parser import parse_file
from reflection.traversal import Strategy, extract_source_file

logger = logging.getLogger(__name__)


def reflect_file(
    file_path: str,
    strategies: Sequence[Strategy] = (),
    extensions: Collection[str] = PHP_EXTENSIONS,
) -> SourceFile:
    """Parse and reflect a single PHP source file.

    Args:
        file_path: Path to the PHP file.
        strategies: Extensions run against every expression statement.
        extensions: Accepted file extensions, with leading dot.

    Returns:
        The reflected SourceFile.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not carry an accepted extension.
    """
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    ext = os.path.splitext(file_path)[1].lower()
    if ext not in {e.lower() for e in extensions}:
        raise ValueError(
            f"File {file_path} is not a PHP source file. "
            f"Expected one of: {sorted(extensions)}"
        )

    tree, source_bytes = parse_file(file_path)
    source_file = extract_source_file(tree, source_bytes, file_path, strategies)

    if source_file.parse_error_count:
        logger.warning(
            "File %s contains syntax errors (%d error nodes)",
            file_path,
            source_file.parse_error_count,
        )
    return source_file


def create_project(
    name: str,
    files: Iterable[str],
    strategies: Sequence[Strategy] = (),
    continue_on_error: bool = False,
    extensions: Collection[str] = PHP_EXTENSIONS,
) -> Project:
    """Reflect every file of a project.

    Args:
        name: Project name.
        files: Ordered file paths; the order is kept in the result.
        strategies: Extensions run against every expression statement.
        continue_on_error: If True, log and record failing files instead of
            raising on the first failure.
        extensions: Accepted file extensions, with leading dot.

    Returns:
        The Project. Failing file paths are listed in ``Project.failed``
        when ``continue_on_error`` is set.
    """
    project = Project(name=name)

    for file_path in files:
        try:
            with file_scope(file_path):
                project.files.append(reflect_file(file_path, strategies, extensions))
        except Exception as e:
            logger.error(f"Error reflecting {file_path}: {e}", exc_info=not continue_on_error)
            if not continue_on_error:
                raise
            project.failed.append(file_path)

    logger.info(
        "Reflected project %s: %d files, %d failed",
        name,
        len(project.files),
        len(project.failed),
    )
    return project
