"""Source file enumeration."""

import logging
import os
from typing import Collection, Iterable, List

from reflection.config import PHP_EXTENSIONS
from reflection.errors import DirectoryTraversalError, InvalidInputError

logger = logging.getLogger(__name__)


def get_source_files(
    directory: str,
    extensions: Iterable[str] = PHP_EXTENSIONS,
    exclude_dirs: Collection[str] = (),
) -> List[str]:
    """Recursively collect all source files below ``directory``.

    Args:
        directory: Root directory to search.
        extensions: Recognised file extensions, with leading dot.
        exclude_dirs: Directory names that are not descended into.

    Returns:
        Sorted list of file paths.

    Raises:
        InvalidInputError: If ``directory`` is not a directory.
        DirectoryTraversalError: If a subdirectory cannot be recursed into.
    """
    if not os.path.isdir(directory):
        raise InvalidInputError(f"Directory [{directory}] does not exist.")

    wanted = {ext.lower() for ext in extensions}
    excluded = set(exclude_dirs)

    def _on_error(exc: OSError) -> None:
        raise DirectoryTraversalError(
            f"Directory [{directory}] contained a directory we can not recurse into: "
            f"{exc.filename}"
        ) from exc

    logger.info(f"Discovering source files in {directory}")

    files = []
    for root, dirs, names in os.walk(directory, onerror=_on_error):
        dirs[:] = [d for d in dirs if d not in excluded]
        for name in names:
            if os.path.splitext(name)[1].lower() in wanted:
                files.append(os.path.join(root, name))

    logger.info(f"Found {len(files)} source files")
    return sorted(files)
