"""
Tree-sitter entry points for PHP.

Wraps parser construction and the two ways source reaches it: raw bytes
already in memory, or a file read from disk.
"""

import logging
from typing import Tuple

import tree_sitter_php as tsphp
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

# ``language_php`` (rather than ``language_php_only``) accepts inline HTML
# around ``<?php`` tags, which WordPress templates rely on.
PHP_LANGUAGE = Language(tsphp.language_php())


def create_parser() -> Parser:
    """Return a new parser bound to the PHP grammar.

    Example:
        >>> create_parser().parse(b"<?php do_action( 'init' );").root_node.type
        'program'
    """
    logger.debug("Creating tree-sitter PHP parser")
    return Parser(PHP_LANGUAGE)


def parse_bytes(source: bytes) -> Tree:
    """Parse PHP source held in memory.

    Args:
        source: Source code, UTF-8 encoded.

    Returns:
        The syntax tree. Syntax errors do not raise; the tree then contains
        ERROR or missing nodes (see ``count_error_nodes``).

    Raises:
        TypeError: If ``source`` is a str or anything else but bytes.
    """
    if not isinstance(source, bytes):
        raise TypeError(f"PHP source must be bytes, not {type(source).__name__}")

    tree = create_parser().parse(source)
    logger.debug(f"Parsed {len(source)} bytes (errors: {tree.root_node.has_error})")
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Read and parse one PHP file.

    The raw bytes are returned next to the tree so callers can keep them on
    the extraction context.

    Raises:
        FileNotFoundError: If ``file_path`` does not exist.
        OSError: If the file exists but cannot be read.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except OSError as e:
        logger.error(f"Cannot read {file_path}: {e}")
        raise

    tree = parse_bytes(source_bytes)
    logger.debug(f"Parsed file: {file_path}")
    return tree, source_bytes


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree.

    Subtrees without errors are skipped, so a clean parse costs one check.
    """
    if not tree.root_node.has_error:
        return 0

    count = 0
    stack = [tree.root_node]
    while stack:
        node: Node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
        if node.has_error:
            stack.extend(node.children)
    return count
