"""
DocBlock export.

Converts parsed ``DocBlock`` objects into the canonical record consumed by
renderers: ``description``, ``long_description`` and ``tags``.
"""

import re
from typing import Any, Dict, List, Optional

from reflection.docblock import Capability, DocBlock, Tag, TagType

_NEWLINES_RE = re.compile(r"[\n\r]+")
_CODE_BLOCK_RE = re.compile(r"(?<=<pre><code>)(.+?)(?=</code></pre>)", re.S)
_PARAGRAPH_BREAK_RE = re.compile(r"(\n[ \t]*\n(?:[ \t]*\n)*)")

# Non-naturally occurring placeholder for newlines inside code blocks
_NEWLINE_PLACEHOLDER = "{{{{{}}}}}"


def collapse_newlines(text: str) -> str:
    """Replace every run of line breaks with a single space."""
    return _NEWLINES_RE.sub(" ", text)


def fix_newlines(text: str) -> str:
    """Fix newline handling in parsed description text.

    Doc comment lines are manually wrapped at a fixed width; those soft
    wraps are merged into single spaces. Blank-line paragraph breaks are
    kept, and newlines inside ``<pre><code>`` blocks are always intentional
    and left untouched.

    Args:
        text: Description text as parsed from the doc comment.

    Returns:
        The re-flowed text.

    Example:
        >>> fix_newlines("line one\\nline two")
        'line one line two'
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    placeholder = _NEWLINE_PLACEHOLDER
    while placeholder in text:
        placeholder = "{" + placeholder + "}"

    text = _CODE_BLOCK_RE.sub(lambda match: match.group(1).replace("\n", placeholder), text)

    # Odd indices hold the paragraph separators themselves
    parts = _PARAGRAPH_BREAK_RE.split(text)
    text = "".join(
        part if index % 2 else part.replace("\n", " ") for index, part in enumerate(parts)
    )

    return text.replace(placeholder, "\n")


def export_types(tag_type: Optional[TagType]) -> List[str]:
    """Flatten a tag type into a list of type names.

    A union keeps its members in declaration order; anything else yields
    exactly one element (an empty string when the tag declared no type).
    """
    if tag_type is None:
        return [""]
    if tag_type.aggregate:
        return list(tag_type.names)
    return [str(tag_type)]


def export_tag(tag: Tag) -> Dict[str, Any]:
    """Build the record for one tag from its kind's capabilities."""
    capabilities = tag.capabilities
    data: Dict[str, Any] = {"name": tag.name}

    if Capability.DESCRIPTION in capabilities:
        data["content"] = collapse_newlines(tag.description)
    if Capability.TYPE in capabilities:
        data["types"] = export_types(tag.type)
    if Capability.LINK in capabilities:
        data["link"] = tag.link
    if Capability.VARIABLE in capabilities:
        data["variable"] = f"${tag.variable}" if tag.variable else ""
    if Capability.REFERENCE in capabilities:
        data["refers"] = tag.reference
    if Capability.VERSION in capabilities:
        if tag.version:
            data["content"] = tag.version
        description = collapse_newlines(tag.description)
        if description:
            data["description"] = description

    return data


def export_docblock(docblock: Optional[DocBlock]) -> Dict[str, Any]:
    """Export a docblock, or an empty record when there is none.

    Args:
        docblock: Parsed docblock of an element, or None.

    Returns:
        Dict with ``description``, ``long_description`` and ``tags``.
    """
    if docblock is None:
        return {
            "description": "",
            "long_description": "",
            "tags": [],
        }

    return {
        "description": collapse_newlines(docblock.summary),
        "long_description": fix_newlines(docblock.description),
        "tags": [export_tag(tag) for tag in docblock.tags],
    }
