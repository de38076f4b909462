"""
Doc comment parsing.

Turns a raw ``/** ... */`` comment into a ``DocBlock``: a summary, an
extended description and an ordered list of tags. Tag kinds expose a fixed
subset of fields, listed in ``TAG_CAPABILITIES``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from reflection.config import DOC_COMMENT_PREFIX
from reflection.types import TypeContext, resolve_class_name, resolve_type

logger = logging.getLogger(__name__)

_LINE_PREFIX_RE = re.compile(r"^[ \t]*\*?[ \t]?")
_TAG_LINE_RE = re.compile(r"^[ \t]*@[A-Za-z\\]")
_TAG_SPLIT_RE = re.compile(r"\n(?=@)")
_TAG_RE = re.compile(r"^@([\w\-\\:]+)(?:\([^)]*\))?(?:[ \t\n]+(.*))?\Z", re.S)
_VERSION_RE = re.compile(r"^(\d\S*|[^\s:]+:\s*\$[^$]+\$)(?:\s+(.*))?\Z", re.S)
_WHITESPACE_SPLIT_RE = re.compile(r"\s+")


class TagKind(str, Enum):
    """Tag kinds with a dedicated body grammar."""

    PARAM = "param"
    RETURN = "return"
    VAR = "var"
    THROWS = "throws"
    PROPERTY = "property"
    SINCE = "since"
    DEPRECATED = "deprecated"
    VERSION = "version"
    SEE = "see"
    USES = "uses"
    COVERS = "covers"
    LINK = "link"
    GENERIC = "generic"


class Capability(str, Enum):
    """Optional tag fields."""

    DESCRIPTION = "description"
    TYPE = "type"
    LINK = "link"
    VARIABLE = "variable"
    REFERENCE = "reference"
    VERSION = "version"


_D = Capability.DESCRIPTION

TAG_CAPABILITIES: Dict[TagKind, FrozenSet[Capability]] = {
    TagKind.PARAM: frozenset({_D, Capability.TYPE, Capability.VARIABLE}),
    TagKind.RETURN: frozenset({_D, Capability.TYPE}),
    TagKind.VAR: frozenset({_D, Capability.TYPE, Capability.VARIABLE}),
    TagKind.THROWS: frozenset({_D, Capability.TYPE}),
    TagKind.PROPERTY: frozenset({_D, Capability.TYPE, Capability.VARIABLE}),
    TagKind.SINCE: frozenset({_D, Capability.VERSION}),
    TagKind.DEPRECATED: frozenset({_D, Capability.VERSION}),
    TagKind.VERSION: frozenset({_D, Capability.VERSION}),
    TagKind.SEE: frozenset({_D, Capability.REFERENCE}),
    TagKind.USES: frozenset({_D, Capability.REFERENCE}),
    TagKind.COVERS: frozenset({_D, Capability.REFERENCE}),
    TagKind.LINK: frozenset({_D, Capability.LINK}),
    TagKind.GENERIC: frozenset({_D}),
}

# Tag name -> kind; anything not listed is generic
TAG_KINDS: Dict[str, TagKind] = {
    "param": TagKind.PARAM,
    "return": TagKind.RETURN,
    "var": TagKind.VAR,
    "throws": TagKind.THROWS,
    "property": TagKind.PROPERTY,
    "property-read": TagKind.PROPERTY,
    "property-write": TagKind.PROPERTY,
    "since": TagKind.SINCE,
    "deprecated": TagKind.DEPRECATED,
    "version": TagKind.VERSION,
    "see": TagKind.SEE,
    "uses": TagKind.USES,
    "covers": TagKind.COVERS,
    "link": TagKind.LINK,
}


@dataclass(frozen=True)
class TagType:
    """A tag's declared type; ``aggregate`` marks a union of several types."""

    names: Tuple[str, ...]
    aggregate: bool = False

    def __str__(self) -> str:
        return "|".join(self.names)


@dataclass(frozen=True)
class Tag:
    """A single ``@name body`` annotation.

    Only the fields listed in ``TAG_CAPABILITIES[kind]`` are meaningful;
    the rest keep their defaults.
    """

    name: str
    kind: TagKind = TagKind.GENERIC
    description: str = ""
    type: Optional[TagType] = None
    variable: str = ""
    reference: str = ""
    link: str = ""
    version: str = ""

    @property
    def capabilities(self) -> FrozenSet[Capability]:
        return TAG_CAPABILITIES[self.kind]


@dataclass(frozen=True)
class DocBlock:
    """Parsed documentation comment."""

    summary: str = ""
    description: str = ""
    tags: Tuple[Tag, ...] = field(default_factory=tuple)


def is_doc_comment(comment_text: str) -> bool:
    """Check if a comment is a ``/** */`` documentation comment.

    Args:
        comment_text: The raw text of the comment.

    Returns:
        True for ``/**`` comments, False for ``/**/`` and anything else.
    """
    stripped = comment_text.strip()
    return stripped.startswith(DOC_COMMENT_PREFIX) and not stripped.startswith("/**/")


def strip_doc_comment(comment_text: str) -> str:
    """Strip comment delimiters and leading asterisks.

    One space after the asterisk is removed; further indentation is kept so
    nested ``@type`` lines stay inside their parent tag.
    """
    text = comment_text.replace("\r\n", "\n").replace("\r", "\n").strip()
    if text.startswith(DOC_COMMENT_PREFIX):
        text = text[len(DOC_COMMENT_PREFIX):]
    if text.endswith("*/"):
        text = text[:-2]

    lines = [_LINE_PREFIX_RE.sub("", line, count=1).rstrip() for line in text.split("\n")]
    return "\n".join(lines).strip()


def _split_summary(lines: List[str]) -> Tuple[str, str]:
    """Split the text block into summary and description.

    The summary ends at a line ending in a period or at the first blank line.
    """
    while lines and not lines[0].strip():
        lines = lines[1:]

    summary: List[str] = []
    index = 0
    for index, line in enumerate(lines):
        if not line.strip():
            break
        summary.append(line)
        if line.endswith("."):
            index += 1
            break
    else:
        index = len(lines)

    description = "\n".join(lines[index:]).strip()
    return "\n".join(summary).strip(), description


def _split_first(body: str) -> Tuple[str, str]:
    parts = _WHITESPACE_SPLIT_RE.split(body.strip(), maxsplit=1)
    first = parts[0] if parts else ""
    rest = parts[1] if len(parts) > 1 else ""
    return first, rest


def _take_type(body: str) -> Tuple[str, str]:
    """Read a type expression off the front of ``body``.

    Whitespace inside brackets (``array<int, string>``) belongs to the type.
    """
    body = body.strip()
    depth = 0
    for index, char in enumerate(body):
        if char in "<({[":
            depth += 1
        elif char in ">)}]" and depth > 0:
            depth -= 1
        elif char.isspace() and depth == 0:
            return body[:index], body[index:].strip()
    return body, ""


def _tag_type(text: str, context: TypeContext) -> Optional[TagType]:
    if not text:
        return None
    names = resolve_type(text, context)
    return TagType(names=tuple(names), aggregate=len(names) > 1)


def _resolve_reference(token: str, context: TypeContext) -> str:
    if "://" in token or token.startswith(("$", "#")):
        return token
    if "::" in token:
        scope, member = token.split("::", 1)
        return f"{resolve_class_name(scope, context)}::{member}"
    if token.endswith("()"):
        return resolve_class_name(token[:-2], context) + "()"
    return resolve_class_name(token, context)


def _parse_variable_tag(name: str, kind: TagKind, body: str, context: TypeContext) -> Tag:
    tag_type = None
    rest = body.strip()
    if rest and not rest.startswith(("$", "...", "&")):
        type_text, rest = _take_type(rest)
        tag_type = _tag_type(type_text, context)

    token, remainder = _split_first(rest)
    variable_token = token.lstrip("&")
    if variable_token.startswith("..."):
        variable_token = variable_token[3:]
    if variable_token.startswith("$"):
        return Tag(
            name=name,
            kind=kind,
            description=remainder,
            type=tag_type,
            variable=variable_token[1:],
        )
    return Tag(name=name, kind=kind, description=rest, type=tag_type)


def _parse_tag(raw: str, context: TypeContext) -> Optional[Tag]:
    match = _TAG_RE.match(raw.strip())
    if not match:
        logger.debug("Skipping malformed tag line: %r", raw[:60])
        return None

    name = match.group(1)
    body = (match.group(2) or "").strip()
    kind = TAG_KINDS.get(name.lower(), TagKind.GENERIC)

    if kind in (TagKind.PARAM, TagKind.VAR, TagKind.PROPERTY):
        return _parse_variable_tag(name, kind, body, context)

    if kind in (TagKind.RETURN, TagKind.THROWS):
        type_text, description = _take_type(body)
        return Tag(name=name, kind=kind, description=description, type=_tag_type(type_text, context))

    if kind in (TagKind.SINCE, TagKind.DEPRECATED, TagKind.VERSION):
        version_match = _VERSION_RE.match(body)
        if version_match:
            return Tag(
                name=name,
                kind=kind,
                version=version_match.group(1),
                description=(version_match.group(2) or "").strip(),
            )
        return Tag(name=name, kind=kind, description=body)

    if kind in (TagKind.SEE, TagKind.USES, TagKind.COVERS):
        token, description = _split_first(body)
        return Tag(
            name=name,
            kind=kind,
            reference=_resolve_reference(token, context) if token else "",
            description=description,
        )

    if kind == TagKind.LINK:
        token, description = _split_first(body)
        return Tag(name=name, kind=kind, link=token, description=description)

    return Tag(name=name, kind=kind, description=body)


def parse_docblock(comment_text: str, context: Optional[TypeContext] = None) -> DocBlock:
    """Parse a raw doc comment into a ``DocBlock``.

    Args:
        comment_text: Raw comment including the ``/**`` and ``*/`` delimiters.
        context: Namespace context used to resolve type and reference names.

    Returns:
        The parsed DocBlock. An empty comment yields an empty DocBlock.

    Example:
        >>> block = parse_docblock("/** Fires the thing event. */")
        >>> block.summary
        'Fires the thing event.'
    """
    if context is None:
        context = TypeContext()

    lines = strip_doc_comment(comment_text).split("\n")

    tag_start = len(lines)
    for index, line in enumerate(lines):
        if _TAG_LINE_RE.match(line):
            tag_start = index
            break

    summary, description = _split_summary(lines[:tag_start])

    tags: List[Tag] = []
    tag_block = "\n".join(lines[tag_start:]).lstrip()
    if tag_block:
        for raw in _TAG_SPLIT_RE.split(tag_block):
            tag = _parse_tag(raw, context)
            if tag is not None:
                tags.append(tag)

    return DocBlock(summary=summary, description=description, tags=tuple(tags))
