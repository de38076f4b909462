"""
Data models for reflected PHP declarations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from reflection.docblock import DocBlock


class HookKind(str, Enum):
    """Declared kind of a hook call site."""

    FILTER = "filter"
    FILTER_REFERENCE = "filter_reference"
    FILTER_DEPRECATED = "filter_deprecated"
    ACTION = "action"
    ACTION_REFERENCE = "action_reference"
    ACTION_DEPRECATED = "action_deprecated"


@dataclass(frozen=True)
class Argument:
    """A declared function or method parameter.

    Attributes:
        name: Parameter name without the leading ``$``
        default: Pretty-printed default value, or None
        type: Declared type hint with class names fully qualified; empty
            when the parameter is untyped
    """

    name: str
    default: Optional[str] = None
    type: str = ""


@dataclass(frozen=True)
class IncludeDecl:
    name: str
    line: int
    type: str


@dataclass(frozen=True)
class ConstantDecl:
    name: str
    fqsen: str
    line: int
    value: str


@dataclass(frozen=True)
class HookEvent:
    """A detected hook call site.

    Attributes:
        name: Canonical hook name (see ``hooks.names.normalize_hook_name``)
        line: 1-indexed first line of the calling statement
        end_line: Same as ``line``; a call site is located by its first line
        kind: One of the six ``HookKind`` values
        arguments: Remaining call arguments re-serialised as source text
        docblock: Doc comment attached to the statement, if any
    """

    name: str
    line: int
    end_line: int
    kind: HookKind
    arguments: Tuple[str, ...] = ()
    docblock: Optional[DocBlock] = None


@dataclass(frozen=True)
class PropertyDecl:
    name: str
    line: int
    end_line: int
    default: Optional[str] = None
    static: bool = False
    visibility: str = "public"
    docblock: Optional[DocBlock] = None


@dataclass(frozen=True)
class MethodDecl:
    """A class method. ``fqsen`` has the form ``\\Ns\\Class::name()``."""

    name: str
    fqsen: str
    line: int
    end_line: int
    final: bool = False
    abstract: bool = False
    static: bool = False
    visibility: str = "public"
    arguments: Tuple[Argument, ...] = ()
    docblock: Optional[DocBlock] = None


@dataclass(frozen=True)
class FunctionDecl:
    """A global function. ``fqsen`` has the form ``\\Ns\\name()``."""

    name: str
    fqsen: str
    line: int
    end_line: int
    arguments: Tuple[Argument, ...] = ()
    docblock: Optional[DocBlock] = None


@dataclass(frozen=True)
class ClassDecl:
    """A class declaration.

    Attributes:
        name: Short class name
        fqsen: Fully qualified name, e.g. ``\\Ns\\Name``
        parent: Fully qualified parent class name, or None
        interfaces: Fully qualified names of implemented interfaces
    """

    name: str
    fqsen: str
    line: int
    end_line: int
    final: bool = False
    abstract: bool = False
    parent: Optional[str] = None
    interfaces: Tuple[str, ...] = ()
    properties: Tuple[PropertyDecl, ...] = ()
    methods: Tuple[MethodDecl, ...] = ()
    docblock: Optional[DocBlock] = None


@dataclass(frozen=True)
class SourceFile:
    """Everything reflected from one PHP file.

    ``hooks`` is None when the file contains no hook call sites; it is never
    an empty tuple.
    """

    path: str
    docblock: Optional[DocBlock] = None
    includes: Tuple[IncludeDecl, ...] = ()
    constants: Tuple[ConstantDecl, ...] = ()
    hooks: Optional[Tuple[HookEvent, ...]] = None
    functions: Tuple[FunctionDecl, ...] = ()
    classes: Tuple[ClassDecl, ...] = ()
    parse_error_count: int = 0


@dataclass
class Project:
    """A parsed set of files."""

    name: str
    files: List[SourceFile] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
