"""
AST traversal and declaration extraction logic.

This module walks a tree-sitter-php syntax tree and reflects the file's
includes, constants, functions and classes along with their doc comments.
Registered strategies are offered every expression statement the walk
reaches; they record their findings on the ``ExtractionContext`` that is
threaded through the traversal.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from tree_sitter import Node, Tree

from reflection.config import (
    ABSTRACT_MODIFIER,
    ASSIGNMENT_NODE,
    CALL_NODE,
    CALLEE_NAME_NODES,
    CLASS_NODE,
    COMMENT_NODE,
    CONST_NODE,
    DEFAULT_VISIBILITY,
    DEFINE_FUNCTION,
    DOCUMENTABLE_NODES,
    EXPRESSION_STATEMENT,
    FINAL_MODIFIER,
    FUNCTION_NODE,
    INCLUDE_TYPE_MAP,
    METHOD_NODE,
    NAMESPACE_NODE,
    NAMESPACE_USE_NODE,
    NON_STATEMENT_NODES,
    PARAMETER_NODES,
    PROPERTY_NODE,
    STATEMENT_CONTAINERS,
    STATIC_MODIFIER,
    VISIBILITY_MODIFIER,
)
from reflection.docblock import DocBlock, is_doc_comment, parse_docblock
from reflection.models import (
    Argument,
    ClassDecl,
    ConstantDecl,
    FunctionDecl,
    HookEvent,
    IncludeDecl,
    MethodDecl,
    PropertyDecl,
    SourceFile,
)
from reflection.parser import count_error_nodes
from reflection.printer import node_text, print_expr
from reflection.types import (
    NAMESPACE_SEPARATOR,
    TypeContext,
    qualify,
    resolve_class_name,
    resolve_type,
)

logger = logging.getLogger(__name__)

# Class-like declarations that are not exported but whose method bodies are
# still walked
_CLASS_LIKE_NODES = {"interface_declaration", "trait_declaration", "enum_declaration"}


@dataclass
class ExtractionContext:
    """Per-file state threaded through a single traversal.

    ``hooks`` stays None until the first hook is recorded, so a file without
    hooks is distinguishable from one whose hook list is merely empty.
    """

    file_path: str
    source_bytes: bytes
    type_context: TypeContext = field(default_factory=TypeContext)
    includes: List[IncludeDecl] = field(default_factory=list)
    constants: List[ConstantDecl] = field(default_factory=list)
    functions: List[FunctionDecl] = field(default_factory=list)
    classes: List[ClassDecl] = field(default_factory=list)
    hooks: Optional[List[HookEvent]] = None

    def add_hook(self, hook: HookEvent) -> None:
        if self.hooks is None:
            self.hooks = []
        self.hooks.append(hook)


class Strategy(Protocol):
    """Extension run against every expression statement."""

    def matches(self, node: Node, context: ExtractionContext) -> bool:
        ...

    def create(self, node: Node, context: ExtractionContext) -> None:
        ...


def _line(node: Node) -> int:
    return node.start_point.row + 1


def _end_line(node: Node) -> int:
    return node.end_point.row + 1


def _named(node: Node) -> List[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != COMMENT_NODE]


def _has_child(node: Node, child_type: str) -> bool:
    return any(child.type == child_type for child in node.children)


def get_doc_comment(node: Node) -> Optional[str]:
    """Find the doc comment attached to a statement or member.

    Walks backward over the comments directly preceding the node and returns
    the nearest ``/** */`` one.

    Args:
        node: The statement or member declaration node.

    Returns:
        Raw comment text, or None when the node is undocumented.
    """
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == COMMENT_NODE:
        text = node_text(sibling)
        if is_doc_comment(text):
            return text
        sibling = sibling.prev_sibling
    return None


def get_docblock(node: Node, context: ExtractionContext) -> Optional[DocBlock]:
    """Parse the doc comment attached to ``node``, if any."""
    comment = get_doc_comment(node)
    if comment is None:
        return None
    return parse_docblock(comment, context.type_context)


def find_file_docblock(root: Node) -> Optional[DocBlock]:
    """Find the file-level docblock.

    The first doc comment ahead of the first statement belongs to the file,
    unless that statement can carry a docblock of its own; in that case a
    second doc comment must follow for the first to count as the file's.

    Args:
        root: The ``program`` node.

    Returns:
        The file DocBlock, or None.
    """
    comments: List[str] = []
    first_statement = None
    for child in root.children:
        if child.type == COMMENT_NODE:
            text = node_text(child)
            if is_doc_comment(text):
                comments.append(text)
            continue
        if not child.is_named or child.type in NON_STATEMENT_NODES:
            continue
        first_statement = child
        break

    if not comments or first_statement is None:
        return None
    if first_statement.type not in DOCUMENTABLE_NODES or len(comments) >= 2:
        return parse_docblock(comments[0])
    return None


def unwrap_assignment(expression: Node) -> Node:
    """Return the right-hand side of an assignment, or the expression itself.

    Only a single assignment layer is unwrapped.
    """
    if expression.type == ASSIGNMENT_NODE:
        right = expression.child_by_field_name("right")
        if right is not None:
            return right
    return expression


def statement_expression(statement: Node) -> Optional[Node]:
    """Return the expression of an ``expression_statement``."""
    if statement.type != EXPRESSION_STATEMENT:
        return None
    children = _named(statement)
    return children[0] if children else None


def callee_name(call: Node) -> Optional[str]:
    """Return the static name a function call targets.

    Args:
        call: A ``function_call_expression`` node.

    Returns:
        The callee name without a leading namespace separator, or None when
        the callee is dynamic (a variable, a closure, a member access...).
    """
    function = call.child_by_field_name("function")
    if function is None or function.type not in CALLEE_NAME_NODES:
        return None
    return node_text(function).lstrip(NAMESPACE_SEPARATOR)


def positional_arguments(call: Node) -> List[Node]:
    """Return the value nodes of a call's positional arguments, in order."""
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return []
    values = []
    for argument in arguments.named_children:
        if argument.type != "argument":
            continue
        if argument.child_by_field_name("name") is not None:
            continue
        children = _named(argument)
        if children:
            values.append(children[-1])
    return values


def _string_literal_value(node: Node) -> Optional[str]:
    if node.type not in ("string", "encapsed_string"):
        return None
    text = node_text(node)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    return None


def extract_arguments(parameters: Optional[Node], context: ExtractionContext) -> List[Argument]:
    """Extract declared parameters from a ``formal_parameters`` node.

    Args:
        parameters: The formal_parameters node, or None.
        context: Extraction context providing the namespace for type names.

    Returns:
        Arguments in declaration order.
    """
    if parameters is None:
        return []

    arguments = []
    for param in parameters.named_children:
        if param.type not in PARAMETER_NODES:
            continue
        name_node = param.child_by_field_name("name")
        if name_node is None:
            logger.debug(f"Parameter without name at line {_line(param)}")
            continue
        name = node_text(name_node).lstrip("&").lstrip("$")

        type_node = param.child_by_field_name("type")
        type_text = ""
        if type_node is not None:
            type_text = "|".join(resolve_type(node_text(type_node), context.type_context))

        arguments.append(
            Argument(
                name=name,
                default=_default_value(param),
                type=type_text,
            )
        )
    return arguments


def _default_value(node: Node) -> Optional[str]:
    value = node.child_by_field_name("default_value")
    if value is not None and value.is_named:
        return print_expr(value)
    for child in node.named_children:
        if child.type == "property_initializer":
            initializer = _named(child)
            if initializer:
                return print_expr(initializer[0])
    return None


def _visibility(node: Node) -> str:
    for child in node.children:
        if child.type == VISIBILITY_MODIFIER:
            return node_text(child).lower()
    return DEFAULT_VISIBILITY


def extract_function(node: Node, context: ExtractionContext) -> Optional[FunctionDecl]:
    """Extract a function definition.

    Args:
        node: A function_definition node.
        context: Extraction context.

    Returns:
        The FunctionDecl, or None if the function has no name.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        logger.debug(f"Function at line {_line(node)} has no name")
        return None

    name = node_text(name_node)
    function = FunctionDecl(
        name=name,
        fqsen=qualify(name, context.type_context) + "()",
        line=_line(node),
        end_line=_end_line(node),
        arguments=tuple(extract_arguments(node.child_by_field_name("parameters"), context)),
        docblock=get_docblock(node, context),
    )
    logger.debug(f"Extracted function {function.fqsen} at {context.file_path}:{function.line}")
    return function


def extract_method(node: Node, class_fqsen: str, context: ExtractionContext) -> Optional[MethodDecl]:
    """Extract a method declaration belonging to ``class_fqsen``."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None

    name = node_text(name_node)
    return MethodDecl(
        name=name,
        fqsen=f"{class_fqsen}::{name}()",
        line=_line(node),
        end_line=_end_line(node),
        final=_has_child(node, FINAL_MODIFIER),
        abstract=_has_child(node, ABSTRACT_MODIFIER),
        static=_has_child(node, STATIC_MODIFIER),
        visibility=_visibility(node),
        arguments=tuple(extract_arguments(node.child_by_field_name("parameters"), context)),
        docblock=get_docblock(node, context),
    )


def extract_properties(node: Node, context: ExtractionContext) -> List[PropertyDecl]:
    """Extract every property declared by a ``property_declaration``.

    ``public $a, $b = 1;`` yields two properties sharing one docblock.
    """
    docblock = get_docblock(node, context)
    static = _has_child(node, STATIC_MODIFIER)
    visibility = _visibility(node)

    properties = []
    for element in node.named_children:
        if element.type != "property_element":
            continue
        name_node = element.child_by_field_name("name")
        if name_node is None:
            candidates = [c for c in element.named_children if c.type == "variable_name"]
            if not candidates:
                continue
            name_node = candidates[0]
        properties.append(
            PropertyDecl(
                name=node_text(name_node).lstrip("$"),
                line=_line(element),
                end_line=_end_line(element),
                default=_default_value(element),
                static=static,
                visibility=visibility,
                docblock=docblock,
            )
        )
    return properties


def extract_class(
    node: Node,
    context: ExtractionContext,
    strategies: Sequence[Strategy],
) -> Optional[ClassDecl]:
    """Extract a class declaration and walk its method bodies.

    Args:
        node: A class_declaration node.
        context: Extraction context.
        strategies: Strategies offered the statements inside method bodies.

    Returns:
        The ClassDecl, or None for a nameless declaration.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        logger.debug(f"Class at line {_line(node)} has no name")
        return None

    name = node_text(name_node)
    fqsen = qualify(name, context.type_context)

    parent = None
    interfaces: List[str] = []
    for child in node.named_children:
        names = [c for c in child.named_children if c.type in CALLEE_NAME_NODES]
        if child.type == "base_clause" and names:
            parent = resolve_class_name(node_text(names[0]), context.type_context)
        elif child.type == "class_interface_clause":
            interfaces.extend(
                resolve_class_name(node_text(n), context.type_context) for n in names
            )

    properties: List[PropertyDecl] = []
    methods: List[MethodDecl] = []
    body = node.child_by_field_name("body")
    if body is not None:
        for member in body.named_children:
            if member.type == PROPERTY_NODE:
                properties.extend(extract_properties(member, context))
            elif member.type == METHOD_NODE:
                method = extract_method(member, fqsen, context)
                if method is not None:
                    methods.append(method)
                _walk_body(member, context, strategies)

    cls = ClassDecl(
        name=name,
        fqsen=fqsen,
        line=_line(node),
        end_line=_end_line(node),
        final=_has_child(node, FINAL_MODIFIER),
        abstract=_has_child(node, ABSTRACT_MODIFIER),
        parent=parent,
        interfaces=tuple(interfaces),
        properties=tuple(properties),
        methods=tuple(methods),
        docblock=get_docblock(node, context),
    )
    logger.debug(
        f"Extracted class {fqsen} ({len(methods)} methods, {len(properties)} properties) "
        f"at {context.file_path}:{cls.line}"
    )
    return cls


def extract_constants(node: Node, context: ExtractionContext) -> List[ConstantDecl]:
    """Extract ``const NAME = value;`` declarations."""
    constants = []
    for element in node.named_children:
        if element.type != "const_element":
            continue
        children = _named(element)
        if not children:
            continue
        name = node_text(children[0])
        value = print_expr(children[-1]) if len(children) > 1 else ""
        constants.append(
            ConstantDecl(
                name=name,
                fqsen=qualify(name, context.type_context),
                line=_line(element),
                value=value,
            )
        )
    return constants


def extract_define(statement: Node, call: Node) -> Optional[ConstantDecl]:
    """Extract a constant declared through ``define( 'NAME', value )``."""
    values = positional_arguments(call)
    if not values:
        return None

    name = _string_literal_value(values[0])
    if name is None:
        name = print_expr(values[0])
    value = print_expr(values[1]) if len(values) > 1 else ""
    return ConstantDecl(
        name=name,
        fqsen=NAMESPACE_SEPARATOR + name.lstrip(NAMESPACE_SEPARATOR),
        line=_line(statement),
        value=value,
    )


def extract_include(statement: Node, expression: Node) -> Optional[IncludeDecl]:
    """Extract an include/require expression statement."""
    include_type = INCLUDE_TYPE_MAP.get(expression.type)
    if include_type is None:
        return None
    operands = _named(expression)
    name = print_expr(operands[0]) if operands else ""
    return IncludeDecl(name=name, line=_line(statement), type=include_type)


def _register_use(node: Node, context: ExtractionContext) -> None:
    """Record ``use`` imports of class-like names on the type context."""
    if any(not child.is_named and child.type in ("function", "const") for child in node.children):
        return

    prefix = ""
    clauses: List[Node] = []
    for child in node.named_children:
        if child.type == "namespace_name":
            prefix = node_text(child).strip(NAMESPACE_SEPARATOR)
        elif child.type == "namespace_use_clause":
            clauses.append(child)
        elif child.type == "namespace_use_group":
            clauses.extend(c for c in child.named_children if c.type in ("namespace_use_clause", "namespace_use_group_clause"))

    for clause in clauses:
        names = [c for c in clause.named_children if c.type in ("name", "qualified_name", "namespace_name")]
        if not names:
            continue
        target = node_text(names[0]).strip(NAMESPACE_SEPARATOR)
        if prefix:
            target = f"{prefix}{NAMESPACE_SEPARATOR}{target}"

        alias_node = clause.child_by_field_name("alias")
        if alias_node is None:
            for child in clause.named_children:
                if child.type == "namespace_aliasing_clause" and child.named_children:
                    alias_node = child.named_children[-1]
        alias = node_text(alias_node) if alias_node is not None else target.rsplit(NAMESPACE_SEPARATOR, 1)[-1]
        context.type_context = context.type_context.with_alias(alias, target)


def _handle_expression_statement(
    statement: Node,
    context: ExtractionContext,
    strategies: Sequence[Strategy],
) -> None:
    for strategy in strategies:
        if strategy.matches(statement, context):
            strategy.create(statement, context)

    expression = statement_expression(statement)
    if expression is None:
        return
    expression = unwrap_assignment(expression)

    if expression.type in INCLUDE_TYPE_MAP:
        include = extract_include(statement, expression)
        if include is not None:
            context.includes.append(include)
    elif expression.type == CALL_NODE and callee_name(expression) == DEFINE_FUNCTION:
        constant = extract_define(statement, expression)
        if constant is not None:
            context.constants.append(constant)


def _walk_body(node: Node, context: ExtractionContext, strategies: Sequence[Strategy]) -> None:
    body = node.child_by_field_name("body")
    if body is not None:
        walk_statements(body, context, strategies)


def walk_statements(node: Node, context: ExtractionContext, strategies: Sequence[Strategy]) -> None:
    """Recursively walk the statements below ``node``.

    Namespaces, blocks, control structures and function/method bodies are
    descended into; expressions never are.

    Args:
        node: A statement container (program, compound_statement, ...).
        context: Extraction context receiving everything found.
        strategies: Strategies offered each expression statement.
    """
    for child in node.named_children:
        child_type = child.type

        if child_type == NAMESPACE_NODE:
            name_node = child.child_by_field_name("name")
            namespace = node_text(name_node) if name_node is not None else ""
            body = child.child_by_field_name("body")
            if body is None:
                # Unbraced: applies to the following sibling statements
                context.type_context = context.type_context.with_namespace(namespace)
            else:
                context.type_context = context.type_context.with_namespace(namespace)
                walk_statements(body, context, strategies)
                context.type_context = TypeContext()

        elif child_type == NAMESPACE_USE_NODE:
            _register_use(child, context)

        elif child_type == FUNCTION_NODE:
            function = extract_function(child, context)
            if function is not None:
                context.functions.append(function)
            _walk_body(child, context, strategies)

        elif child_type == CLASS_NODE:
            cls = extract_class(child, context, strategies)
            if cls is not None:
                context.classes.append(cls)

        elif child_type in _CLASS_LIKE_NODES:
            body = child.child_by_field_name("body")
            if body is not None:
                for member in body.named_children:
                    if member.type == METHOD_NODE:
                        _walk_body(member, context, strategies)

        elif child_type == CONST_NODE:
            context.constants.extend(extract_constants(child, context))

        elif child_type == EXPRESSION_STATEMENT:
            _handle_expression_statement(child, context, strategies)

        elif child_type in STATEMENT_CONTAINERS:
            walk_statements(child, context, strategies)


def extract_source_file(
    tree: Tree,
    source_bytes: bytes,
    file_path: str,
    strategies: Sequence[Strategy] = (),
) -> SourceFile:
    """Reflect a parsed PHP file.

    This is the main entry point for declaration extraction.

    Args:
        tree: The parsed AST tree.
        source_bytes: The raw source file bytes.
        file_path: Path recorded on the SourceFile.
        strategies: Extensions run against every expression statement.

    Returns:
        The SourceFile, with ``hooks`` populated from the extraction context.
    """
    logger.info(f"Extracting declarations from {file_path}")
    context = ExtractionContext(file_path=file_path, source_bytes=source_bytes)
    walk_statements(tree.root_node, context, strategies)

    source_file = SourceFile(
        path=file_path,
        docblock=find_file_docblock(tree.root_node),
        includes=tuple(context.includes),
        constants=tuple(context.constants),
        hooks=tuple(context.hooks) if context.hooks is not None else None,
        functions=tuple(context.functions),
        classes=tuple(context.classes),
        parse_error_count=count_error_nodes(tree),
    )
    logger.info(
        "Extracted %d functions, %d classes, %d hooks from %s",
        len(source_file.functions),
        len(source_file.classes),
        len(source_file.hooks or ()),
        file_path,
    )
    return source_file
