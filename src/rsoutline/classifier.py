"""Classification of tree-sitter-rust item nodes into declarations.

``classify`` is total: every item node maps to exactly one declaration.
Kinds without a dedicated variant, and nodes whose shape is broken by
error recovery, become ``OtherDecl`` carrying a stable kind tag.
"""

from __future__ import annotations

import logging
from typing import Callable

from tree_sitter import Node

from rsoutline.declarations import (
    ConstDecl,
    Declaration,
    EnumDecl,
    Fields,
    FieldsShape,
    FunctionDecl,
    ImplBlock,
    ModuleDecl,
    NamedFields,
    OtherDecl,
    Parameter,
    Receiver,
    RecordDecl,
    StaticDecl,
    Syntax,
    TraitDecl,
    TypeAliasDecl,
    TypedParam,
    UnitFields,
    UnnamedFields,
    UseDecl,
    VariantInfo,
)
from rsoutline.errors import NestingTooDeepError

logger = logging.getLogger(__name__)

DEFAULT_MAX_NESTING = 64

# Item-level nodes that are not declarations of their own.
TRIVIA_TYPES = frozenset(
    {
        "attribute_item",
        "inner_attribute_item",
        "empty_statement",
        "line_comment",
        "block_comment",
    }
)

# Nodes kept whole when splitting a fragment into tokens.
ATOMIC_TOKEN_TYPES = frozenset({"lifetime", "string_literal", "raw_string_literal", "char_literal"})

KIND_TAGS: dict[str, str] = {
    "extern_crate_declaration": "ExternCrate",
    "foreign_mod_item": "ForeignMod",
    "macro_definition": "Macro",
    "macro_invocation": "Macro",
    "union_item": "Union",
    "function_signature_item": "FnSignature",
    "associated_type": "AssociatedType",
    "let_declaration": "Let",
    "ERROR": "Error",
}


class _MalformedNode(Exception):
    """A node lacks a field its kind always carries."""


# ============================================================================
# Node helpers
# ============================================================================


def node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text else ""


def node_tokens(node: Node) -> tuple[str, ...]:
    """Leaf token texts of ``node`` in source order, comments excluded."""
    tokens: list[str] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.child_count == 0 or current.type in ATOMIC_TOKEN_TYPES:
            text = node_text(current)
            if text:
                tokens.append(text)
            continue
        stack.extend(child for child in reversed(current.children) if not child.is_extra)
    return tuple(tokens)


def to_syntax(node: Node) -> Syntax:
    return Syntax(text=node_text(node), tokens=node_tokens(node))


def item_nodes(container: Node) -> list[Node]:
    """Declaration-bearing children of a source file or ``{ ... }`` body."""
    return [
        child
        for child in container.named_children
        if not child.is_extra and child.type not in TRIVIA_TYPES
    ]


def kind_tag(node: Node) -> str:
    """Stable tag naming the kind of an item node."""
    if node.type == "expression_statement" and node.named_children:
        return kind_tag(node.named_children[0])
    return KIND_TAGS.get(node.type, node.type)


def _field(node: Node, name: str) -> Node:
    child = node.child_by_field_name(name)
    if child is None or child.is_missing:
        raise _MalformedNode(f"{node.type} has no '{name}'")
    return child


def _name(node: Node) -> str:
    return node_text(_field(node, "name"))


def _generics(node: Node) -> Syntax | None:
    params = node.child_by_field_name("type_parameters")
    if params is None:
        return None
    if not [child for child in params.named_children if not child.is_extra]:
        return None
    return to_syntax(params)


def _optional_syntax(node: Node, name: str) -> Syntax | None:
    child = node.child_by_field_name(name)
    if child is None or child.is_missing:
        return None
    return to_syntax(child)


def _member_count(node: Node) -> int:
    body = node.child_by_field_name("body")
    return len(item_nodes(body)) if body is not None else 0


# ============================================================================
# Parameters and fields
# ============================================================================


def _parameter(node: Node) -> Parameter:
    pattern = _field(node, "pattern")
    if pattern.type == "self" or node_text(pattern) == "self":
        return Receiver()
    # Pattern text runs up to the ':' so a leading `mut` is kept.
    parts: list[str] = []
    for child in node.children:
        if child.type == ":":
            break
        if child.is_extra or child.type == "attribute_item":
            continue
        parts.append(node_text(child))
    return TypedParam(pattern=" ".join(parts), type=to_syntax(_field(node, "type")))


def _parameters(node: Node) -> tuple[Parameter, ...]:
    params: list[Parameter] = []
    for child in node.named_children:
        if child.is_extra or child.type in ("attribute_item", "variadic_parameter", "ERROR"):
            continue
        if child.type == "self_parameter":
            params.append(Receiver())
        elif child.type == "parameter":
            params.append(_parameter(child))
        else:
            # Anonymous parameter: a bare type.
            params.append(TypedParam(pattern="_", type=to_syntax(child)))
    return tuple(params)


def _fields(body: Node | None) -> Fields:
    if body is None:
        return UnitFields()
    if body.type == "field_declaration_list":
        return NamedFields(
            tuple(
                (_name(field), to_syntax(_field(field, "type")))
                for field in body.named_children
                if field.type == "field_declaration"
            )
        )
    if body.type == "ordered_field_declaration_list":
        return UnnamedFields(tuple(to_syntax(child) for child in body.children_by_field_name("type")))
    raise _MalformedNode(f"unexpected field list {body.type}")


def _variant(node: Node) -> VariantInfo:
    body = node.child_by_field_name("body")
    if body is None:
        shape = FieldsShape.UNIT
    elif body.type == "field_declaration_list":
        shape = FieldsShape.NAMED
    else:
        shape = FieldsShape.UNNAMED
    return VariantInfo(name=_name(node), shape=shape)


# ============================================================================
# Per-kind classifiers
# ============================================================================


def _classify_function(node: Node, nesting: int, max_nesting: int) -> Declaration:
    return FunctionDecl(
        name=_name(node),
        params=_parameters(_field(node, "parameters")),
        return_type=_optional_syntax(node, "return_type"),
        generics=_generics(node),
    )


def _classify_struct(node: Node, nesting: int, max_nesting: int) -> Declaration:
    return RecordDecl(
        name=_name(node),
        fields=_fields(node.child_by_field_name("body")),
        generics=_generics(node),
    )


def _classify_enum(node: Node, nesting: int, max_nesting: int) -> Declaration:
    body = _field(node, "body")
    variants = tuple(_variant(child) for child in body.named_children if child.type == "enum_variant")
    return EnumDecl(name=_name(node), variants=variants, generics=_generics(node))


def _classify_impl(node: Node, nesting: int, max_nesting: int) -> Declaration:
    return ImplBlock(
        target=to_syntax(_field(node, "type")),
        trait=_optional_syntax(node, "trait"),
        item_count=_member_count(node),
    )


class _ModuleFrame:
    """An inline module whose items are still being classified."""

    __slots__ = ("name", "nesting", "pending", "items")

    def __init__(self, node: Node, body: Node, nesting: int, max_nesting: int) -> None:
        self.name = _name(node)
        if nesting + 1 > max_nesting:
            raise NestingTooDeepError(
                f"module '{self.name}' at line {node.start_point[0] + 1} nests deeper than {max_nesting} levels"
            )
        self.nesting = nesting
        self.pending = iter(item_nodes(body))
        self.items: list[Declaration] = []


def _classify_module(node: Node, nesting: int, max_nesting: int) -> Declaration:
    body = node.child_by_field_name("body")
    if body is None:
        return ModuleDecl(name=_name(node))

    # Inline modules are walked with an explicit stack so nesting depth
    # never consumes Python frames.
    stack = [_ModuleFrame(node, body, nesting, max_nesting)]
    while True:
        frame = stack[-1]
        child = next(frame.pending, None)
        if child is None:
            stack.pop()
            module = ModuleDecl(name=frame.name, items=tuple(frame.items))
            if not stack:
                return module
            stack[-1].items.append(module)
            continue

        child_body = child.child_by_field_name("body") if child.type == "mod_item" else None
        if child_body is None:
            frame.items.append(classify(child, nesting=frame.nesting + 1, max_nesting=max_nesting))
            continue
        try:
            stack.append(_ModuleFrame(child, child_body, frame.nesting + 1, max_nesting))
        except _MalformedNode as exc:
            logger.debug("Degrading mod_item at line %d to Other: %s", child.start_point[0] + 1, exc)
            frame.items.append(OtherDecl(kind=kind_tag(child)))


def _classify_use(node: Node, nesting: int, max_nesting: int) -> Declaration:
    return UseDecl(tree=to_syntax(_field(node, "argument")))


def _classify_type_alias(node: Node, nesting: int, max_nesting: int) -> Declaration:
    return TypeAliasDecl(name=_name(node), aliased=to_syntax(_field(node, "type")))


def _classify_const(node: Node, nesting: int, max_nesting: int) -> Declaration:
    return ConstDecl(
        name=_name(node),
        type=to_syntax(_field(node, "type")),
        initializer=_optional_syntax(node, "value"),
    )


def _classify_static(node: Node, nesting: int, max_nesting: int) -> Declaration:
    return StaticDecl(name=_name(node), type=to_syntax(_field(node, "type")))


def _classify_trait(node: Node, nesting: int, max_nesting: int) -> Declaration:
    return TraitDecl(name=_name(node), item_count=_member_count(node))


_CLASSIFIERS: dict[str, Callable[[Node, int, int], Declaration]] = {
    "function_item": _classify_function,
    "struct_item": _classify_struct,
    "enum_item": _classify_enum,
    "impl_item": _classify_impl,
    "mod_item": _classify_module,
    "use_declaration": _classify_use,
    "type_item": _classify_type_alias,
    "const_item": _classify_const,
    "static_item": _classify_static,
    "trait_item": _classify_trait,
}


# ============================================================================
# Public API
# ============================================================================


def classify(node: Node, *, nesting: int = 0, max_nesting: int = DEFAULT_MAX_NESTING) -> Declaration:
    """Classify one item node.

    Args:
        node: An item-level tree-sitter node.
        nesting: Number of inline modules enclosing the node.
        max_nesting: Deepest module nesting accepted.

    Raises:
        NestingTooDeepError: If inline modules nest past ``max_nesting``.
    """
    handler = _CLASSIFIERS.get(node.type)
    if handler is None:
        return OtherDecl(kind=kind_tag(node))
    try:
        return handler(node, nesting, max_nesting)
    except _MalformedNode as exc:
        logger.debug("Degrading %s at line %d to Other: %s", node.type, node.start_point[0] + 1, exc)
        return OtherDecl(kind=kind_tag(node))


def classify_items(root: Node, *, max_nesting: int = DEFAULT_MAX_NESTING) -> list[Declaration]:
    """Classify every item directly under ``root`` in source order."""
    return [classify(child, max_nesting=max_nesting) for child in item_nodes(root)]


__all__ = [
    "DEFAULT_MAX_NESTING",
    "KIND_TAGS",
    "TRIVIA_TYPES",
    "classify",
    "classify_items",
    "item_nodes",
    "kind_tag",
    "node_text",
    "node_tokens",
    "to_syntax",
]
