"""Declaration model produced by the classifier and consumed by the renderer.

Every value here is an immutable data object. Collections are tuples and
keep source order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Syntax:
    """An opaque fragment of source syntax (a type, generic list, path, ...).

    ``text`` is the exact source slice; ``tokens`` are its leaf tokens in
    order. Only a stringifier looks inside; see ``rsoutline.stringify``.
    """

    text: str
    tokens: tuple[str, ...] = ()


# ============================================================================
# Parameters and fields
# ============================================================================


@dataclass(frozen=True, slots=True)
class Receiver:
    """The ``self`` argument of a method, in any of its forms."""


@dataclass(frozen=True, slots=True)
class TypedParam:
    pattern: str
    type: Syntax


Parameter: TypeAlias = Receiver | TypedParam


class FieldsShape(Enum):
    NAMED = "named"
    UNNAMED = "unnamed"
    UNIT = "unit"


@dataclass(frozen=True, slots=True)
class NamedFields:
    fields: tuple[tuple[str, Syntax], ...] = ()

    @property
    def shape(self) -> FieldsShape:
        return FieldsShape.NAMED


@dataclass(frozen=True, slots=True)
class UnnamedFields:
    types: tuple[Syntax, ...] = ()

    @property
    def shape(self) -> FieldsShape:
        return FieldsShape.UNNAMED


@dataclass(frozen=True, slots=True)
class UnitFields:
    @property
    def shape(self) -> FieldsShape:
        return FieldsShape.UNIT


Fields: TypeAlias = NamedFields | UnnamedFields | UnitFields


@dataclass(frozen=True, slots=True)
class VariantInfo:
    """An enum variant; only the shape of its data is kept."""

    name: str
    shape: FieldsShape = FieldsShape.UNIT


# ============================================================================
# Declarations
# ============================================================================


@dataclass(frozen=True, slots=True)
class FunctionDecl:
    name: str
    params: tuple[Parameter, ...] = ()
    return_type: Syntax | None = None
    generics: Syntax | None = None


@dataclass(frozen=True, slots=True)
class RecordDecl:
    name: str
    fields: Fields = UnitFields()
    generics: Syntax | None = None


@dataclass(frozen=True, slots=True)
class EnumDecl:
    name: str
    variants: tuple[VariantInfo, ...] = ()
    generics: Syntax | None = None


@dataclass(frozen=True, slots=True)
class ImplBlock:
    target: Syntax
    trait: Syntax | None = None
    item_count: int = 0


@dataclass(frozen=True, slots=True)
class ModuleDecl:
    """A ``mod`` item. ``items`` is None when the body lives in another file."""

    name: str
    items: tuple[Declaration, ...] | None = None


@dataclass(frozen=True, slots=True)
class UseDecl:
    tree: Syntax


@dataclass(frozen=True, slots=True)
class TypeAliasDecl:
    name: str
    aliased: Syntax


@dataclass(frozen=True, slots=True)
class ConstDecl:
    name: str
    type: Syntax
    initializer: Syntax | None = None


@dataclass(frozen=True, slots=True)
class StaticDecl:
    name: str
    type: Syntax


@dataclass(frozen=True, slots=True)
class TraitDecl:
    name: str
    item_count: int = 0


@dataclass(frozen=True, slots=True)
class OtherDecl:
    """Any item kind without a dedicated variant. ``kind`` is a stable tag."""

    kind: str


Declaration: TypeAlias = (
    FunctionDecl
    | RecordDecl
    | EnumDecl
    | ImplBlock
    | ModuleDecl
    | UseDecl
    | TypeAliasDecl
    | ConstDecl
    | StaticDecl
    | TraitDecl
    | OtherDecl
)


__all__ = [
    "Syntax",
    "Receiver",
    "TypedParam",
    "Parameter",
    "FieldsShape",
    "NamedFields",
    "UnnamedFields",
    "UnitFields",
    "Fields",
    "VariantInfo",
    "FunctionDecl",
    "RecordDecl",
    "EnumDecl",
    "ImplBlock",
    "ModuleDecl",
    "UseDecl",
    "TypeAliasDecl",
    "ConstDecl",
    "StaticDecl",
    "TraitDecl",
    "OtherDecl",
    "Declaration",
]
