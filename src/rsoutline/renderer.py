"""Indented text outline of a declaration tree.

Every declaration produces a header line at ``indent_unit * depth``
followed by sub-lines under a branch marker::

    Function: main
      └─ Inputs: 1
        └─ [0] args : Vec<String>
    Module: utils
      └─ Items: 1
        Function: helper
          └─ Inputs: 0

Inline module children are rendered at ``depth + 2``, directly after the
module's own lines.
"""

from __future__ import annotations

import logging
from typing import Iterable, TextIO

from rsoutline.config import RenderConfig
from rsoutline.declarations import (
    ConstDecl,
    Declaration,
    EnumDecl,
    FieldsShape,
    FunctionDecl,
    ImplBlock,
    ModuleDecl,
    NamedFields,
    OtherDecl,
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
)
from rsoutline.errors import NestingTooDeepError
from rsoutline.stringify import Stringifier, get_stringifier

logger = logging.getLogger(__name__)

MODULE_DEPTH_STEP = 2


class LineFormatter:
    """Formats one declaration at a given depth into output lines."""

    def __init__(self, stringify: Stringifier, config: RenderConfig) -> None:
        self._stringify = stringify
        self._unit = config.indent_unit
        self._branch = config.branch_marker

    def _sub(self, prefix: str, text: str, level: int = 1) -> str:
        return f"{prefix}{self._unit * level}{self._branch}{text}"

    def _generics(self, prefix: str, generics: Syntax | None) -> list[str]:
        if generics is None:
            return []
        return [self._sub(prefix, f"Generics: {self._stringify(generics)}")]

    def format(self, decl: Declaration, depth: int) -> list[str]:
        prefix = self._unit * depth
        s = self._stringify

        match decl:
            case FunctionDecl():
                lines = [f"{prefix}Function: {decl.name}", self._sub(prefix, f"Inputs: {len(decl.params)}")]
                for i, param in enumerate(decl.params):
                    match param:
                        case Receiver():
                            lines.append(self._sub(prefix, f"[{i}] self", 2))
                        case TypedParam(pattern=pattern, type=ty):
                            lines.append(self._sub(prefix, f"[{i}] {pattern} : {s(ty)}", 2))
                if decl.return_type is not None:
                    lines.append(self._sub(prefix, f"Output: {s(decl.return_type)}"))
                lines.extend(self._generics(prefix, decl.generics))
                return lines

            case RecordDecl():
                lines = [f"{prefix}Struct: {decl.name}", *self._generics(prefix, decl.generics)]
                match decl.fields:
                    case NamedFields(fields=fields):
                        lines.append(self._sub(prefix, "Named Fields:"))
                        lines.extend(self._sub(prefix, f"{name} : {s(ty)}", 2) for name, ty in fields)
                    case UnnamedFields(types=types):
                        lines.append(self._sub(prefix, "Tuple Fields:"))
                        lines.extend(self._sub(prefix, f"[{i}] : {s(ty)}", 2) for i, ty in enumerate(types))
                    case UnitFields():
                        lines.append(self._sub(prefix, "Unit Struct"))
                return lines

            case EnumDecl():
                lines = [f"{prefix}Enum: {decl.name}", *self._generics(prefix, decl.generics)]
                lines.append(self._sub(prefix, "Variants:"))
                for variant in decl.variants:
                    if variant.shape is FieldsShape.NAMED:
                        label = f"{variant.name} {{ ... }}"
                    elif variant.shape is FieldsShape.UNNAMED:
                        label = f"{variant.name}(...)"
                    else:
                        label = variant.name
                    lines.append(self._sub(prefix, label, 2))
                return lines

            case ImplBlock():
                lines = [f"{prefix}Impl: {s(decl.target)}"]
                if decl.trait is not None:
                    lines.append(self._sub(prefix, f"Trait: {s(decl.trait)}"))
                lines.append(self._sub(prefix, f"Items: {decl.item_count}"))
                return lines

            case ModuleDecl():
                lines = [f"{prefix}Module: {decl.name}"]
                if decl.items is not None:
                    lines.append(self._sub(prefix, f"Items: {len(decl.items)}"))
                return lines

            case UseDecl():
                return [f"{prefix}Use: {s(decl.tree)}"]

            case TypeAliasDecl():
                return [f"{prefix}Type Alias: {decl.name} = {s(decl.aliased)}"]

            case ConstDecl():
                line = f"{prefix}Const: {decl.name} : {s(decl.type)}"
                if decl.initializer is not None:
                    line += f" = {s(decl.initializer)}"
                return [line]

            case StaticDecl():
                return [f"{prefix}Static: {decl.name} : {s(decl.type)}"]

            case TraitDecl():
                return [f"{prefix}Trait: {decl.name}", self._sub(prefix, f"Items: {decl.item_count}")]

            case OtherDecl():
                return [f"{prefix}Other: {decl.kind}"]

            case _:
                return [f"{prefix}Other: {type(decl).__name__}"]


def render(
    declarations: Iterable[Declaration],
    depth: int = 0,
    *,
    stringify: Stringifier | None = None,
    config: RenderConfig | None = None,
) -> list[str]:
    """Render a declaration sequence into outline lines.

    Args:
        declarations: Declarations in source order.
        depth: Indentation depth of the top-level headers.
        stringify: Type-expression stringifier (default: from config.type_style).
        config: Render configuration (default: RenderConfig()).

    Raises:
        NestingTooDeepError: If modules nest deeper than ``config.max_nesting``.
    """
    config = config or RenderConfig()
    formatter = LineFormatter(stringify or get_stringifier(config.type_style), config)

    lines: list[str] = []
    # (declaration, depth, module nesting level); popped in source order.
    stack: list[tuple[Declaration, int, int]] = [(decl, depth, 0) for decl in reversed(list(declarations))]
    while stack:
        decl, decl_depth, nesting = stack.pop()
        lines.extend(formatter.format(decl, decl_depth))
        if isinstance(decl, ModuleDecl) and decl.items:
            if nesting + 1 > config.max_nesting:
                raise NestingTooDeepError(
                    f"module '{decl.name}' nests deeper than {config.max_nesting} levels"
                )
            child_depth = decl_depth + MODULE_DEPTH_STEP
            stack.extend((child, child_depth, nesting + 1) for child in reversed(decl.items))

    logger.debug("Rendered %d lines", len(lines))
    return lines


def write_outline(
    declarations: Iterable[Declaration],
    stream: TextIO,
    *,
    stringify: Stringifier | None = None,
    config: RenderConfig | None = None,
) -> int:
    """Render declarations at depth 0 and write them to ``stream``.

    Returns the number of lines written.
    """
    lines = render(declarations, stringify=stringify, config=config)
    for line in lines:
        stream.write(line + "\n")
    return len(lines)


__all__ = ["LineFormatter", "MODULE_DEPTH_STEP", "render", "write_outline"]
