"""Indented outlines of the declarations in Rust source files."""

from rsoutline.config import OutlineConfig, TypeStyle, load_config
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
    VariantInfo,
)
from rsoutline.errors import (
    ConfigError,
    GrammarError,
    NestingTooDeepError,
    OutlineError,
    ParseError,
    SourceReadError,
)
from rsoutline.parser import RustParser, read_source
from rsoutline.renderer import render, write_outline

__all__ = [
    "OutlineConfig",
    "TypeStyle",
    "load_config",
    "ConstDecl",
    "Declaration",
    "EnumDecl",
    "FieldsShape",
    "FunctionDecl",
    "ImplBlock",
    "ModuleDecl",
    "NamedFields",
    "OtherDecl",
    "Receiver",
    "RecordDecl",
    "StaticDecl",
    "Syntax",
    "TraitDecl",
    "TypeAliasDecl",
    "TypedParam",
    "UnitFields",
    "UnnamedFields",
    "UseDecl",
    "VariantInfo",
    "ConfigError",
    "GrammarError",
    "NestingTooDeepError",
    "OutlineError",
    "ParseError",
    "SourceReadError",
    "RustParser",
    "read_source",
    "render",
    "write_outline",
]
