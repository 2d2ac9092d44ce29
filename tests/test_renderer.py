"""Tests for the declaration renderer."""

from __future__ import annotations

import io

import pytest

from rsoutline.config import RenderConfig, TypeStyle
from rsoutline.declarations import (
    ConstDecl,
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
from rsoutline.errors import NestingTooDeepError
from rsoutline.renderer import render, write_outline


def ty(text: str) -> Syntax:
    return Syntax(text=text)


ALL_KINDS = [
    FunctionDecl(name="main"),
    RecordDecl(name="Marker"),
    EnumDecl(name="Never"),
    ImplBlock(target=ty("Marker")),
    ModuleDecl(name="external"),
    UseDecl(tree=ty("std::io")),
    TypeAliasDecl(name="Id", aliased=ty("u64")),
    ConstDecl(name="N", type=ty("usize"), initializer=ty("3")),
    StaticDecl(name="S", type=ty("&str")),
    TraitDecl(name="Speak"),
    OtherDecl(kind="Macro"),
]


class TestScenarios:
    def test_function_without_inputs(self) -> None:
        assert render([FunctionDecl(name="main")]) == ["Function: main", "  └─ Inputs: 0"]

    def test_struct_with_named_fields(self) -> None:
        person = RecordDecl(
            name="Person",
            fields=NamedFields((("name", ty("String")), ("age", ty("u32")))),
        )
        assert render([person]) == [
            "Struct: Person",
            "  └─ Named Fields:",
            "    └─ name : String",
            "    └─ age : u32",
        ]

    def test_module_children_rendered_one_level_deeper(self) -> None:
        helper = FunctionDecl(name="helper", params=(TypedParam("x", ty("i32")),))
        assert render([ModuleDecl(name="utils", items=(helper,))]) == [
            "Module: utils",
            "  └─ Items: 1",
            "    Function: helper",
            "      └─ Inputs: 1",
            "        └─ [0] x : i32",
        ]

    def test_enum_variant_shapes(self) -> None:
        shape = EnumDecl(
            name="Shape",
            variants=(
                VariantInfo("Circle", FieldsShape.UNNAMED),
                VariantInfo("Square", FieldsShape.NAMED),
                VariantInfo("Empty"),
            ),
        )
        assert render([shape]) == [
            "Enum: Shape",
            "  └─ Variants:",
            "    └─ Circle(...)",
            "    └─ Square { ... }",
            "    └─ Empty",
        ]

    def test_unit_struct(self) -> None:
        assert render([RecordDecl(name="Marker", fields=UnitFields())]) == [
            "Struct: Marker",
            "  └─ Unit Struct",
        ]


class TestFunction:
    def test_full_signature(self) -> None:
        func = FunctionDecl(
            name="get",
            params=(Receiver(), TypedParam("mut key", ty("&str"))),
            return_type=ty("Option<T>"),
            generics=ty("<T: Clone>"),
        )
        assert render([func]) == [
            "Function: get",
            "  └─ Inputs: 2",
            "    └─ [0] self",
            "    └─ [1] mut key : &str",
            "  └─ Output: Option<T>",
            "  └─ Generics: <T: Clone>",
        ]

    def test_absent_optional_lines_are_skipped(self) -> None:
        lines = render([FunctionDecl(name="f", params=(TypedParam("a", ty("u8")),))])
        assert not any("Output" in line or "Generics" in line for line in lines)


class TestRecordAndEnum:
    def test_tuple_fields_are_indexed(self) -> None:
        pair = RecordDecl(name="Pair", fields=UnnamedFields((ty("i32"), ty("String"))), generics=ty("<'a>"))
        assert render([pair]) == [
            "Struct: Pair",
            "  └─ Generics: <'a>",
            "  └─ Tuple Fields:",
            "    └─ [0] : i32",
            "    └─ [1] : String",
        ]

    def test_empty_named_fields_keep_marker(self) -> None:
        assert render([RecordDecl(name="Empty", fields=NamedFields())]) == [
            "Struct: Empty",
            "  └─ Named Fields:",
        ]

    def test_enum_without_variants_keeps_marker(self) -> None:
        assert render([EnumDecl(name="Never", generics=ty("<T>"))]) == [
            "Enum: Never",
            "  └─ Generics: <T>",
            "  └─ Variants:",
        ]


class TestSingleLineKinds:
    def test_impl_with_trait(self) -> None:
        impl = ImplBlock(target=ty("Person"), trait=ty("Display"), item_count=1)
        assert render([impl]) == ["Impl: Person", "  └─ Trait: Display", "  └─ Items: 1"]

    def test_inherent_impl(self) -> None:
        assert render([ImplBlock(target=ty("Vec<T>"))]) == ["Impl: Vec<T>", "  └─ Items: 0"]

    def test_use_alias_const_static(self) -> None:
        decls = [
            UseDecl(tree=ty("std::fmt::{self, Display}")),
            TypeAliasDecl(name="Map", aliased=ty("HashMap<String, u32>")),
            ConstDecl(name="MAX", type=ty("usize"), initializer=ty("100")),
            StaticDecl(name="NAME", type=ty("&str")),
        ]
        assert render(decls) == [
            "Use: std::fmt::{self, Display}",
            "Type Alias: Map = HashMap<String, u32>",
            "Const: MAX : usize = 100",
            "Static: NAME : &str",
        ]

    def test_const_without_initializer(self) -> None:
        assert render([ConstDecl(name="N", type=ty("u8"))]) == ["Const: N : u8"]

    def test_trait_and_other(self) -> None:
        assert render([TraitDecl(name="Speak", item_count=2), OtherDecl(kind="ExternCrate")]) == [
            "Trait: Speak",
            "  └─ Items: 2",
            "Other: ExternCrate",
        ]

    def test_out_of_line_module_is_a_leaf(self) -> None:
        assert render([ModuleDecl(name="external")]) == ["Module: external"]

    def test_empty_inline_module(self) -> None:
        assert render([ModuleDecl(name="empty", items=())]) == ["Module: empty", "  └─ Items: 0"]


class TestProperties:
    def test_every_kind_produces_output(self) -> None:
        for decl in ALL_KINDS:
            assert render([decl]), decl

    def test_rendering_is_deterministic(self) -> None:
        assert render(ALL_KINDS) == render(ALL_KINDS)

    def test_headers_follow_input_order(self) -> None:
        headers = [line for line in render(ALL_KINDS) if not line.startswith(" ")]
        assert len(headers) == len(ALL_KINDS)
        assert headers[0] == "Function: main"
        assert headers[-1] == "Other: Macro"

    def test_nested_children_precede_next_sibling(self) -> None:
        decls = [
            ModuleDecl(name="a", items=(ModuleDecl(name="b", items=(OtherDecl("Macro"),)),)),
            OtherDecl(kind="Union"),
        ]
        assert render(decls) == [
            "Module: a",
            "  └─ Items: 1",
            "    Module: b",
            "      └─ Items: 1",
            "        Other: Macro",
            "Other: Union",
        ]

    @pytest.mark.parametrize("depth", [0, 1, 3])
    def test_header_indent_is_two_spaces_per_depth(self, depth: int) -> None:
        lines = render([TraitDecl(name="T")], depth=depth)
        assert lines[0] == " " * (2 * depth) + "Trait: T"
        assert lines[1] == " " * (2 * depth + 2) + "└─ Items: 0"


class TestConfiguration:
    def test_custom_indent_and_branch(self) -> None:
        config = RenderConfig(indent_unit="    ", branch_marker="- ")
        lines = render([ModuleDecl(name="m", items=(TraitDecl(name="T"),))], config=config)
        assert lines == [
            "Module: m",
            "    - Items: 1",
            "        Trait: T",
            "            - Items: 0",
        ]

    def test_type_style_tokens(self) -> None:
        alias = TypeAliasDecl(name="V", aliased=Syntax("Vec<u8>", ("Vec", "<", "u8", ">")))
        config = RenderConfig(type_style=TypeStyle.TOKENS)
        assert render([alias], config=config) == ["Type Alias: V = Vec < u8 >"]

    def test_custom_stringifier(self) -> None:
        lines = render([StaticDecl(name="S", type=ty("u8"))], stringify=lambda syntax: "<type>")
        assert lines == ["Static: S : <type>"]

    def test_nesting_ceiling(self) -> None:
        decl = OtherDecl(kind="Macro")
        for level in range(4):
            decl = ModuleDecl(name=f"m{level}", items=(decl,))
        render([decl], config=RenderConfig(max_nesting=4))
        with pytest.raises(NestingTooDeepError):
            render([decl], config=RenderConfig(max_nesting=3))


def test_write_outline_writes_lines() -> None:
    stream = io.StringIO()
    count = write_outline([FunctionDecl(name="main"), OtherDecl(kind="Macro")], stream)
    assert count == 3
    assert stream.getvalue() == "Function: main\n  └─ Inputs: 0\nOther: Macro\n"
