"""Tests for the two-pass Fen parser."""

import pytest

from fen_codegen.parser import (
    ArrayType,
    DanglingAnnotationError,
    EnumDefinition,
    ExpectedError,
    Field,
    FileNode,
    LexerFailure,
    MissingIOError,
    NamedType,
    OptionalType,
    ParseError,
    Primitive,
    PrimitiveType,
    StructDefinition,
    TokenKind,
    UndefinedTypeError,
    UnexpectedEofError,
    UnknownMetadataKeyError,
    Variant,
    WrongTokenError,
    parse,
)

from .schemas import ENUM_OUTPUT_WITH_HELPERS, GET_TODOS, INLINE_INPUT_AND_OUTPUT, SQLX_TYPES

INT = PrimitiveType(Primitive.INT)
STRING = PrimitiveType(Primitive.STRING)
BOOL = PrimitiveType(Primitive.BOOL)
DATE = PrimitiveType(Primitive.DATE)
UUID = PrimitiveType(Primitive.UUID)


def route(io: str, helpers: str | None = None, metadata: str = 'name: "Test"') -> str:
    source = f"{metadata}\n\n---\n\n{io}\n"
    if helpers is not None:
        source += f"\n---\n\n{helpers}\n"
    return source


def field_type(type_source: str, helpers: str | None = None) -> object:
    node = parse(route(f"@input {{\n  value: {type_source}\n}}", helpers))
    assert isinstance(node.input, StructDefinition)
    return node.input.fields[0].type


class TestRoutes:
    def test_full_route(self) -> None:
        assert parse(GET_TODOS) == FileNode(
            name="GetTodos",
            description="Fetches all todos",
            authed=True,
            output=ArrayType(NamedType("Todo")),
            structs=(
                StructDefinition(
                    "Todo",
                    (
                        Field("id", UUID),
                        Field("name", STRING),
                        Field("description", OptionalType(STRING)),
                        Field("due", OptionalType(DATE)),
                        Field("is_completed", BOOL),
                    ),
                ),
            ),
        )

    def test_inline_input_and_output(self) -> None:
        node = parse(INLINE_INPUT_AND_OUTPUT)

        assert node.authed is False
        assert node.description is None
        assert node.input == StructDefinition(
            "input",
            (
                Field("id", UUID),
                Field("foo", STRING),
                Field("bar", OptionalType(ArrayType(DATE))),
            ),
        )
        assert node.output == StructDefinition("output", (Field("stuff", ArrayType(NamedType("Thing"))),))
        assert node.enums == (
            EnumDefinition(
                "ThingType",
                (Variant("first_option"), Variant("second_option"), Variant("third_option")),
            ),
        )

    def test_inline_enum_output(self) -> None:
        node = parse(ENUM_OUTPUT_WITH_HELPERS)

        assert node.output == EnumDefinition("output", (Variant("single"), Variant("married", NamedType("Spouse"))))
        assert [s.name for s in node.structs] == ["Spouse"]
        assert node.enums[0].variants[-1] == Variant("other", OptionalType(STRING))

    def test_metadata_keys_in_any_order(self) -> None:
        node = parse(route("@output Int", metadata='name: "Test"\nauthed: false\ndescription: "Later"'))
        assert node.description == "Later"
        assert node.authed is False

    def test_trailing_rule_without_helpers(self) -> None:
        assert parse(route("@output Int", helpers="")).structs == ()


class TestTypes:
    def test_optional_array_and_array_of_optionals_differ(self) -> None:
        optional_array = field_type("[Int]?")
        array_of_optionals = field_type("[Int?]")

        assert optional_array == OptionalType(ArrayType(INT))
        assert array_of_optionals == ArrayType(OptionalType(INT))
        assert optional_array != array_of_optionals

    def test_deep_nesting(self) -> None:
        assert field_type("[[Int?]?]") == ArrayType(OptionalType(ArrayType(OptionalType(INT))))

    @pytest.mark.parametrize(
        ("source", "primitive"),
        [
            ("Int", Primitive.INT),
            ("Float", Primitive.FLOAT),
            ("String", Primitive.STRING),
            ("Bool", Primitive.BOOL),
            ("Date", Primitive.DATE),
            ("UUID", Primitive.UUID),
        ],
    )
    def test_primitives(self, source: str, primitive: Primitive) -> None:
        assert field_type(source) == PrimitiveType(primitive)

    def test_bare_io_types(self) -> None:
        node = parse(route("@input [UUID]\n@output Bool?"))
        assert node.input == ArrayType(UUID)
        assert node.output == OptionalType(BOOL)

    def test_not_a_type(self) -> None:
        with pytest.raises(ExpectedError) as exc_info:
            field_type("{")
        assert exc_info.value.expected == "a type"


class TestReferences:
    def test_forward_reference(self) -> None:
        node = parse(route("@output A", helpers="A {\n  b: B\n}\n\nB {\n  value: Int\n}"))
        assert [s.name for s in node.structs] == ["A", "B"]
        assert node.structs[0].fields[0].type == NamedType("B")

    def test_mutual_recursion(self) -> None:
        node = parse(route("@output A", helpers="A {\n  b: B?\n}\n\nB (\n  leaf\n  node(A)\n)"))
        assert node.enums[0].variants[1] == Variant("node", NamedType("A"))

    def test_struct_self_reference(self) -> None:
        node = parse(route("@output Tree", helpers="Tree {\n  children: [Tree]\n}"))
        assert node.structs[0].fields[0].type == ArrayType(NamedType("Tree"))

    def test_enum_self_reference(self) -> None:
        node = parse(route("@output List", helpers="List (\n  empty\n  cons(List)\n)"))
        assert node.enums[0].variants[1].type == NamedType("List")

    def test_undefined_reference(self) -> None:
        with pytest.raises(UndefinedTypeError, match="Reference to undefined type: Missing") as exc_info:
            parse(route("@output A", helpers="A {\n  b: Missing\n}"))
        assert exc_info.value.name == "Missing"

    def test_undefined_reference_in_io(self) -> None:
        with pytest.raises(UndefinedTypeError, match="Todo"):
            parse(route("@output [Todo]"))

    def test_inline_io_cannot_reference_itself(self) -> None:
        with pytest.raises(UndefinedTypeError, match="input"):
            parse(route("@input {\n  next: input\n}"))


class TestAnnotations:
    def test_annotations_attach_to_the_next_definition(self) -> None:
        helpers = "@someAnnotation\nA {\n  a: Int\n}\n\n@anotherAnnotation @andAnother\nB (\n  x\n)\n\nC {\n  c: Int\n}"
        node = parse(route("@output A", helpers=helpers))

        assert node.structs[0].annotations == ("someAnnotation",)
        assert node.enums[0].annotations == ("anotherAnnotation", "andAnother")
        assert node.structs[1].annotations == ()

    def test_sqlx_annotation(self) -> None:
        assert parse(SQLX_TYPES).enums[0].annotations == ("sqlxType",)

    def test_dangling_annotation(self) -> None:
        with pytest.raises(DanglingAnnotationError, match="@orphan"):
            parse(route("@output A", helpers="A {\n  a: Int\n}\n@orphan"))


class TestSeparators:
    def test_commas_on_one_line(self) -> None:
        node = parse(route("@input { a: Int, b: String }"))
        assert isinstance(node.input, StructDefinition)
        assert [f.name for f in node.input.fields] == ["a", "b"]

    def test_trailing_comma(self) -> None:
        node = parse(route("@input (\n  a,\n  b(Int),\n)"))
        assert node.input == EnumDefinition("input", (Variant("a"), Variant("b", INT)))

    def test_unseparated_fields(self) -> None:
        with pytest.raises(WrongTokenError) as exc_info:
            parse(route("@input { bar: Int baz: String }"))
        assert exc_info.value.expected is TokenKind.COMMA
        assert exc_info.value.got.value == "baz"

    def test_empty_bodies(self) -> None:
        node = parse(route("@input {}\n@output ()"))
        assert node.input == StructDefinition("input")
        assert node.output == EnumDefinition("output")


class TestErrors:
    def test_route_without_io(self) -> None:
        with pytest.raises(MissingIOError, match="Route must have input, output, or both"):
            parse('name: "Test"\n\n---\n')

    def test_route_without_separator(self) -> None:
        with pytest.raises(MissingIOError):
            parse('name: "Test"')

    def test_name_must_come_first(self) -> None:
        with pytest.raises(ExpectedError, match='the "name" key'):
            parse(route("@output Int", metadata='authed: true\nname: "Test"'))

    def test_unknown_metadata_key(self) -> None:
        with pytest.raises(UnknownMetadataKeyError) as exc_info:
            parse(route("@output Int", metadata='name: "Test"\nmethod: "GET"'))
        assert exc_info.value.key == "method"

    def test_authed_requires_a_boolean(self) -> None:
        with pytest.raises(ExpectedError, match="a boolean literal"):
            parse(route("@output Int", metadata='name: "Test"\nauthed: "yes"'))

    def test_unknown_io_label(self) -> None:
        with pytest.raises(ExpectedError, match="input or output"):
            parse(route("@params Int"))

    def test_output_before_input(self) -> None:
        with pytest.raises(ExpectedError, match="a rule or the end of the file"):
            parse(route("@output Int\n@input Int"))

    def test_input_followed_by_other_label(self) -> None:
        with pytest.raises(ExpectedError, match="Expected output"):
            parse(route("@input Int\n@input Int"))

    def test_helper_must_be_a_definition(self) -> None:
        with pytest.raises(ExpectedError, match="a struct or enum definition"):
            parse(route("@output Int", helpers="A: Int"))

    def test_unclosed_helper(self) -> None:
        with pytest.raises(UnexpectedEofError):
            parse(route("@output A", helpers="A {\n  a: Int\n"))

    def test_lexer_errors_are_wrapped(self) -> None:
        with pytest.raises(LexerFailure) as exc_info:
            parse('name: "Test" %')
        assert exc_info.value.position == 13
        assert str(exc_info.value).startswith("Lexer error: Error at position 13")

    def test_all_errors_are_parse_errors(self) -> None:
        with pytest.raises(ParseError):
            parse(route("@output Missing"))
