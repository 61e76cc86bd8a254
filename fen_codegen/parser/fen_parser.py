"""
Two-pass parser for .fen schema files.

A schema has three sections separated by ``---`` rules: route metadata, the
``@input``/``@output`` declarations and, optionally, helper struct and enum
definitions. Helper types may be referenced before they are declared, so the
parser first walks the helper section collecting declared names, then rewinds
and builds the tree, validating every named reference against that set.
"""

from __future__ import annotations

import logging
from typing import Final

from fen_codegen.parser.ast import (
    ArrayType,
    EnumDefinition,
    Field,
    FileNode,
    IOType,
    NamedType,
    OptionalType,
    Primitive,
    PrimitiveType,
    StructDefinition,
    Type,
    Variant,
)
from fen_codegen.parser.errors import (
    DanglingAnnotationError,
    ExpectedError,
    LexError,
    LexerFailure,
    MissingIOError,
    ParseError,
    UndefinedTypeError,
    UnexpectedEofError,
    UnknownMetadataKeyError,
    WrongTokenError,
)
from fen_codegen.parser.lexer import Lexer
from fen_codegen.parser.tokens import PRIMITIVE_KINDS, Token, TokenKind

logger = logging.getLogger(__name__)

_SECTIONS_BEFORE_HELPERS: Final = 2
_TYPE_START_KINDS: Final = PRIMITIVE_KINDS | {TokenKind.LEFT_BRACKET, TokenKind.IDENTIFIER}


class FenParser:
    """Builds a ``FileNode`` from the source of one schema file."""

    def __init__(self, source: str | bytes) -> None:
        self.lexer = Lexer(source)
        self.known_types: set[str] = set()
        self._current_definition: str | None = None

    def parse(self) -> FileNode:
        """Parse the whole schema.

        Returns:
            The route described by the schema.

        Raises:
            ParseError: On the first lexical, syntactic or reference error.
        """
        structs: tuple[StructDefinition, ...] = ()
        enums: tuple[EnumDefinition, ...] = ()

        if self._skip_to_helper_types():
            self._collect_type_names()
            logger.debug("Discovered helper types: %s", sorted(self.known_types))

            self.lexer.reset()
            self._skip_to_helper_types()
            structs, enums = self._parse_helper_types()

        self.lexer.reset()
        name, description, authed = self._parse_metadata()
        input_type, output_type = self._parse_io()

        logger.debug("Parsed route %s (%d structs, %d enums)", name, len(structs), len(enums))
        return FileNode(
            name=name,
            description=description,
            authed=authed,
            input=input_type,
            output=output_type,
            structs=structs,
            enums=enums,
        )

    # Token access

    def _next(self) -> Token | None:
        try:
            return self.lexer.next_tok()
        except LexError as e:
            raise LexerFailure(e) from e

    def _peek(self) -> Token | None:
        try:
            return self.lexer.peek_tok()
        except LexError as e:
            raise LexerFailure(e) from e

    def _advance(self) -> Token:
        token = self._next()
        if token is None:
            raise UnexpectedEofError(len(self.lexer.source))
        return token

    def _expect(self, kind: TokenKind) -> Token:
        token = self._advance()
        if token.kind is not kind:
            raise WrongTokenError(kind, token)
        return token

    def _expect_identifier(self, expected: str = "an identifier") -> str:
        return self._identifier_from(self._advance(), expected)

    @staticmethod
    def _identifier_from(token: Token, expected: str) -> str:
        if token.kind is not TokenKind.IDENTIFIER:
            raise ExpectedError(expected, token)
        return str(token.value)

    def _expect_string_literal(self) -> str:
        token = self._advance()
        if token.kind is not TokenKind.STRING_LITERAL:
            raise ExpectedError("a string literal", token)
        return str(token.value)

    def _expect_bool_literal(self) -> bool:
        token = self._advance()
        if token.kind is not TokenKind.BOOL_LITERAL:
            raise ExpectedError("a boolean literal", token)
        return bool(token.value)

    # Helper types

    def _skip_to_helper_types(self) -> bool:
        """Consume tokens up to and including the second rule.

        Returns:
            True if the schema has a helper type section.
        """
        rules_seen = 0
        while rules_seen < _SECTIONS_BEFORE_HELPERS:
            token = self._next()
            if token is None:
                return False
            if token.kind is TokenKind.RULE:
                rules_seen += 1
        return True

    def _collect_type_names(self) -> None:
        while (token := self._next()) is not None:
            match token.kind:
                case TokenKind.AT:
                    self._expect_identifier("an annotation name")
                case TokenKind.IDENTIFIER:
                    self.known_types.add(str(token.value))
                    opener = self._advance()
                    match opener.kind:
                        case TokenKind.LEFT_BRACE:
                            self._skip_body(TokenKind.LEFT_BRACE, TokenKind.RIGHT_BRACE)
                        case TokenKind.LEFT_PAREN:
                            self._skip_body(TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN)
                        case _:
                            raise ExpectedError("a struct or enum definition", opener)
                case _:
                    raise ExpectedError("an identifier", token)

    def _skip_body(self, opener: TokenKind, closer: TokenKind) -> None:
        depth = 1
        while depth:
            kind = self._advance().kind
            if kind is opener:
                depth += 1
            elif kind is closer:
                depth -= 1

    def _parse_helper_types(self) -> tuple[tuple[StructDefinition, ...], tuple[EnumDefinition, ...]]:
        structs: list[StructDefinition] = []
        enums: list[EnumDefinition] = []
        annotations: list[str] = []

        while (token := self._next()) is not None:
            match token.kind:
                case TokenKind.AT:
                    annotations.append(self._expect_identifier("an annotation name"))
                case TokenKind.IDENTIFIER:
                    name = str(token.value)
                    opener = self._advance()
                    match opener.kind:
                        case TokenKind.LEFT_BRACE:
                            structs.append(self._parse_struct(name, tuple(annotations)))
                        case TokenKind.LEFT_PAREN:
                            enums.append(self._parse_enum(name, tuple(annotations)))
                        case _:
                            raise ExpectedError("a struct or enum definition", opener)
                    annotations = []
                case _:
                    raise ExpectedError("an identifier", token)

        if annotations:
            raise DanglingAnnotationError(tuple(annotations))
        return tuple(structs), tuple(enums)

    # Struct and enum bodies

    def _parse_struct(
        self, name: str, annotations: tuple[str, ...] = (), *, inline: bool = False
    ) -> StructDefinition:
        """Parse fields up to the closing brace; the opening brace is already consumed.

        Inline I/O structs have no name of their own to refer back to.
        """
        self._current_definition = None if inline else name
        fields: list[Field] = []
        while (token := self._next_entry(TokenKind.RIGHT_BRACE, has_entries=bool(fields))) is not None:
            field_name = self._identifier_from(token, "a field name")
            self._expect(TokenKind.COLON)
            fields.append(Field(field_name, self._parse_type()))
        self._current_definition = None
        return StructDefinition(name, tuple(fields), annotations)

    def _parse_enum(
        self, name: str, annotations: tuple[str, ...] = (), *, inline: bool = False
    ) -> EnumDefinition:
        """Parse variants up to the closing paren; the opening paren is already consumed."""
        self._current_definition = None if inline else name
        variants: list[Variant] = []
        while (token := self._next_entry(TokenKind.RIGHT_PAREN, has_entries=bool(variants))) is not None:
            variant_name = self._identifier_from(token, "a variant name")
            associated: Type | None = None
            next_token = self._peek()
            if next_token is not None and next_token.kind is TokenKind.LEFT_PAREN:
                self._next()
                associated = self._parse_type()
                self._expect(TokenKind.RIGHT_PAREN)
            variants.append(Variant(variant_name, associated))
        self._current_definition = None
        return EnumDefinition(name, tuple(variants), annotations)

    def _next_entry(self, closer: TokenKind, *, has_entries: bool) -> Token | None:
        """Return the first token of the next field or variant, or None at the closer.

        Entries are separated by a comma or a line break; a trailing comma is
        allowed before the closer.
        """
        token = self._advance()
        if token.kind is closer:
            return None
        if has_entries:
            if token.kind is TokenKind.COMMA:
                token = self._advance()
                if token.kind is closer:
                    return None
            elif not token.newline_before:
                raise WrongTokenError(TokenKind.COMMA, token)
        return token

    # Types

    def _parse_type(self) -> Type:
        token = self._advance()
        parsed: Type
        match token.kind:
            case TokenKind.LEFT_BRACKET:
                element = self._parse_type()
                self._expect(TokenKind.RIGHT_BRACKET)
                parsed = ArrayType(element)
            case TokenKind.IDENTIFIER:
                name = str(token.value)
                if name not in self.known_types and name != self._current_definition:
                    raise UndefinedTypeError(name, token.position)
                parsed = NamedType(name)
            case kind if kind in PRIMITIVE_KINDS:
                parsed = PrimitiveType(Primitive(kind.value))
            case _:
                raise ExpectedError("a type", token)

        next_token = self._peek()
        if next_token is not None and next_token.kind is TokenKind.QUESTION_MARK:
            self._next()
            parsed = OptionalType(parsed)
        return parsed

    # Metadata and I/O

    def _parse_metadata(self) -> tuple[str, str | None, bool]:
        key = self._advance()
        if key.kind is not TokenKind.IDENTIFIER or key.value != "name":
            raise ExpectedError('the "name" key', key)
        self._expect(TokenKind.COLON)
        name = self._expect_string_literal()

        description: str | None = None
        authed = False
        while (token := self._next()) is not None:
            if token.kind is TokenKind.RULE:
                break
            if token.kind is not TokenKind.IDENTIFIER:
                raise ExpectedError("an identifier or rule", token)

            match token.value:
                case "description":
                    self._expect(TokenKind.COLON)
                    description = self._expect_string_literal()
                case "authed":
                    self._expect(TokenKind.COLON)
                    authed = self._expect_bool_literal()
                case "name":
                    msg = "Duplicate metadata key: name"
                    raise ParseError(msg, token.position)
                case _:
                    raise UnknownMetadataKeyError(str(token.value), token.position)

        return name, description, authed

    def _parse_io(self) -> tuple[IOType | None, IOType | None]:
        token = self._next()
        if token is None or token.kind is not TokenKind.AT:
            raise MissingIOError(None if token is None else token.position)

        input_type: IOType | None = None
        output_type: IOType | None = None

        label = self._advance()
        if label.kind is not TokenKind.IDENTIFIER:
            raise ExpectedError("input or output", label)

        match label.value:
            case "input":
                input_type = self._parse_io_type("input")
                token = self._next()
                if token is not None and token.kind is TokenKind.AT:
                    second = self._advance()
                    if second.kind is not TokenKind.IDENTIFIER or second.value != "output":
                        raise ExpectedError("output", second)
                    output_type = self._parse_io_type("output")
                    token = self._next()
            case "output":
                output_type = self._parse_io_type("output")
                token = self._next()
            case _:
                raise ExpectedError("input or output", label)

        if token is not None and token.kind is not TokenKind.RULE:
            raise ExpectedError("a rule or the end of the file", token)
        return input_type, output_type

    def _parse_io_type(self, name: str) -> IOType:
        token = self._peek()
        if token is None:
            raise UnexpectedEofError(len(self.lexer.source))

        if token.kind is TokenKind.LEFT_BRACE:
            self._next()
            return self._parse_struct(name, inline=True)
        if token.kind is TokenKind.LEFT_PAREN:
            self._next()
            return self._parse_enum(name, inline=True)
        if token.kind in _TYPE_START_KINDS:
            return self._parse_type()
        raise ExpectedError("an inline struct, an inline enum, or a type", token)


def parse(source: str | bytes) -> FileNode:
    """Parse the source of one .fen schema file.

    Args:
        source: Schema text, or its UTF-8 bytes.

    Returns:
        The parsed route.

    Raises:
        ParseError: If the schema is malformed or references an undefined type.

    Example:
        >>> parse('name: "Ping"\\n---\\n@output Bool').output
        PrimitiveType(primitive=<Primitive.BOOL: 'Bool'>)
    """
    return FenParser(source).parse()
