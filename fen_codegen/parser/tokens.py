"""
Token vocabulary shared by the Fen lexer and parser.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Final


class TokenKind(enum.Enum):
    """All token kinds produced by the Fen lexer."""

    # Structural punctuation
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"
    COLON = ":"
    QUESTION_MARK = "?"
    COMMA = ","
    AT = "@"
    RULE = "---"

    # Primitive type keywords
    INT = "Int"
    FLOAT = "Float"
    STRING = "String"
    BOOL = "Bool"
    DATE = "Date"
    UUID = "UUID"

    # Literal-carrying tokens
    IDENTIFIER = "Identifier"
    STRING_LITERAL = "StringLiteral"
    BOOL_LITERAL = "BoolLiteral"

    EOF = "Eof"


SINGLE_CHAR_TOKENS: Final[dict[int, TokenKind]] = {
    ord("{"): TokenKind.LEFT_BRACE,
    ord("}"): TokenKind.RIGHT_BRACE,
    ord("("): TokenKind.LEFT_PAREN,
    ord(")"): TokenKind.RIGHT_PAREN,
    ord("["): TokenKind.LEFT_BRACKET,
    ord("]"): TokenKind.RIGHT_BRACKET,
    ord(":"): TokenKind.COLON,
    ord("?"): TokenKind.QUESTION_MARK,
    ord(","): TokenKind.COMMA,
    ord("@"): TokenKind.AT,
}

KEYWORDS: Final[dict[str, TokenKind]] = {
    "Int": TokenKind.INT,
    "Float": TokenKind.FLOAT,
    "String": TokenKind.STRING,
    "Bool": TokenKind.BOOL,
    "Date": TokenKind.DATE,
    "UUID": TokenKind.UUID,
}

BOOL_LITERALS: Final[dict[str, bool]] = {"true": True, "false": False}

PRIMITIVE_KINDS: Final = frozenset(
    {
        TokenKind.INT,
        TokenKind.FLOAT,
        TokenKind.STRING,
        TokenKind.BOOL,
        TokenKind.DATE,
        TokenKind.UUID,
    }
)


@dataclass(frozen=True)
class Token:
    """A lexical token with its byte offset in the source.

    Attributes:
        kind: The kind of token.
        position: Byte offset of the first byte of the token.
        value: Identifier name, string literal contents or boolean value,
            ``None`` for every other kind.
        newline_before: Whether a line break separates this token from the
            previous one. Ignored when comparing tokens.
    """

    kind: TokenKind
    position: int
    value: str | bool | None = None
    newline_before: bool = field(default=False, compare=False)

    def describe(self) -> str:
        """Render the token for diagnostics, e.g. ``Identifier("foo")``."""
        match self.kind:
            case TokenKind.IDENTIFIER | TokenKind.STRING_LITERAL:
                return f'{self.kind.value}("{self.value}")'
            case TokenKind.BOOL_LITERAL:
                return f"{self.kind.value}({str(self.value).lower()})"
            case _:
                return self.kind.value

    def __str__(self) -> str:
        return self.describe()
