"""
Error taxonomy for the Fen lexer and parser.

Every failure aborts the parse of the whole file; there is no recovery.
Errors carry the byte offset of the offending input whenever one is known.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fen_codegen.parser.tokens import Token, TokenKind


class FenError(Exception):
    """Base class for every error raised by fen_codegen."""


# Lexical errors


class LexError(FenError):
    """Raised when the lexer cannot produce a token.

    Attributes:
        message: Description of the problem.
        position: Byte offset of the offending input.
    """

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"Error at position {position}: {message}")
        self.message = message
        self.position = position


class ForbiddenCharacterError(LexError):
    """A character outside the Fen alphabet was found."""

    def __init__(self, character: str, position: int) -> None:
        super().__init__(f"Forbidden character '{character}'", position)
        self.character = character


class InvalidEncodingError(LexError):
    """A word was not valid UTF-8."""

    def __init__(self, position: int) -> None:
        super().__init__("Invalid UTF8 encoding", position)


class UnterminatedStringError(LexError):
    """A string literal had no closing quote."""

    def __init__(self, position: int) -> None:
        super().__init__("Unterminated string literal", position)


# Syntactic errors


class ParseError(FenError):
    """Raised when a schema does not follow the Fen grammar.

    Attributes:
        message: Description of the problem.
        position: Byte offset of the offending token, if known.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message if position is None else f"{message} (at position {position})")
        self.message = message
        self.position = position


class ExpectedError(ParseError):
    """A token of some category was expected but another one was found."""

    def __init__(self, expected: str, got: Token) -> None:
        super().__init__(f"Expected {expected}, got {got}", got.position)
        self.expected = expected
        self.got = got


class WrongTokenError(ParseError):
    """One specific token kind was expected but another one was found."""

    def __init__(self, expected: TokenKind, got: Token) -> None:
        super().__init__(f"Expected token {expected.value}, got {got}", got.position)
        self.expected = expected
        self.got = got


class UnexpectedEofError(ParseError):
    """The input ended in the middle of a construct."""

    def __init__(self, position: int | None = None) -> None:
        super().__init__("Unexpected end of file", position)


class UndefinedTypeError(ParseError):
    """A named type reference was never declared."""

    def __init__(self, name: str, position: int | None = None) -> None:
        super().__init__(f"Reference to undefined type: {name}", position)
        self.name = name


class MissingIOError(ParseError):
    """The route declares neither an input nor an output."""

    def __init__(self, position: int | None = None) -> None:
        super().__init__("Route must have input, output, or both", position)


class UnknownMetadataKeyError(ParseError):
    """A metadata key other than name, description or authed was used."""

    def __init__(self, key: str, position: int) -> None:
        super().__init__(f"Unknown metadata key: {key}", position)
        self.key = key


class DanglingAnnotationError(ParseError):
    """Annotations were not followed by a struct or enum definition."""

    def __init__(self, annotations: tuple[str, ...]) -> None:
        names = ", ".join(f"@{name}" for name in annotations)
        super().__init__(f"Annotations must precede a struct or enum definition: {names}")
        self.annotations = annotations


class LexerFailure(ParseError):
    """Wraps a lexical error raised while the parser was pulling tokens."""

    def __init__(self, error: LexError) -> None:
        super().__init__(f"Lexer error: {error}")
        self.position = error.position
        self.error = error
