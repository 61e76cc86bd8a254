"""
Byte-level scanner for .fen schema files.

The lexer works on the UTF-8 bytes of the source so that every position it
reports is an exact byte offset. It keeps one token of lookahead and can be
rewound with ``reset`` because the parser walks the same source several times.
"""

from __future__ import annotations

from typing import Final

from fen_codegen.parser.errors import (
    ForbiddenCharacterError,
    InvalidEncodingError,
    LexError,
    UnterminatedStringError,
)
from fen_codegen.parser.tokens import BOOL_LITERALS, KEYWORDS, SINGLE_CHAR_TOKENS, Token, TokenKind

_WHITESPACE: Final = frozenset(b" \t\n\r\x0b\x0c")
_FORBIDDEN: Final = frozenset(b"%!&*+/<>=.;'\\`~|^")
_DASH: Final = ord("-")
_QUOTE: Final = ord('"')
_NEWLINE: Final = ord("\n")
_RULE_LENGTH: Final = 3

# Bytes that end an identifier or keyword
_DELIMITERS: Final = _WHITESPACE | _FORBIDDEN | frozenset(SINGLE_CHAR_TOKENS) | {_DASH, _QUOTE}


class Lexer:
    """Produces tokens from Fen source text one at a time.

    Once a call raises, the lexer is poisoned: every later ``next_tok`` and
    ``peek_tok`` returns ``None`` until ``reset`` is called.
    """

    def __init__(self, source: str | bytes) -> None:
        self.source = source.encode("utf-8") if isinstance(source, str) else bytes(source)
        self.position = 0
        self._peeked: Token | None = None
        self._poisoned = False

    def reset(self) -> None:
        """Rewind to the start of the source and clear any error state."""
        self.position = 0
        self._peeked = None
        self._poisoned = False

    def peek_tok(self) -> Token | None:
        """Return the next token without consuming it.

        Raises:
            LexError: If the next token cannot be scanned.
        """
        if self._peeked is None:
            self._peeked = self.next_tok()
        return self._peeked

    def next_tok(self) -> Token | None:
        """Consume and return the next token, or ``None`` at end of input.

        Raises:
            LexError: If the next token cannot be scanned.
        """
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token

        if self._poisoned:
            return None

        try:
            return self._scan()
        except LexError:
            self._poisoned = True
            raise

    def _scan(self) -> Token | None:
        newline_before = self._skip_whitespace()
        if self.position >= len(self.source):
            return None

        start = self.position
        byte = self.source[start]

        if byte in SINGLE_CHAR_TOKENS:
            self.position += 1
            return Token(SINGLE_CHAR_TOKENS[byte], start, newline_before=newline_before)

        if byte in _FORBIDDEN:
            self.position += 1
            raise ForbiddenCharacterError(chr(byte), start)

        if byte == _DASH:
            return self._scan_rule(start, newline_before)

        if byte == _QUOTE:
            return self._scan_string(start, newline_before)

        return self._scan_word(start, newline_before)

    def _skip_whitespace(self) -> bool:
        saw_newline = False
        while self.position < len(self.source) and self.source[self.position] in _WHITESPACE:
            saw_newline = saw_newline or self.source[self.position] == _NEWLINE
            self.position += 1
        return saw_newline

    def _scan_rule(self, start: int, newline_before: bool) -> Token:
        end = start
        while end < len(self.source) and self.source[end] == _DASH:
            end += 1
        self.position = end

        if end - start != _RULE_LENGTH:
            offending = start + _RULE_LENGTH if end - start > _RULE_LENGTH else start
            raise ForbiddenCharacterError("-", offending)
        return Token(TokenKind.RULE, start, newline_before=newline_before)

    def _scan_string(self, start: int, newline_before: bool) -> Token:
        end = self.source.find(b'"', start + 1)
        if end == -1:
            self.position = len(self.source)
            raise UnterminatedStringError(start)
        self.position = end + 1

        try:
            text = self.source[start + 1 : end].decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(start + 1 + e.start) from e
        return Token(TokenKind.STRING_LITERAL, start, text, newline_before=newline_before)

    def _scan_word(self, start: int, newline_before: bool) -> Token:
        end = start
        while end < len(self.source) and self.source[end] not in _DELIMITERS:
            end += 1
        self.position = end

        try:
            word = self.source[start:end].decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(start + e.start) from e

        if word in KEYWORDS:
            return Token(KEYWORDS[word], start, newline_before=newline_before)
        if word in BOOL_LITERALS:
            return Token(TokenKind.BOOL_LITERAL, start, BOOL_LITERALS[word], newline_before=newline_before)
        return Token(TokenKind.IDENTIFIER, start, word, newline_before=newline_before)


def tokenize(source: str | bytes) -> list[Token]:
    """Scan a whole source into a list of tokens, without a trailing EOF token.

    Raises:
        LexError: On the first token that cannot be scanned.
    """
    lexer = Lexer(source)
    tokens: list[Token] = []
    while (token := lexer.next_tok()) is not None:
        tokens.append(token)
    return tokens
