"""
Fen Schema Parser Module

This module turns .fen schema text into a typed syntax tree: a byte-level
lexer, the two-pass parser and the immutable AST it produces.
"""

from .ast import (
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
from .errors import (
    DanglingAnnotationError,
    ExpectedError,
    FenError,
    ForbiddenCharacterError,
    InvalidEncodingError,
    LexError,
    LexerFailure,
    MissingIOError,
    ParseError,
    UndefinedTypeError,
    UnexpectedEofError,
    UnknownMetadataKeyError,
    UnterminatedStringError,
    WrongTokenError,
)
from .fen_parser import FenParser, parse
from .lexer import Lexer, tokenize
from .tokens import Token, TokenKind

__all__ = [
    "ArrayType",
    "DanglingAnnotationError",
    "EnumDefinition",
    "ExpectedError",
    "FenError",
    "FenParser",
    "Field",
    "FileNode",
    "ForbiddenCharacterError",
    "IOType",
    "InvalidEncodingError",
    "LexError",
    "Lexer",
    "LexerFailure",
    "MissingIOError",
    "NamedType",
    "OptionalType",
    "ParseError",
    "Primitive",
    "PrimitiveType",
    "StructDefinition",
    "Token",
    "TokenKind",
    "Type",
    "UndefinedTypeError",
    "UnexpectedEofError",
    "UnknownMetadataKeyError",
    "UnterminatedStringError",
    "Variant",
    "WrongTokenError",
    "parse",
    "tokenize",
]
