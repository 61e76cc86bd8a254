"""
Utilities Module for Fen Code Generation

This module provides string case conversions and file operations shared by
the parser, the generators and the command-line interface.
"""

from .file_utils import restore_on_failure, write_files_to_disk
from .string_case import (
    escape_rust_keyword,
    pascal_to_camel,
    pascal_to_kebab,
    pascal_to_snake,
    snake_to_camel,
    snake_to_pascal,
)

__all__ = [
    "escape_rust_keyword",
    "pascal_to_camel",
    "pascal_to_kebab",
    "pascal_to_snake",
    "restore_on_failure",
    "snake_to_camel",
    "snake_to_pascal",
    "write_files_to_disk",
]
