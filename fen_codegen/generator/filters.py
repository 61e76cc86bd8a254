"""
Jinja2 filters for Fen code generation.

This module provides the filters registered on the Fen template environment
for rendering Swift and Rust source.
"""

from __future__ import annotations

from fen_codegen.utils.string_case import pascal_to_camel, pascal_to_kebab, pascal_to_snake

_DOC_PREFIX = "/// "


def swift_doc_comment(text: str | None, indent: int = 0) -> str:
    """Convert text to Swift doc comment lines.

    Args:
        text: The text to convert to doc comments.
        indent: Number of spaces for base indentation.

    Returns:
        One ``///`` line per line of text, or an empty string.

    Example:
        >>> swift_doc_comment("Fetches all todos", indent=2)
        '  /// Fetches all todos'
    """
    if not text or not text.strip():
        return ""

    indent_str = " " * indent
    return "\n".join(f"{indent_str}{_DOC_PREFIX}{line.strip()}".rstrip() for line in text.strip().splitlines())


def swift_string_literal(text: str) -> str:
    """Format text as a Swift string literal.

    Example:
        >>> swift_string_literal('say "hi"')
        '"say \\\\"hi\\\\""'
    """
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


# Filter registry for easy import
FILTERS = {
    "swift_doc_comment": swift_doc_comment,
    "swift_string_literal": swift_string_literal,
    "camel_case": pascal_to_camel,
    "kebab_case": pascal_to_kebab,
    "snake_case": pascal_to_snake,
}
