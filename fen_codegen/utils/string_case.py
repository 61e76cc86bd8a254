"""
String case conversion utilities for Fen code generation.

Route, field and variant names are written in the schema as PascalCase or
snake_case and converted to the conventions of each target language. Every
conversion is a single left-to-right scan that only changes the case of
ASCII letters.
"""

from typing import Final

# Reserved Rust keywords that need to be escaped with r#
RUST_KEYWORDS: Final = frozenset(
    {
        # Strict keywords
        "as",
        "break",
        "const",
        "continue",
        "else",
        "enum",
        "extern",
        "false",
        "fn",
        "for",
        "if",
        "impl",
        "in",
        "let",
        "loop",
        "match",
        "mod",
        "move",
        "mut",
        "pub",
        "ref",
        "return",
        "static",
        "struct",
        "trait",
        "true",
        "type",
        "unsafe",
        "use",
        "where",
        "while",
        # Weak and reserved keywords
        "async",
        "await",
        "dyn",
        "try",
        "abstract",
        "become",
        "box",
        "do",
        "final",
        "macro",
        "override",
        "priv",
        "typeof",
        "unsized",
        "virtual",
        "yield",
    }
)


def _upper(char: str) -> str:
    return char.upper() if char.isascii() else char


def _lower(char: str) -> str:
    return char.lower() if char.isascii() else char


def _is_upper(char: str) -> bool:
    return char.isascii() and char.isupper()


def _split_words(string: str, separator: str) -> str:
    result: list[str] = []
    for i, char in enumerate(string):
        if i > 0 and _is_upper(char):
            result.append(separator)
        result.append(_lower(char))
    return "".join(result)


def _join_words(string: str, *, capitalize_first: bool) -> str:
    result: list[str] = []
    capitalize = capitalize_first
    for char in string:
        if char == "_":
            capitalize = True
        elif capitalize:
            result.append(_upper(char))
            capitalize = False
        else:
            result.append(char)
    return "".join(result)


def snake_to_camel(string: str) -> str:
    """Convert snake_case into camelCase.

    Args:
        string: String to convert.

    Returns:
        Camel case string.

    Examples:
        >>> snake_to_camel("is_completed")
        'isCompleted'
        >>> snake_to_camel("id")
        'id'
    """
    return _join_words(string, capitalize_first=False)


def snake_to_pascal(string: str) -> str:
    """Convert snake_case into PascalCase.

    Examples:
        >>> snake_to_pascal("not_started")
        'NotStarted'
    """
    return _join_words(string, capitalize_first=True)


def pascal_to_camel(string: str) -> str:
    """Convert PascalCase into camelCase by lowering the first letter.

    Examples:
        >>> pascal_to_camel("GetTodos")
        'getTodos'
    """
    return _lower(string[:1]) + string[1:]


def pascal_to_kebab(string: str) -> str:
    """Convert PascalCase into kebab-case.

    Examples:
        >>> pascal_to_kebab("ToggleTodoCompletion")
        'toggle-todo-completion'
    """
    return _split_words(string, "-")


def pascal_to_snake(string: str) -> str:
    """Convert PascalCase into snake_case.

    Examples:
        >>> pascal_to_snake("FamiliarityLevel")
        'familiarity_level'
    """
    return _split_words(string, "_")


def escape_rust_keyword(name: str) -> str:
    """Escape Rust keywords with r# prefix if necessary.

    Args:
        name: The identifier name to check.

    Returns:
        The name with r# prefix if it's a Rust keyword, otherwise unchanged.

    Examples:
        >>> escape_rust_keyword("type")
        'r#type'
        >>> escape_rust_keyword("name")
        'name'
    """
    return f"r#{name}" if name in RUST_KEYWORDS else name
