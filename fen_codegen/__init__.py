"""
Fen Code Generator

Compiles .fen route schemas into a Swift API client and Rust server types.
"""

__version__ = "0.6.0"

from .generator import FenCodeGenerator, FenTemplateEngine  # noqa: E402
from .parser import FileNode, parse  # noqa: E402

__all__ = [
    "FenCodeGenerator",
    "FenTemplateEngine",
    "FileNode",
    "__version__",
    "parse",
]
