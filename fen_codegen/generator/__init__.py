"""
Fen Code Generator Module

This module provides Jinja2-based code generation for the Swift client and
Rust server surfaces of parsed Fen routes.
"""

from .context import Context, ImportDetection, Rendered, Requirement, Role
from .rust_server import RustServerGenerator
from .swift_client import SwiftClientGenerator
from .template_engine import FenCodeGenerator, FenTemplateEngine, GenerationError

__all__ = [
    "Context",
    "FenCodeGenerator",
    "FenTemplateEngine",
    "GenerationError",
    "ImportDetection",
    "Rendered",
    "Requirement",
    "Role",
    "RustServerGenerator",
    "SwiftClientGenerator",
]
