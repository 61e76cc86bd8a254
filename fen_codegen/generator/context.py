"""
Emission context and capability flags shared by both generator surfaces.

Renderers never look at or change the AST beyond reading it; everything that
depends on where a node is emitted travels through ``Context``. Each renderer
returns its text together with the set of imports the text depends on, so the
route-level emitter decides on import lines without inspecting rendered code.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass


class Role(enum.Enum):
    """Serialization direction a standalone declaration is used in."""

    ENCODABLE = "Encodable"
    DECODABLE = "Decodable"


class Requirement(enum.Enum):
    """Something a rendered fragment needs imported to compile."""

    # Swift
    FOUNDATION = "Foundation"
    # Rust
    CHRONO = "chrono"
    UUID = "uuid"
    SERIALIZE = "serde::Serialize"
    DESERIALIZE = "serde::Deserialize"


class ImportDetection(enum.Enum):
    """How a route emitter decides which import lines to prepend.

    STRUCTURAL uses the requirements reported by the renderers. TEXTUAL
    searches the rendered body for type names, which also fires when a field
    or description merely contains one (``dueDate`` pulls in Foundation).
    TEXTUAL exists to reproduce files generated by earlier Fen releases.
    """

    STRUCTURAL = "structural"
    TEXTUAL = "textual"


@dataclass(frozen=True)
class Context:
    """Per-call emission settings.

    Attributes:
        override_name: Name to declare the node under instead of its own,
            e.g. ``GetTodosInput`` for an inline input struct.
        role: Restricts a client declaration to one serialization direction;
            ``None`` means both.
    """

    override_name: str | None = None
    role: Role | None = None

    def name_for(self, name: str) -> str:
        return self.override_name or name


@dataclass(frozen=True)
class Rendered:
    """Generated text and the imports it requires."""

    text: str
    requires: frozenset[Requirement] = frozenset()


def collect_requirements(parts: Iterable[Rendered]) -> frozenset[Requirement]:
    """Union of the requirements of several fragments."""
    requires: set[Requirement] = set()
    for part in parts:
        requires |= part.requires
    return frozenset(requires)
