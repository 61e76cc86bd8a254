"""
Typed syntax tree for one parsed .fen schema.

Every node is an immutable value; sequences are tuples kept in declaration
order, which is also the order code is emitted in.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Primitive(enum.Enum):
    """Built-in scalar types."""

    INT = "Int"
    FLOAT = "Float"
    STRING = "String"
    BOOL = "Bool"
    DATE = "Date"
    UUID = "UUID"


@dataclass(frozen=True)
class PrimitiveType:
    primitive: Primitive


@dataclass(frozen=True)
class NamedType:
    """Reference to a struct or enum declared in the same file."""

    name: str


@dataclass(frozen=True)
class OptionalType:
    inner: Type


@dataclass(frozen=True)
class ArrayType:
    element: Type


Type = PrimitiveType | NamedType | OptionalType | ArrayType


@dataclass(frozen=True)
class Field:
    name: str
    type: Type


@dataclass(frozen=True)
class Variant:
    """Enum variant with an optional associated value type."""

    name: str
    type: Type | None = None


@dataclass(frozen=True)
class StructDefinition:
    """A struct declaration.

    Attributes:
        name: Type name; ``input`` or ``output`` for inline I/O structs.
        fields: Fields in declaration order.
        annotations: ``@tag`` markers that preceded the declaration.
    """

    name: str
    fields: tuple[Field, ...] = ()
    annotations: tuple[str, ...] = ()

    @property
    def has_optional_field(self) -> bool:
        return any(isinstance(f.type, OptionalType) for f in self.fields)

    @property
    def has_id_field(self) -> bool:
        return any(f.name == "id" for f in self.fields)


@dataclass(frozen=True)
class EnumDefinition:
    """An enum declaration, see ``StructDefinition`` for the attributes."""

    name: str
    variants: tuple[Variant, ...] = ()
    annotations: tuple[str, ...] = ()

    @property
    def has_associated_values(self) -> bool:
        return any(v.type is not None for v in self.variants)


IOType = Type | StructDefinition | EnumDefinition


@dataclass(frozen=True)
class FileNode:
    """Root node: one route.

    At least one of ``input`` and ``output`` is set after a successful parse.
    """

    name: str
    description: str | None = None
    authed: bool = False
    input: IOType | None = None
    output: IOType | None = None
    structs: tuple[StructDefinition, ...] = ()
    enums: tuple[EnumDefinition, ...] = ()
