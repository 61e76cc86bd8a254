"""
Rust server surface.

For every route this emits a module holding an ``Input`` and/or ``Output``
type, either aliases of a bare type or full serde declarations, followed by
the helper structs and enums of the schema.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from fen_codegen.generator.context import (
    Context,
    ImportDetection,
    Rendered,
    Requirement,
    collect_requirements,
)
from fen_codegen.parser.ast import (
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
from fen_codegen.utils.string_case import escape_rust_keyword, pascal_to_snake, snake_to_pascal

if TYPE_CHECKING:
    from fen_codegen.generator.template_engine import FenTemplateEngine

logger = logging.getLogger(__name__)

RUST_PRIMITIVES: Final = {
    Primitive.INT: "isize",
    Primitive.FLOAT: "f64",
    Primitive.STRING: "String",
    Primitive.BOOL: "bool",
    Primitive.DATE: "DateTime<Utc>",
    Primitive.UUID: "Uuid",
}

_PRIMITIVE_REQUIREMENTS: Final = {
    Primitive.DATE: Requirement.CHRONO,
    Primitive.UUID: Requirement.UUID,
}

# Annotation that maps an enum onto a native database enum type
SQLX_TYPE_ANNOTATION: Final = "sqlxType"

DERIVES: Final = ("Serialize", "Deserialize", "Debug", "Clone", "Eq", "PartialEq")
_SERDE: Final = frozenset({Requirement.SERIALIZE, Requirement.DESERIALIZE})

_TEXTUAL_MARKERS: Final = {
    Requirement.CHRONO: "DateTime<Utc>",
    Requirement.SERIALIZE: "Serialize",
    Requirement.DESERIALIZE: "Deserialize",
    Requirement.UUID: "Uuid",
}


def import_lines(requires: frozenset[Requirement]) -> list[str]:
    """Return the ``use`` lines for a set of requirements, in emission order."""
    lines: list[str] = []
    if Requirement.CHRONO in requires:
        lines.append("use chrono::{DateTime, Utc};")
    if _SERDE <= requires:
        lines.append("use serde::{Deserialize, Serialize};")
    elif Requirement.SERIALIZE in requires:
        lines.append("use serde::Serialize;")
    elif Requirement.DESERIALIZE in requires:
        lines.append("use serde::Deserialize;")
    if Requirement.UUID in requires:
        lines.append("use uuid::Uuid;")
    return lines


class RustServerGenerator:
    """Renders AST nodes as Rust server code."""

    def __init__(
        self,
        template_engine: FenTemplateEngine,
        *,
        import_detection: ImportDetection = ImportDetection.STRUCTURAL,
    ) -> None:
        self.template_engine = template_engine
        self.import_detection = import_detection

    def render(
        self,
        node: FileNode | StructDefinition | EnumDefinition | Field | Variant | Type,
        context: Context | None = None,
    ) -> Rendered:
        """Render any AST node as Rust; see ``SwiftClientGenerator.render``."""
        context = context or Context()
        match node:
            case FileNode():
                return self.render_route(node, context)
            case StructDefinition():
                return self.render_struct(node, context)
            case EnumDefinition():
                return self.render_enum(node, context)
            case Field():
                return self.render_field(node)
            case Variant():
                return self.render_variant(node)
            case _:
                return self.render_type(node)

    def render_type(self, type_: Type) -> Rendered:
        match type_:
            case PrimitiveType(primitive=primitive):
                requirement = _PRIMITIVE_REQUIREMENTS.get(primitive)
                return Rendered(RUST_PRIMITIVES[primitive], frozenset({requirement} if requirement else ()))
            case NamedType(name=name):
                return Rendered(name)
            case OptionalType(inner=inner):
                rendered = self.render_type(inner)
                return Rendered(f"Option<{rendered.text}>", rendered.requires)
            case ArrayType(element=element):
                rendered = self.render_type(element)
                return Rendered(f"Vec<{rendered.text}>", rendered.requires)
        msg = f"Unsupported type node: {type_!r}"
        raise TypeError(msg)

    def render_field(self, field: Field) -> Rendered:
        """Render a public struct field; serde renames it to camelCase on the wire."""
        rendered = self.render_type(field.type)
        return Rendered(f"pub {escape_rust_keyword(field.name)}: {rendered.text}", rendered.requires)

    def render_variant(self, variant: Variant) -> Rendered:
        name = snake_to_pascal(variant.name)
        if variant.type is None:
            return Rendered(name)
        rendered = self.render_type(variant.type)
        return Rendered(f"{name}({rendered.text})", rendered.requires)

    def render_struct(self, struct: StructDefinition, context: Context | None = None) -> Rendered:
        context = context or Context()
        rendered_types = [self.render_type(f.type) for f in struct.fields]
        fields = [
            {"name": escape_rust_keyword(f.name), "type": rendered.text}
            for f, rendered in zip(struct.fields, rendered_types, strict=True)
        ]
        text = self.template_engine.render_template(
            "server/struct.rs.j2",
            {"name": context.name_for(struct.name), "derives": DERIVES, "fields": fields},
        )
        return Rendered(text, collect_requirements(rendered_types) | _SERDE)

    def render_enum(self, enum: EnumDefinition, context: Context | None = None) -> Rendered:
        """Render an enum as an internally tagged serde enum.

        Variants with data are adjacently tagged under ``value``. The
        ``@sqlxType`` annotation also derives ``sqlx::Type`` with a database
        type name of the snake_cased enum name.
        """
        context = context or Context()
        name = context.name_for(enum.name)
        variants = [self.render_variant(v) for v in enum.variants]

        sqlx_type = SQLX_TYPE_ANNOTATION in enum.annotations
        derives = [*DERIVES, "sqlx::Type"] if sqlx_type else list(DERIVES)

        serde_options = ['tag = "type"']
        if enum.has_associated_values:
            serde_options.append('content = "value"')
        serde_options.append('rename_all = "camelCase"')

        text = self.template_engine.render_template(
            "server/enum.rs.j2",
            {
                "name": name,
                "derives": derives,
                "serde_options": serde_options,
                "sqlx_type_name": pascal_to_snake(name) if sqlx_type else None,
                "variants": [v.text for v in variants],
            },
        )
        return Rendered(text, collect_requirements(variants) | _SERDE)

    def render_io(self, io_type: IOType, name: str) -> Rendered:
        """Render a route's input or output under the given type name."""
        match io_type:
            case StructDefinition() | EnumDefinition():
                return self.render(io_type, Context(override_name=name))
            case _:
                rendered = self.render_type(io_type)
                return Rendered(f"pub type {name} = {rendered.text};", rendered.requires)

    def render_route(self, route: FileNode, context: Context | None = None) -> Rendered:
        """Render the complete Rust module body for a route.

        Args:
            route: The parsed route.
            context: Unused beyond the common signature; routes are always
                emitted as ``Input`` and ``Output``.

        Returns:
            The module body with its ``use`` lines prepended.
        """
        logger.debug("Rendering Rust server module for %s", (context or Context()).name_for(route.name))

        parts: list[Rendered] = []
        sections: list[str] = []
        if route.input is not None:
            parts.append(self.render_io(route.input, "Input"))
            sections.append(parts[-1].text)
        if route.output is not None:
            if sections:
                sections.append("")
            parts.append(self.render_io(route.output, "Output"))
            sections.append(parts[-1].text)

        for declaration in [*map(self.render_struct, route.structs), *map(self.render_enum, route.enums)]:
            parts.append(declaration)
            sections.extend(["", declaration.text])

        code = "\n".join(sections)
        requires = collect_requirements(parts)
        if self.import_detection is ImportDetection.TEXTUAL:
            requires = frozenset(r for r, marker in _TEXTUAL_MARKERS.items() if marker in code)

        header = import_lines(requires)
        if header:
            code = "\n".join(header) + "\n\n" + code
        return Rendered(code, requires)
