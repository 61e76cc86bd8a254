"""
Swift client surface.

For every route this emits one ``APIClient`` extension method that calls the
shared fetcher, followed by Codable declarations for the inline input and
output types and for every helper struct and enum of the schema.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from fen_codegen.generator.context import (
    Context,
    ImportDetection,
    Rendered,
    Requirement,
    Role,
    collect_requirements,
)
from fen_codegen.parser.ast import (
    ArrayType,
    EnumDefinition,
    Field,
    FileNode,
    NamedType,
    OptionalType,
    Primitive,
    PrimitiveType,
    StructDefinition,
    Type,
    Variant,
)
from fen_codegen.utils.string_case import snake_to_camel

if TYPE_CHECKING:
    from fen_codegen.generator.template_engine import FenTemplateEngine

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_PREFIX: Final = "/_fen_"
NO_DATA: Final = "NoData"

SWIFT_PRIMITIVES: Final = {
    Primitive.INT: "Int",
    Primitive.FLOAT: "Double",
    Primitive.STRING: "String",
    Primitive.BOOL: "Bool",
    Primitive.DATE: "Date",
    Primitive.UUID: "UUID",
}

_FOUNDATION_PRIMITIVES: Final = frozenset({Primitive.DATE, Primitive.UUID})
_FOUNDATION_MARKERS: Final = ("Date", "UUID")
_FOUNDATION_IMPORT: Final = "import Foundation\n\n"


@dataclass(frozen=True)
class _FieldView:
    name: str
    type: str
    optional: bool


@dataclass(frozen=True)
class _VariantView:
    name: str
    type: str | None
    decode_method: str
    decoded_type: str | None

    @property
    def declaration(self) -> str:
        return self.name if self.type is None else f"{self.name}({self.type})"


def _conformance(role: Role | None) -> str:
    return "Codable" if role is None else role.value


class SwiftClientGenerator:
    """Renders AST nodes as Swift client code."""

    def __init__(
        self,
        template_engine: FenTemplateEngine,
        *,
        route_prefix: str = DEFAULT_ROUTE_PREFIX,
        import_detection: ImportDetection = ImportDetection.STRUCTURAL,
    ) -> None:
        self.template_engine = template_engine
        self.route_prefix = route_prefix
        self.import_detection = import_detection

    def render(
        self,
        node: FileNode | StructDefinition | EnumDefinition | Field | Variant | Type,
        context: Context | None = None,
    ) -> Rendered:
        """Render any AST node as Swift.

        Args:
            node: The node to render.
            context: Naming override and serialization role, if any.

        Returns:
            The Swift source and the imports it needs.
        """
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
                requires = {Requirement.FOUNDATION} if primitive in _FOUNDATION_PRIMITIVES else set()
                return Rendered(SWIFT_PRIMITIVES[primitive], frozenset(requires))
            case NamedType(name=name):
                return Rendered(name)
            case OptionalType(inner=inner):
                rendered = self.render_type(inner)
                return Rendered(f"{rendered.text}?", rendered.requires)
            case ArrayType(element=element):
                rendered = self.render_type(element)
                return Rendered(f"[{rendered.text}]", rendered.requires)
        msg = f"Unsupported type node: {type_!r}"
        raise TypeError(msg)

    def render_field(self, field: Field) -> Rendered:
        """Render a field as a ``name: Type`` pair with a camelCased name."""
        rendered = self.render_type(field.type)
        return Rendered(f"{snake_to_camel(field.name)}: {rendered.text}", rendered.requires)

    def render_variant(self, variant: Variant) -> Rendered:
        """Render a variant as it appears after ``case``."""
        view, requires = self._variant_view(variant)
        return Rendered(view.declaration, requires)

    def render_struct(self, struct: StructDefinition, context: Context | None = None) -> Rendered:
        """Render a struct declaration.

        A struct with an ``id`` field is Identifiable. When any field is
        optional the struct gets explicit coding keys and an encoder that
        writes ``null`` for absent values instead of omitting the key.
        """
        context = context or Context()
        rendered_types = [self.render_type(f.type) for f in struct.fields]
        fields = [
            _FieldView(snake_to_camel(f.name), rendered.text, isinstance(f.type, OptionalType))
            for f, rendered in zip(struct.fields, rendered_types, strict=True)
        ]

        conformances = [_conformance(context.role), "Equatable"]
        if struct.has_id_field:
            conformances.append("Identifiable")

        text = self.template_engine.render_template(
            "client/struct.swift.j2",
            {
                "name": context.name_for(struct.name),
                "conformances": conformances,
                "fields": fields,
                "custom_encoding": struct.has_optional_field and context.role is not Role.DECODABLE,
            },
        )
        return Rendered(text, collect_requirements(rendered_types))

    def render_enum(self, enum: EnumDefinition, context: Context | None = None) -> Rendered:
        """Render an enum as a ``type``/``value`` tagged Codable enum."""
        context = context or Context()
        name = context.name_for(enum.name)

        variants: list[_VariantView] = []
        requires: set[Requirement] = set()
        for variant in enum.variants:
            view, variant_requires = self._variant_view(variant)
            variants.append(view)
            requires |= variant_requires

        text = self.template_engine.render_template(
            "client/enum.swift.j2",
            {
                "name": name,
                "conformances": [_conformance(context.role), "Equatable"],
                "variants": variants,
                "has_values": enum.has_associated_values,
                "type_enum": f"{name}Type",
                "decodes": context.role is not Role.ENCODABLE,
                "encodes": context.role is not Role.DECODABLE,
            },
        )
        return Rendered(text, frozenset(requires))

    def _variant_view(self, variant: Variant) -> tuple[_VariantView, frozenset[Requirement]]:
        name = snake_to_camel(variant.name)
        if variant.type is None:
            return _VariantView(name, None, "decode", None), frozenset()

        rendered = self.render_type(variant.type)
        if isinstance(variant.type, OptionalType):
            decoded = self.render_type(variant.type.inner).text
            return _VariantView(name, rendered.text, "decodeIfPresent", decoded), rendered.requires
        return _VariantView(name, rendered.text, "decode", rendered.text), rendered.requires

    def render_route(self, route: FileNode, context: Context | None = None) -> Rendered:
        """Render the complete Swift file body for a route.

        Args:
            route: The parsed route.
            context: ``override_name`` replaces the route name.

        Returns:
            The extension method followed by every declaration of the route,
            with ``import Foundation`` prepended when needed.
        """
        context = context or Context()
        name = context.name_for(route.name)
        logger.debug("Rendering Swift client for %s", name)

        parts: list[Rendered] = []
        parameters: list[str] = []
        payload: str | None = None

        match route.input:
            case None:
                pass
            case StructDefinition(fields=fields):
                rendered_fields = [self.render_field(f) for f in fields]
                parts.extend(rendered_fields)
                parameters.extend(r.text for r in rendered_fields)
                arguments = ", ".join(f"{arg}: {arg}" for arg in (snake_to_camel(f.name) for f in fields))
                payload = f"{name}Input({arguments})"
            case EnumDefinition():
                parameters.append(f"input: {name}Input")
                payload = "input"
            case input_type:
                rendered = self.render_type(input_type)
                parts.append(rendered)
                parameters.append(f"input: {rendered.text}")
                payload = "input"

        if route.authed:
            parameters.append("sessionToken: String")

        return_type = self._return_type(route, name)
        parts.append(return_type)

        function = self.template_engine.render_template(
            "client/route.swift.j2",
            {
                "name": name,
                "description": route.description,
                "parameters": parameters,
                "return_type": return_type.text,
                "payload": payload,
                "session_token": "sessionToken" if route.authed else "nil",
                "route_prefix": self.route_prefix,
            },
        )

        declarations: list[Rendered] = []
        for io_type, suffix in ((route.input, "Input"), (route.output, "Output")):
            if isinstance(io_type, StructDefinition | EnumDefinition):
                declarations.append(self.render(io_type, Context(override_name=f"{name}{suffix}")))
        declarations.extend(self.render_struct(s) for s in route.structs)
        declarations.extend(self.render_enum(e) for e in route.enums)

        sections = [function]
        for declaration in declarations:
            sections.extend(["", declaration.text])
        code = "\n".join(sections)

        requires = collect_requirements([*parts, *declarations])
        if self._needs_foundation(code, requires):
            code = _FOUNDATION_IMPORT + code
        return Rendered(code, requires)

    def _return_type(self, route: FileNode, name: str) -> Rendered:
        match route.output:
            case None:
                return Rendered(NO_DATA)
            case StructDefinition() | EnumDefinition():
                return Rendered(f"{name}Output")
            case output_type:
                return self.render_type(output_type)

    def _needs_foundation(self, code: str, requires: frozenset[Requirement]) -> bool:
        if self.import_detection is ImportDetection.TEXTUAL:
            return any(marker in code for marker in _FOUNDATION_MARKERS)
        return Requirement.FOUNDATION in requires
