"""
Fen Template Engine for route code generation

This module wires the Jinja2 environment used by both generator surfaces and
assembles the complete set of client and server files for a list of routes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from fen_codegen import __version__
from fen_codegen.generator.context import ImportDetection
from fen_codegen.generator.filters import FILTERS
from fen_codegen.generator.rust_server import RustServerGenerator
from fen_codegen.generator.swift_client import DEFAULT_ROUTE_PREFIX, SwiftClientGenerator
from fen_codegen.parser.ast import FileNode
from fen_codegen.parser.errors import FenError
from fen_codegen.utils.string_case import pascal_to_snake

logger = logging.getLogger(__name__)

SWIFT_API_FILE = "Api.swift"
RUST_MOD_FILE = "mod.rs"


class GenerationError(FenError):
    """Raised when a set of routes cannot be turned into files."""


class FenTemplateEngine:
    """Template engine for generating Swift and Rust code."""

    def __init__(self, template_dir: Path | None = None) -> None:
        """Initialize the template engine."""
        if template_dir is None:
            current_dir = Path(__file__).parent
            template_dir = current_dir.parent / "templates"

        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters.update(FILTERS)

    def render_template(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template with the given context."""
        template = self.env.get_template(template_name)
        return template.render(**context)


class FenCodeGenerator:
    """Main code generator producing every file for a set of routes."""

    def __init__(
        self,
        template_engine: FenTemplateEngine | None = None,
        *,
        version: str = __version__,
        route_prefix: str = DEFAULT_ROUTE_PREFIX,
        import_detection: ImportDetection = ImportDetection.STRUCTURAL,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the code generator.

        Args:
            template_engine: Engine to render with; defaults to the bundled templates.
            version: Fen version stamped into every file banner.
            route_prefix: Path segment every client call is prefixed with.
            import_detection: How route files decide on their import lines.
            clock: Source of the banner timestamp.
        """
        self.template_engine = template_engine or FenTemplateEngine()
        self.version = version
        self.route_prefix = route_prefix
        self.clock = clock
        self.client = SwiftClientGenerator(
            self.template_engine,
            route_prefix=route_prefix,
            import_detection=import_detection,
        )
        self.server = RustServerGenerator(self.template_engine, import_detection=import_detection)

    def banner(self) -> str:
        """Render the "do not edit" header placed at the top of every file."""
        return self.template_engine.render_template(
            "banner.j2",
            {"version": self.version, "timestamp": self.clock()},
        )

    def generate_client(
        self,
        routes: Sequence[FileNode],
        output_dir: Path,
        endpoint: str,
    ) -> dict[Path, str]:
        """Generate the Swift client files.

        Args:
            routes: Parsed routes.
            output_dir: Directory the files belong in.
            endpoint: Base URL the bundled ``LiveFetcher`` talks to.

        Returns:
            ``Api.swift`` plus one ``<RouteName>.swift`` per route.
        """
        self._check_unique_names(routes, lambda route: route.name)
        output_dir = Path(output_dir)
        banner = self.banner()

        api = self.template_engine.render_template(
            "client/Api.swift.j2",
            {"endpoint": endpoint},
        )
        files = {output_dir / SWIFT_API_FILE: _with_banner(banner, api)}
        for route in routes:
            files[output_dir / f"{route.name}.swift"] = _with_banner(banner, self.client.render_route(route).text)

        logger.info("Generated %d Swift client files in %s", len(files), output_dir)
        return files

    def generate_server(self, routes: Sequence[FileNode], output_dir: Path) -> dict[Path, str]:
        """Generate the Rust server files.

        Args:
            routes: Parsed routes.
            output_dir: Directory the files belong in.

        Returns:
            ``mod.rs`` plus one ``<route_name>.rs`` per route.
        """
        self._check_unique_names(routes, lambda route: pascal_to_snake(route.name))
        output_dir = Path(output_dir)
        banner = self.banner()

        module = self.template_engine.render_template(
            "server/mod.rs.j2",
            {"routes": routes, "route_prefix": self.route_prefix},
        )
        files = {output_dir / RUST_MOD_FILE: _with_banner(banner, module)}
        for route in routes:
            files[output_dir / f"{pascal_to_snake(route.name)}.rs"] = _with_banner(
                banner, self.server.render_route(route).text
            )

        logger.info("Generated %d Rust server files in %s", len(files), output_dir)
        return files

    @staticmethod
    def _check_unique_names(routes: Sequence[FileNode], file_stem: Callable[[FileNode], str]) -> None:
        seen: dict[str, str] = {}
        for route in routes:
            stem = file_stem(route)
            if stem in seen:
                msg = f"Routes {seen[stem]} and {route.name} would both be written to {stem}"
                raise GenerationError(msg)
            seen[stem] = route.name


def _with_banner(banner: str, body: str) -> str:
    return f"{banner}\n\n{body}\n"
