"""
Discovery and parsing of the route schemas of a Fen project.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from fen_codegen.parser.ast import FileNode
from fen_codegen.parser.errors import FenError, ParseError
from fen_codegen.parser.fen_parser import parse

logger = logging.getLogger(__name__)

ROUTE_FILE_SUFFIX: Final = ".fen"


class RouteParseError(FenError):
    """A schema file failed to parse; carries the file and the parse error."""

    def __init__(self, path: Path, error: ParseError) -> None:
        super().__init__(f"{path.name}: {error}")
        self.path = path
        self.error = error


@dataclass(frozen=True)
class Route:
    path: Path
    node: FileNode


def find_route_files(config_dir: Path) -> list[Path]:
    """List the ``*.fen`` files of a directory in name order."""
    return sorted(p for p in Path(config_dir).glob(f"*{ROUTE_FILE_SUFFIX}") if p.is_file())


def load_routes(config_dir: Path) -> list[Route]:
    """Parse every schema in ``config_dir``.

    Raises:
        RouteParseError: For the first file that fails to parse.
    """
    routes: list[Route] = []
    for path in find_route_files(config_dir):
        logger.debug("Parsing %s", path)
        try:
            node = parse(path.read_bytes())
        except ParseError as e:
            raise RouteParseError(path, e) from e
        routes.append(Route(path, node))

    logger.info("Parsed %d routes from %s", len(routes), config_dir)
    return routes
