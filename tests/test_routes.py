from pathlib import Path

import pytest

from fen_codegen.parser import UndefinedTypeError
from fen_codegen.routes import RouteParseError, find_route_files, load_routes

from .schemas import GET_TODOS, INT_OUTPUT


def test_find_route_files(tmp_path: Path) -> None:
    for name in ("b.fen", "a.fen", "config.toml", "notes.txt"):
        (tmp_path / name).write_text("")
    (tmp_path / "nested.fen").mkdir()

    assert find_route_files(tmp_path) == [tmp_path / "a.fen", tmp_path / "b.fen"]


def test_load_routes(tmp_path: Path) -> None:
    (tmp_path / "todos.fen").write_text(GET_TODOS)
    (tmp_path / "int.fen").write_text(INT_OUTPUT)

    routes = load_routes(tmp_path)

    assert [route.path.name for route in routes] == ["int.fen", "todos.fen"]
    assert [route.node.name for route in routes] == ["Test", "GetTodos"]


def test_empty_directory(tmp_path: Path) -> None:
    assert load_routes(tmp_path) == []


def test_parse_error_names_the_file(tmp_path: Path) -> None:
    (tmp_path / "broken.fen").write_text('name: "Broken"\n---\n@output Missing\n')

    with pytest.raises(RouteParseError, match="broken.fen: Reference to undefined type: Missing") as exc_info:
        load_routes(tmp_path)

    assert exc_info.value.path == tmp_path / "broken.fen"
    assert isinstance(exc_info.value.error, UndefinedTypeError)
