"""Tests for file assembly and the template environment."""

from pathlib import Path

import pytest

from fen_codegen.generator import FenCodeGenerator, FenTemplateEngine, GenerationError
from fen_codegen.generator.filters import swift_doc_comment, swift_string_literal
from fen_codegen.parser import parse

from .schemas import GET_TODOS, INT_OUTPUT, TOGGLE_TODO_COMPLETION

BANNER = (
    "// Created by Fen v0.6.0 at 21:15:42 on 2025-03-04\n"
    "// Do not manually modify this file as it is automatically generated"
)


@pytest.fixture
def routes() -> list:
    return [parse(GET_TODOS), parse(TOGGLE_TODO_COMPLETION)]


class TestBanner:
    def test_banner(self, code_generator: FenCodeGenerator) -> None:
        assert code_generator.banner() == BANNER

    def test_every_file_starts_with_banner(self, code_generator: FenCodeGenerator, routes: list) -> None:
        files = {
            **code_generator.generate_client(routes, Path("client"), "http://localhost:8080"),
            **code_generator.generate_server(routes, Path("server")),
        }
        for content in files.values():
            assert content.startswith(BANNER + "\n\n")
            assert content.endswith("\n")
            assert not content.endswith("\n\n")


class TestClientFiles:
    def test_file_names(self, code_generator: FenCodeGenerator, routes: list) -> None:
        files = code_generator.generate_client(routes, Path("ios/Api"), "http://localhost:8080")
        assert sorted(files) == [
            Path("ios/Api/Api.swift"),
            Path("ios/Api/GetTodos.swift"),
            Path("ios/Api/ToggleTodoCompletion.swift"),
        ]

    def test_route_file_holds_route_code(self, code_generator: FenCodeGenerator, routes: list) -> None:
        files = code_generator.generate_client(routes, Path("out"), "http://localhost:8080")
        expected = code_generator.client.render_route(routes[0]).text
        assert files[Path("out/GetTodos.swift")] == f"{BANNER}\n\n{expected}\n"

    def test_api_file_uses_endpoint(self, code_generator: FenCodeGenerator) -> None:
        files = code_generator.generate_client([], Path("out"), 'https://api.example.com/"v1"')
        api = files[Path("out/Api.swift")]

        assert 'LiveFetcher(endpoint: "https://api.example.com/\\"v1\\"")' in api
        assert "protocol Fetcher: Sendable {" in api
        assert "struct NoData: Decodable {}" in api

    def test_duplicate_route_names(self, code_generator: FenCodeGenerator) -> None:
        with pytest.raises(GenerationError, match="Test"):
            code_generator.generate_client([parse(INT_OUTPUT), parse(INT_OUTPUT)], Path("out"), "")


class TestServerFiles:
    def test_file_names(self, code_generator: FenCodeGenerator, routes: list) -> None:
        files = code_generator.generate_server(routes, Path("src/routes"))
        assert sorted(files) == [
            Path("src/routes/get_todos.rs"),
            Path("src/routes/mod.rs"),
            Path("src/routes/toggle_todo_completion.rs"),
        ]

    def test_mod_file(self, code_generator: FenCodeGenerator, routes: list) -> None:
        module = code_generator.generate_server(routes, Path("out"))[Path("out/mod.rs")]

        assert module.startswith(
            f"{BANNER}\n\npub mod get_todos;\npub mod toggle_todo_completion;\n\nuse serde::{{Deserialize, Serialize}};\n"
        )
        assert "pub enum Response<T> {" in module
        assert 'format!("/_fen_{path}")' in module

    def test_custom_route_prefix(self, template_engine: FenTemplateEngine) -> None:
        generator = FenCodeGenerator(template_engine, route_prefix="/api")
        module = generator.generate_server([], Path("out"))[Path("out/mod.rs")]
        client = generator.generate_client([parse(INT_OUTPUT)], Path("out"), "")[Path("out/Test.swift")]

        assert 'format!("/api{path}")' in module
        assert '"/api/test"' in client

    def test_colliding_module_names(self, code_generator: FenCodeGenerator) -> None:
        routes = [parse(INT_OUTPUT), parse(INT_OUTPUT.replace('"Test"', '"test"'))]
        with pytest.raises(GenerationError, match="test"):
            code_generator.generate_server(routes, Path("out"))


class TestTemplateEngine:
    def test_custom_template_dir(self, tmp_path: Path) -> None:
        (tmp_path / "banner.j2").write_text("// v{{ version }}\n")
        generator = FenCodeGenerator(FenTemplateEngine(tmp_path), version="1.2.3")
        assert generator.banner() == "// v1.2.3"

    def test_filters_are_registered(self, template_engine: FenTemplateEngine) -> None:
        for name in ("swift_doc_comment", "swift_string_literal", "camel_case", "kebab_case", "snake_case"):
            assert name in template_engine.env.filters


class TestFilters:
    @pytest.mark.parametrize(
        ("text", "indent", "expected"),
        [
            ("Fetches all todos", 0, "/// Fetches all todos"),
            ("Fetches all todos", 2, "  /// Fetches all todos"),
            ("First\n\n  Second  ", 2, "  /// First\n  ///\n  /// Second"),
            ("", 2, ""),
            (None, 0, ""),
            ("   ", 0, ""),
        ],
    )
    def test_swift_doc_comment(self, text: str | None, indent: int, expected: str) -> None:
        assert swift_doc_comment(text, indent) == expected

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("http://localhost:8080", '"http://localhost:8080"'),
            ('say "hi"', '"say \\"hi\\""'),
            ("back\\slash", '"back\\\\slash"'),
        ],
    )
    def test_swift_string_literal(self, text: str, expected: str) -> None:
        assert swift_string_literal(text) == expected
