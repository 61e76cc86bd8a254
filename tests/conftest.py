from datetime import datetime

import pytest

from fen_codegen.generator import FenCodeGenerator, FenTemplateEngine, RustServerGenerator, SwiftClientGenerator

FIXED_TIMESTAMP = datetime(2025, 3, 4, 21, 15, 42)


@pytest.fixture(scope="session")
def template_engine() -> FenTemplateEngine:
    """Template engine over the bundled templates."""
    return FenTemplateEngine()


@pytest.fixture
def swift(template_engine: FenTemplateEngine) -> SwiftClientGenerator:
    return SwiftClientGenerator(template_engine)


@pytest.fixture
def rust(template_engine: FenTemplateEngine) -> RustServerGenerator:
    return RustServerGenerator(template_engine)


@pytest.fixture
def code_generator(template_engine: FenTemplateEngine) -> FenCodeGenerator:
    """Generator with a fixed banner timestamp and version."""
    return FenCodeGenerator(template_engine, version="0.6.0", clock=lambda: FIXED_TIMESTAMP)
