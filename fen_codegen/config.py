"""
Project configuration read from ``fen/config.toml``.

Example::

    [client]
    endpoint_dev = "http://localhost:8080"
    endpoint_prod = "https://api.example.com"

    [[client.output]]
    language = "swift"
    path = "ios/App/Api"

    [server]
    output = { language = "rust", path = "server/src/routes" }
"""

from __future__ import annotations

import enum
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from fen_codegen.parser.errors import FenError

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME: Final = "fen"
CONFIG_FILE_NAME: Final = "config.toml"


class ConfigError(FenError):
    """The configuration file is missing a value or holds a wrong one."""


class ConfigNotFoundError(ConfigError):
    """No ``fen`` directory or no ``config.toml`` inside it."""


class Language(enum.Enum):
    RUST = "rust"
    SWIFT = "swift"

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class OutputTarget:
    language: Language
    path: Path


@dataclass(frozen=True)
class ClientConfig:
    outputs: tuple[OutputTarget, ...]
    endpoint_dev: str
    endpoint_prod: str


@dataclass(frozen=True)
class ServerConfig:
    output: OutputTarget


@dataclass
class FenConfig:
    """Resolved configuration of a Fen project.

    Attributes:
        root: Project root, the directory holding ``fen/``.
        client: Client outputs and endpoints.
        server: The server output.
        config_dir: The ``fen`` directory with the config and route schemas.
    """

    root: Path
    client: ClientConfig
    server: ServerConfig
    config_dir: Path = field(init=False)

    def __post_init__(self) -> None:
        self.config_dir = self.root / CONFIG_DIR_NAME

    def endpoint(self, *, production: bool = False) -> str:
        return self.client.endpoint_prod if production else self.client.endpoint_dev


def find_config_dir(root: Path) -> Path:
    """Locate the ``fen`` directory directly under ``root``.

    Raises:
        ConfigNotFoundError: If there is no such directory.
    """
    config_dir = Path(root) / CONFIG_DIR_NAME
    if not config_dir.is_dir():
        msg = f"Could not find config directory: {config_dir}"
        raise ConfigNotFoundError(msg)
    logger.debug("Found config directory: %s", config_dir)
    return config_dir


def load_config(root: Path) -> FenConfig:
    """Read and validate ``fen/config.toml`` of the project at ``root``.

    Relative output paths are resolved against ``root``.

    Raises:
        ConfigNotFoundError: If the config directory or file is missing.
        ConfigError: If the file is not valid TOML or fails validation.
    """
    root = Path(root)
    config_file = find_config_dir(root) / CONFIG_FILE_NAME
    try:
        with config_file.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        msg = f"Could not find config file: {config_file}"
        raise ConfigNotFoundError(msg) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_file}: {e}"
        raise ConfigError(msg) from e

    logger.info("Read config file: %s", config_file)
    return parse_config(data, root)


def parse_config(data: dict[str, Any], root: Path) -> FenConfig:
    """Validate already-decoded TOML data.

    Raises:
        ConfigError: On a missing key, a value of the wrong kind or an
            unsupported output language.
    """
    client = _table(data, "client")
    outputs = tuple(
        _output_target(_as_table(item, "client output"), root) for item in _array(client, "output", "client output")
    )
    for output in outputs:
        if output.language is not Language.SWIFT:
            msg = f"Unsupported client language: {output.language.value}"
            raise ConfigError(msg)

    server = _table(data, "server")
    server_output = _output_target(_table(server, "output", "server output"), root)
    if server_output.language is not Language.RUST:
        msg = f"Unsupported server language: {server_output.language.value}"
        raise ConfigError(msg)

    return FenConfig(
        root=root,
        client=ClientConfig(
            outputs=outputs,
            endpoint_dev=_string(client, "endpoint_dev"),
            endpoint_prod=_string(client, "endpoint_prod"),
        ),
        server=ServerConfig(output=server_output),
    )


def _output_target(table: dict[str, Any], root: Path) -> OutputTarget:
    language = _string(table, "language")
    try:
        parsed_language = Language(language)
    except ValueError as e:
        msg = f"Invalid language: {language}"
        raise ConfigError(msg) from e
    return OutputTarget(parsed_language, root / _string(table, "path"))


def _get(data: dict[str, Any], key: str, label: str) -> Any:  # noqa: ANN401
    if key not in data:
        msg = f"Missing {label} configuration"
        raise ConfigError(msg)
    return data[key]


def _as_table(value: Any, label: str) -> dict[str, Any]:  # noqa: ANN401
    if not isinstance(value, dict):
        msg = f"{label} configuration is not a table"
        raise ConfigError(msg)
    return value


def _table(data: dict[str, Any], key: str, label: str | None = None) -> dict[str, Any]:
    return _as_table(_get(data, key, label or key), label or key)


def _array(data: dict[str, Any], key: str, label: str) -> list[Any]:
    value = _get(data, key, label)
    if not isinstance(value, list):
        msg = f"{label} configuration is not an array"
        raise ConfigError(msg)
    return value


def _string(data: dict[str, Any], key: str) -> str:
    value = _get(data, key, key)
    if not isinstance(value, str):
        msg = f"{key} configuration is not a string"
        raise ConfigError(msg)
    return value
