#!/usr/bin/env python3
"""Command-line interface for the Fen code generator."""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from fen_codegen import __version__
from fen_codegen.config import ConfigError, ConfigNotFoundError, FenConfig, load_config
from fen_codegen.generator.context import ImportDetection
from fen_codegen.generator.template_engine import FenCodeGenerator, FenTemplateEngine
from fen_codegen.routes import RouteParseError, load_routes
from fen_codegen.utils.file_utils import restore_on_failure, write_files_to_disk

# Exit codes for better error reporting
EXIT_SUCCESS = 0
EXIT_CONFIG_NOT_FOUND = 1
EXIT_INVALID_CONFIG = 2
EXIT_PARSE_ERROR = 3
EXIT_GENERATION_ERROR = 4


def parse_command_line_args(args: list[str] | None = None) -> argparse.Namespace:
    """Create and configure the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="fen-codegen",
        description="Generate a Swift client and Rust server types from .fen route schemas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s --root ./my-app --endpoint prod
  %(prog)s --verbose
        """,
    )
    parser.add_argument(
        "--root",
        "-r",
        type=Path,
        default=Path(),
        help="Project directory containing the fen/ folder (default: current directory)",
    )
    parser.add_argument(
        "--endpoint",
        "-e",
        choices=("dev", "prod"),
        default="dev",
        help="Which configured endpoint the Swift client talks to (default: %(default)s)",
    )
    parser.add_argument(
        "--template-dir",
        "-t",
        type=Path,
        help="Custom template directory (optional)",
        dest="template_dir",
    )
    parser.add_argument(
        "--textual-imports",
        action="store_true",
        help="Decide on import lines by searching generated code, as Fen releases before 0.6 did",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parsed_args = parser.parse_args(args)

    if parsed_args.template_dir is not None and not parsed_args.template_dir.is_dir():
        parser.error(f"Template directory not found: {parsed_args.template_dir}")

    return parsed_args


def configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def print_generation_summary(*, files: dict[Path, str], root: Path) -> None:
    """Print summary of generated files."""
    print(f"Generated {len(files)} files:")
    for file_path in sorted(files.keys()):
        try:
            print(f"  {file_path.relative_to(root)}")
        except ValueError:
            print(f"  {file_path}")


def generate_project(
    config: FenConfig,
    *,
    production: bool = False,
    template_dir: Path | None = None,
    import_detection: ImportDetection = ImportDetection.STRUCTURAL,
) -> dict[Path, str]:
    """Parse a project's routes and generate every configured output."""
    routes = [route.node for route in load_routes(config.config_dir)]
    print(f"Parsed {len(routes)} routes")

    generator = FenCodeGenerator(
        FenTemplateEngine(template_dir),
        import_detection=import_detection,
    )

    files: dict[Path, str] = {}
    languages = ", ".join(output.language.display_name for output in config.client.outputs)
    print(f"Generating client-side code ({languages})...")
    for output in config.client.outputs:
        files.update(generator.generate_client(routes, output.path, config.endpoint(production=production)))

    print(f"Generating server-side code ({config.server.output.language.display_name})...")
    files.update(generator.generate_server(routes, config.server.output.path))
    return files


def main(args: list[str] | None = None) -> int:
    """Generate client and server code for the Fen project in the given root."""
    parsed_args = parse_command_line_args(args)
    configure_logging(verbose=parsed_args.verbose)
    print(f"Running Fen {__version__}...")

    try:
        config = load_config(parsed_args.root)
    except ConfigNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_NOT_FOUND
    except ConfigError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    output_dirs = [output.path for output in config.client.outputs] + [config.server.output.path]
    try:
        with restore_on_failure(*output_dirs):
            generated_files = generate_project(
                config,
                production=parsed_args.endpoint == "prod",
                template_dir=parsed_args.template_dir,
                import_detection=ImportDetection.TEXTUAL
                if parsed_args.textual_imports
                else ImportDetection.STRUCTURAL,
            )
            write_files_to_disk(generated_files)

        if parsed_args.verbose:
            print_generation_summary(files=generated_files, root=config.root)
        print("That's it! Enjoy your typesafe API!")
        return EXIT_SUCCESS

    except RouteParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_PARSE_ERROR
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            traceback.print_exc()
        return EXIT_GENERATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
