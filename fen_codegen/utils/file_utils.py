"""
File utilities for the Fen code generator.

This module writes generated files and guards output directories so that a
failed generation run leaves them as they were.
"""

import contextlib
import logging
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

logger = logging.getLogger(__name__)


def write_files_to_disk(files: dict[Path, str]) -> None:
    """Write generated files to disk.

    Args:
        files: Dictionary mapping file paths to their content.
    """
    for path, content in files.items():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)


@contextlib.contextmanager
def restore_on_failure(*output_dirs: Path) -> Generator[None, None, None]:
    """Back up output directories and restore them if the block raises.

    Output directories are shared with hand-written code, so nothing is
    removed up front; generated files simply overwrite their previous version.

    Args:
        output_dirs: Directories the block is about to write into.
    """
    backups: dict[Path, Path] = {}
    for output_dir in output_dirs:
        if output_dir in backups or not output_dir.is_dir():
            continue
        backup_dir = Path(tempfile.mkdtemp())
        shutil.copytree(output_dir, backup_dir, dirs_exist_ok=True)
        backups[output_dir] = backup_dir

    try:
        yield
    except Exception:
        for output_dir, backup_dir in backups.items():
            logger.warning("Generation failed, restoring %s", output_dir)
            shutil.rmtree(output_dir, ignore_errors=True)
            shutil.copytree(backup_dir, output_dir)
        raise
    finally:
        for backup_dir in backups.values():
            shutil.rmtree(backup_dir, ignore_errors=True)
