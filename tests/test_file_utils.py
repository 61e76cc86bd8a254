from pathlib import Path

import pytest

from fen_codegen.utils.file_utils import restore_on_failure, write_files_to_disk


def test_write_files_creates_directories(tmp_path: Path) -> None:
    files = {tmp_path / "a/b/c.swift": "struct C {}\n", tmp_path / "d.rs": "pub type D = isize;\n"}
    write_files_to_disk(files)

    for path, content in files.items():
        assert path.read_text() == content


def test_restore_on_failure(tmp_path: Path) -> None:
    output = tmp_path / "out"
    output.mkdir()
    (output / "kept.rs").write_text("old")

    with pytest.raises(RuntimeError), restore_on_failure(output, tmp_path / "missing"):
        (output / "kept.rs").write_text("new")
        (output / "extra.rs").write_text("extra")
        raise RuntimeError

    assert sorted(p.name for p in output.iterdir()) == ["kept.rs"]
    assert (output / "kept.rs").read_text() == "old"


def test_success_keeps_changes(tmp_path: Path) -> None:
    output = tmp_path / "out"
    output.mkdir()

    with restore_on_failure(output):
        (output / "new.rs").write_text("new")

    assert (output / "new.rs").read_text() == "new"
