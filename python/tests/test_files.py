"""Tests for file pattern resolution."""

import os

from testlocator.files import get_matching_files


def make_files(directory, *names):
    for name in names:
        (directory / name).write_bytes(b"")


def test_wildcard_in_file_name(tmp_path, logger):
    make_files(tmp_path, "b.pdb", "a.pdb", "a.exe")
    (tmp_path / "sub.pdb").mkdir()

    assert get_matching_files(str(tmp_path / "*.pdb"), logger) == [
        str(tmp_path / "a.pdb"),
        str(tmp_path / "b.pdb"),
    ]


def test_literal_file(tmp_path, logger):
    make_files(tmp_path, "plugin.pdb")
    assert get_matching_files(str(tmp_path / "plugin.pdb"), logger) == [
        str(tmp_path / "plugin.pdb")
    ]


def test_relative_pattern_is_made_absolute(tmp_path, monkeypatch, logger):
    make_files(tmp_path, "a.pdb")
    monkeypatch.chdir(tmp_path)
    assert get_matching_files("*.pdb", logger) == [os.path.join(os.getcwd(), "a.pdb")]


def test_environment_variables_expand(tmp_path, monkeypatch, logger):
    make_files(tmp_path, "a.pdb")
    monkeypatch.setenv("PDB_DIR", str(tmp_path))
    assert get_matching_files(os.path.join("$PDB_DIR", "*.pdb"), logger) == [
        str(tmp_path / "a.pdb")
    ]


def test_missing_directory(tmp_path, logger):
    assert get_matching_files(str(tmp_path / "nope" / "*.pdb"), logger) == []
    assert logger.records == []


def test_no_match(tmp_path, logger):
    make_files(tmp_path, "a.exe")
    assert get_matching_files(str(tmp_path / "*.pdb"), logger) == []


def test_invalid_pattern_is_logged(tmp_path, logger):
    assert get_matching_files(str(tmp_path / "a\0b" / "*.pdb"), logger) == []
    (message,) = logger.messages("error")
    assert message.startswith("Error while getting matching files for pattern")
