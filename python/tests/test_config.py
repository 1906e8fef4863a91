"""Tests for resolver configuration."""

import logging
import os

from binaries import build_pdb
from testlocator.config import (
    ResolverConfig,
    create_resolver,
    get_config,
    set_config,
)
from testlocator.logging import DiagnosticLogger
from testlocator.resolver import TestCaseResolver


def test_defaults():
    config = ResolverConfig()
    assert config.path_extension is None
    assert config.additional_pdbs == []
    assert config.parse_symbol_information is True
    assert config.debug_mode is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TESTLOCATOR_PATH_EXTENSION", "/opt/pdbs")
    monkeypatch.setenv("TESTLOCATOR_ADDITIONAL_PDBS", "a/*.pdb; b.pdb ;")
    monkeypatch.setenv("TESTLOCATOR_PARSE_SYMBOLS", "false")
    monkeypatch.setenv("TESTLOCATOR_DEBUG", "yes")

    config = ResolverConfig()
    assert config.path_extension == "/opt/pdbs"
    assert config.additional_pdbs == ["a/*.pdb", "b.pdb"]
    assert config.parse_symbol_information is False
    assert config.debug_mode is True


def test_invalid_boolean_keeps_default(monkeypatch, caplog):
    caplog.set_level(logging.WARNING, logger="testlocator.config")
    monkeypatch.setenv("TESTLOCATOR_DEBUG", "maybe")
    config = ResolverConfig()
    assert config.debug_mode is False
    assert "Invalid boolean value for TESTLOCATOR_DEBUG: maybe" in caplog.text


def test_for_executable_substitutes_placeholders(tmp_path):
    exe = str(tmp_path / "unit_tests.exe")
    config = ResolverConfig(
        path_extension="$(ExecutableDir)/symbols",
        additional_pdbs=["$(ExecutableDir)/plugins/*.pdb", "$(Executable).extra.pdb"],
    )
    expanded = config.for_executable(exe)

    assert expanded.path_extension == f"{tmp_path}/symbols"
    assert expanded.additional_pdbs == [
        f"{tmp_path}/plugins/*.pdb",
        "unit_tests.extra.pdb",
    ]
    # the original is left alone
    assert config.additional_pdbs[0] == "$(ExecutableDir)/plugins/*.pdb"


def test_global_config():
    assert get_config() is get_config()
    custom = ResolverConfig(debug_mode=True)
    set_config(custom)
    assert get_config() is custom


def test_create_resolver_reads_primary_pdb(tmp_path):
    exe = tmp_path / "tests.exe"
    exe.write_bytes(b"MZ")
    (tmp_path / "tests.pdb").write_bytes(
        build_pdb([[("Suite_Case_Test::TestBody", "case_test.cpp", 21)]])
    )

    resolver = create_resolver(str(exe), ResolverConfig())
    assert isinstance(resolver, TestCaseResolver)
    assert isinstance(resolver.logger, DiagnosticLogger)

    result = resolver.find_test_case_location(["Suite_Case_Test::TestBody"])
    assert result.source_file == "case_test.cpp"
    assert result.line == 21


def test_create_resolver_without_symbols(tmp_path):
    exe = tmp_path / "tests.exe"
    exe.write_bytes(b"MZ")
    config = ResolverConfig(parse_symbol_information=False)
    resolver = create_resolver(str(exe), config)
    assert len(resolver.store) == 0
    assert resolver.loaded_additional_pdbs and resolver.loaded_imports
    assert resolver.executable == os.fspath(exe)
