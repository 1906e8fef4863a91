"""Shared test utilities and fixtures for Python tests."""

from typing import Dict, List, Optional, Set, Tuple

import pytest

import testlocator.config
from testlocator.models import SourceFileLocation


class RecordingLogger:
    """Logger collecting ``(level, message)`` pairs, debug levels included."""

    def __init__(self):
        self.records: List[Tuple[str, str]] = []

    def _record(self, level: str, message: str) -> None:
        self.records.append((level, message))

    def info(self, message, **kw):
        self._record("info", message)

    def warning(self, message, **kw):
        self._record("warning", message)

    def error(self, message, **kw):
        self._record("error", message)

    def debug_info(self, message, **kw):
        self._record("debug_info", message)

    def debug_warning(self, message, **kw):
        self._record("debug_warning", message)

    def debug_error(self, message, **kw):
        self._record("debug_error", message)

    def messages(self, level: Optional[str] = None) -> List[str]:
        return [m for lvl, m in self.records if level is None or lvl == level]


class FakeReader:
    """Reader answering ``get_functions`` from a fixed symbol list."""

    def __init__(self, factory: "FakeReaderFactory", binary: str, pdb: str):
        self.factory = factory
        self.binary = binary
        self.pdb = pdb
        self.closed = False

    def __enter__(self):
        if self.pdb in self.factory.failing:
            raise RuntimeError(f"cannot open {self.pdb}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    def get_functions(self, pattern: str) -> List[SourceFileLocation]:
        suffix = pattern.lstrip("*")
        if (self.pdb, pattern) in self.factory.failing_patterns:
            raise RuntimeError(f"reader failure for {pattern}")
        symbols = self.factory.symbols.get(self.pdb, [])
        return [s for s in symbols if s.symbol.endswith(suffix)]


class FakeReaderFactory:
    """Reader factory recording every (binary, pdb) pair it is asked for.

    Symbols and injected failures are keyed by PDB path.
    """

    def __init__(self, symbols: Optional[Dict[str, List[SourceFileLocation]]] = None):
        self.symbols: Dict[str, List[SourceFileLocation]] = symbols or {}
        self.created: List[Tuple[str, str]] = []
        self.readers: List[FakeReader] = []
        self.failing: Set[str] = set()
        self.failing_patterns: Set[Tuple[str, str]] = set()

    def create(self, binary: str, pdb: str, logger) -> FakeReader:
        self.created.append((binary, pdb))
        reader = FakeReader(self, binary, pdb)
        self.readers.append(reader)
        return reader


def location(symbol: str, source_file: str = "", line: int = 0) -> SourceFileLocation:
    return SourceFileLocation(symbol=symbol, source_file=source_file, line=line)


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def reader_factory():
    return FakeReaderFactory()


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Isolate tests from the process-wide config and its environment."""
    monkeypatch.setattr(testlocator.config, "_config", None)
    for name in (
        "TESTLOCATOR_PATH_EXTENSION",
        "TESTLOCATOR_ADDITIONAL_PDBS",
        "TESTLOCATOR_PARSE_SYMBOLS",
        "TESTLOCATOR_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
