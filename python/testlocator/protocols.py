"""Collaborator contracts of the resolver."""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from .models import SourceFileLocation


class Logger(Protocol):
    def info(self, message: str, **kw) -> None: ...

    def warning(self, message: str, **kw) -> None: ...

    def error(self, message: str, **kw) -> None: ...

    def debug_info(self, message: str, **kw) -> None: ...

    def debug_warning(self, message: str, **kw) -> None: ...

    def debug_error(self, message: str, **kw) -> None: ...


@runtime_checkable
class DebugInfoReader(Protocol):
    """An open binary + debug info pair; used as a context manager."""

    def get_functions(self, pattern: str) -> List[SourceFileLocation]: ...

    def __enter__(self) -> "DebugInfoReader": ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> Optional[bool]: ...


class DebugInfoReaderFactory(Protocol):
    def create(self, binary: str, pdb: str, logger: Logger) -> DebugInfoReader: ...


class PdbLocator(Protocol):
    def __call__(
        self, binary: str, path_extension: Optional[str], logger: Logger
    ) -> Optional[str]: ...


class ImportParser(Protocol):
    def __call__(self, binary: str, logger: Logger) -> List[str]: ...


class FileMatcher(Protocol):
    def __call__(self, pattern: str, logger: Logger) -> List[str]: ...
