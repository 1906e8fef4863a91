"""Accumulated test method and trait symbols of all scanned binaries."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import SourceFileLocation


class SymbolStore:
    """Append-only symbol tables.

    Entries are kept in discovery order and never removed. Duplicates coming
    from overlapping binaries are kept as well; matching is first-wins.
    """

    def __init__(self) -> None:
        self._test_method_symbols: List[SourceFileLocation] = []
        self._trait_symbols: List[SourceFileLocation] = []

    def add_test_method_symbols(self, batch: Iterable[SourceFileLocation]) -> None:
        self._test_method_symbols.extend(batch)

    def add_trait_symbols(self, batch: Iterable[SourceFileLocation]) -> None:
        self._trait_symbols.extend(batch)

    @property
    def test_method_symbols(self) -> Tuple[SourceFileLocation, ...]:
        return tuple(self._test_method_symbols)

    @property
    def trait_symbols(self) -> Tuple[SourceFileLocation, ...]:
        return tuple(self._trait_symbols)

    def __len__(self) -> int:
        return len(self._test_method_symbols) + len(self._trait_symbols)

    def __repr__(self) -> str:
        return (
            f"SymbolStore(test_methods={len(self._test_method_symbols)}, "
            f"traits={len(self._trait_symbols)})"
        )
