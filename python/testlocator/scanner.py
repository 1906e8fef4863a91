"""Feeding the symbol store from one binary at a time."""

from __future__ import annotations

import traceback
from typing import Optional

from .constants import TEST_METHOD_PATTERN, TRAIT_PATTERN
from .locator import find_pdb_file
from .logging import log_binary_scan
from .protocols import DebugInfoReaderFactory, Logger, PdbLocator
from .store import SymbolStore


class BinaryScanner:
    """Reads test method and trait symbols of a binary into a SymbolStore.

    Failures are contained per binary: a missing PDB or a reader error is
    logged and the binary contributes nothing.
    """

    def __init__(
        self,
        store: SymbolStore,
        reader_factory: DebugInfoReaderFactory,
        logger: Logger,
        path_extension: Optional[str] = None,
        pdb_locator: PdbLocator = find_pdb_file,
    ):
        self.store = store
        self.reader_factory = reader_factory
        self.logger = logger
        self.path_extension = path_extension
        self.pdb_locator = pdb_locator

    def scan(self, binary: str, pdb: Optional[str] = None) -> int:
        """Scan ``binary``; returns the number of symbols added to the store."""
        if pdb is None:
            pdb = self.pdb_locator(binary, self.path_extension, self.logger)
            if pdb is None:
                self.logger.debug_warning(f"No .pdb file found for '{binary}'")
                return 0

        with log_binary_scan(binary, pdb):
            try:
                with self.reader_factory.create(binary, pdb, self.logger) as reader:
                    test_methods = list(reader.get_functions(TEST_METHOD_PATTERN))
                    traits = list(reader.get_functions(TRAIT_PATTERN))
            except Exception:
                self.logger.debug_error(
                    f"Exception while resolving test locations and traits in "
                    f"'{binary}':\n{traceback.format_exc()}"
                )
                return 0

        self.store.add_test_method_symbols(test_methods)
        self.store.add_trait_symbols(traits)
        self.logger.debug_info(
            f"Found {len(test_methods)} test method symbols and {len(traits)} "
            f"trait symbols in binary {binary}, pdb {pdb}"
        )
        return len(test_methods) + len(traits)
