"""Lazy, escalating resolution of test case locations."""

from __future__ import annotations

import os
import threading
import traceback
from typing import Callable, Iterable, List, Optional, Sequence

from .files import get_matching_files
from .locator import find_pdb_file
from .matcher import QualifiedNameMatcher, SignatureMatcher
from .models import TestCaseLocation
from .pe import parse_imports
from .protocols import (
    DebugInfoReaderFactory,
    FileMatcher,
    ImportParser,
    Logger,
    PdbLocator,
)
from .scanner import BinaryScanner
from .store import SymbolStore
from .traits import to_test_case_location


class TestCaseResolver:
    """Finds the source location and traits of tests of one executable.

    Symbols of the executable are read at construction. On a failed lookup
    the additional PDBs are scanned, and on a further miss the DLLs the
    executable imports. Each of those tiers runs at most once per resolver.
    """

    __test__ = False

    def __init__(
        self,
        executable: str,
        path_extension: Optional[str],
        additional_pdbs: Iterable[str],
        reader_factory: DebugInfoReaderFactory,
        parse_symbol_information: bool,
        logger: Logger,
        *,
        pdb_locator: PdbLocator = find_pdb_file,
        import_parser: ImportParser = parse_imports,
        file_matcher: FileMatcher = get_matching_files,
        matcher: Optional[SignatureMatcher] = None,
    ):
        self.executable = executable
        self.path_extension = path_extension
        self.additional_pdbs: List[str] = list(additional_pdbs or [])
        self.logger = logger
        self.import_parser = import_parser
        self.file_matcher = file_matcher
        self.matcher = matcher or QualifiedNameMatcher()

        self.store = SymbolStore()
        self.scanner = BinaryScanner(
            self.store,
            reader_factory,
            logger,
            path_extension=path_extension,
            pdb_locator=pdb_locator,
        )
        self._lock = threading.RLock()

        if parse_symbol_information:
            self.loaded_additional_pdbs = False
            self.loaded_imports = False
            self.scanner.scan(executable)
        else:
            self.loaded_additional_pdbs = True
            self.loaded_imports = True

    def find_test_case_location(
        self, test_method_signatures: Sequence[str]
    ) -> Optional[TestCaseLocation]:
        """Return the location of the first symbol matching a signature, or None."""
        with self._lock:
            result = self._do_find(test_method_signatures)
            if result is None and not self.loaded_additional_pdbs:
                self.loaded_additional_pdbs = True
                self._load_tier(self._load_symbols_from_additional_pdbs, "additional PDBs")
                result = self._do_find(test_method_signatures)
            if result is None and not self.loaded_imports:
                self.loaded_imports = True
                self._load_tier(self._load_symbols_from_imports, "imports")
                result = self._do_find(test_method_signatures)
            return result

    def _load_tier(self, load: Callable[[], None], tier: str) -> None:
        # a failing tier counts as attempted; symbols scanned before the
        # failure stay in the store
        try:
            load()
        except Exception:
            self.logger.debug_error(
                f"Exception while loading symbols from {tier} of "
                f"'{self.executable}':\n{traceback.format_exc()}"
            )

    def _do_find(self, signatures: Sequence[str]) -> Optional[TestCaseLocation]:
        location = self.matcher.find(self.store.test_method_symbols, signatures)
        if location is None:
            return None
        return to_test_case_location(location, self.store.trait_symbols, self.logger)

    def _load_symbols_from_additional_pdbs(self) -> None:
        for pattern in self.additional_pdbs:
            matching_files = self.file_matcher(pattern, self.logger)
            if not matching_files:
                self.logger.warning(
                    f"Additional PDB pattern '{pattern}' does not match any files"
                )
                continue
            self.logger.debug_info(
                f"Additional PDB pattern '{pattern}' matches {len(matching_files)} files"
            )
            for pdb_candidate in matching_files:
                self.scanner.scan(self.executable, pdb_candidate)

    def _load_symbols_from_imports(self) -> None:
        imports = self.import_parser(self.executable, self.logger)
        module_directory = os.path.dirname(self.executable)
        for imported in imports:
            imported_binary = os.path.join(module_directory, imported)
            if os.path.isfile(imported_binary):
                self.scanner.scan(imported_binary)
