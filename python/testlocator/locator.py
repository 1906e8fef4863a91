"""Discovery of the program database belonging to a binary."""

from __future__ import annotations

import os
from typing import List, Optional

from .pe import extract_pdb_path
from .protocols import Logger


def _search_path(path_extension: Optional[str]) -> List[str]:
    elements: List[str] = []
    if path_extension:
        elements.extend(path_extension.split(os.pathsep))
    elements.extend(os.environ.get("PATH", "").split(os.pathsep))
    return [e for e in elements if e]


def find_pdb_file(
    binary: str, path_extension: Optional[str], logger: Logger
) -> Optional[str]:
    """Locate the PDB of ``binary``.

    Tries, in order: the path recorded in the binary's CodeView entry, the
    binary path with a ``.pdb`` extension, the bare PDB file name in the
    working directory, and that file name in each directory of
    ``path_extension`` followed by ``PATH``.
    """
    attempts: List[str] = []

    pdb = extract_pdb_path(binary, logger)
    if pdb and os.path.isfile(pdb):
        return pdb
    attempts.append("parsing from executable")

    pdb = os.path.splitext(binary)[0] + ".pdb"
    if os.path.isfile(pdb):
        return pdb
    attempts.append(f'"{pdb}"')

    pdb_name = os.path.basename(pdb)
    if os.path.isfile(pdb_name):
        return os.path.abspath(pdb_name)
    attempts.append(f'"{pdb_name}"')

    for directory in _search_path(path_extension):
        candidate = os.path.join(directory, pdb_name)
        if os.path.isfile(candidate):
            return candidate
        attempts.append(f'"{candidate}"')

    logger.debug_info(f"Attempts to find pdb: {'::'.join(attempts)}")
    return None
