"""Resolution of file patterns such as ``$(OUT)\\plugins\\*.pdb``."""

from __future__ import annotations

import fnmatch
import os
from typing import List

from .protocols import Logger


def get_matching_files(pattern: str, logger: Logger) -> List[str]:
    """Absolute paths of the files matching ``pattern``, sorted.

    Only the file name part may contain wildcards. Environment variables and
    ``~`` are expanded. A missing directory yields an empty list.
    """
    expanded = os.path.expanduser(os.path.expandvars(pattern))
    directory, file_pattern = os.path.split(expanded)
    directory = os.path.abspath(directory or os.curdir)
    try:
        names = os.listdir(directory)
    except FileNotFoundError:
        return []
    except (OSError, ValueError) as e:
        logger.error(f"Error while getting matching files for pattern {pattern}: {e}")
        return []
    return sorted(
        os.path.join(directory, name)
        for name in names
        if fnmatch.fnmatch(name, file_pattern)
        and os.path.isfile(os.path.join(directory, name))
    )
