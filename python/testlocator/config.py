"""Resolver settings with environment overrides."""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .logging import DiagnosticLogger
from .pdb import PdbReaderFactory
from .protocols import DebugInfoReaderFactory, Logger
from .resolver import TestCaseResolver

logger = logging.getLogger(__name__)

EXECUTABLE_DIR_PLACEHOLDER = "$(ExecutableDir)"
EXECUTABLE_PLACEHOLDER = "$(Executable)"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str, default: bool) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    logger.warning(f"Invalid boolean value for {name}: {value}")
    return default


@dataclass
class ResolverConfig:
    path_extension: Optional[str] = None
    additional_pdbs: List[str] = field(default_factory=list)
    parse_symbol_information: bool = True
    debug_mode: bool = False

    def __post_init__(self):
        self.path_extension = os.getenv(
            "TESTLOCATOR_PATH_EXTENSION", self.path_extension
        )
        if pdbs_env := os.getenv("TESTLOCATOR_ADDITIONAL_PDBS"):
            self.additional_pdbs = [p.strip() for p in pdbs_env.split(";") if p.strip()]
        if parse_env := os.getenv("TESTLOCATOR_PARSE_SYMBOLS"):
            self.parse_symbol_information = _parse_bool(
                "TESTLOCATOR_PARSE_SYMBOLS", parse_env, self.parse_symbol_information
            )
        if debug_env := os.getenv("TESTLOCATOR_DEBUG"):
            self.debug_mode = _parse_bool("TESTLOCATOR_DEBUG", debug_env, self.debug_mode)

    def for_executable(self, executable: str) -> "ResolverConfig":
        """Copy with ``$(ExecutableDir)`` and ``$(Executable)`` substituted."""
        executable = os.path.abspath(executable)
        executable_dir = os.path.dirname(executable)
        executable_name = os.path.splitext(os.path.basename(executable))[0]

        def expand(value: str) -> str:
            return value.replace(EXECUTABLE_DIR_PLACEHOLDER, executable_dir).replace(
                EXECUTABLE_PLACEHOLDER, executable_name
            )

        copy = replace(self)
        copy.path_extension = expand(self.path_extension) if self.path_extension else None
        copy.additional_pdbs = [expand(p) for p in self.additional_pdbs]
        return copy


_config: Optional[ResolverConfig] = None


def get_config() -> ResolverConfig:
    global _config
    if _config is None:
        _config = ResolverConfig()
    return _config


def set_config(config: ResolverConfig) -> None:
    global _config
    _config = config


def create_resolver(
    executable: str,
    config: Optional[ResolverConfig] = None,
    reader_factory: Optional[DebugInfoReaderFactory] = None,
    logger: Optional[Logger] = None,
) -> TestCaseResolver:
    """Build a resolver for ``executable`` with the shipped collaborators."""
    settings = (config or get_config()).for_executable(executable)
    return TestCaseResolver(
        executable,
        settings.path_extension,
        settings.additional_pdbs,
        reader_factory or PdbReaderFactory(),
        settings.parse_symbol_information,
        logger or DiagnosticLogger("testlocator", debug_mode=settings.debug_mode),
    )
