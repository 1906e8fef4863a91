"""
testlocator Python package.

Resolves the source location and compile-time traits of native (GoogleTest
style) tests from the debug information of test executables.
"""

from .config import ResolverConfig, create_resolver, get_config, set_config
from .errors import PdbFormatError, PeFormatError, TestLocatorError
from .matcher import QualifiedNameMatcher, SignatureMatcher
from .models import SourceFileLocation, TestCaseLocation, Trait
from .pdb import PdbReader, PdbReaderFactory
from .resolver import TestCaseResolver
from .store import SymbolStore
from .traits import get_traits

__all__ = [
    # Data model
    "SourceFileLocation",
    "TestCaseLocation",
    "Trait",
    # Resolution
    "TestCaseResolver",
    "SymbolStore",
    "SignatureMatcher",
    "QualifiedNameMatcher",
    "get_traits",
    # Readers
    "PdbReader",
    "PdbReaderFactory",
    # Configuration
    "ResolverConfig",
    "create_resolver",
    "get_config",
    "set_config",
    # Errors
    "TestLocatorError",
    "PeFormatError",
    "PdbFormatError",
]
