"""Decoding of trait symbols attached to test classes."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .constants import TRAIT_APPENDIX, TRAIT_SEPARATOR
from .models import SourceFileLocation, TestCaseLocation, Trait
from .protocols import Logger


def decode_trait(trait_symbol: SourceFileLocation) -> Optional[Trait]:
    """Decode ``<name>__GTA__<value>_GTA_TRAIT`` into a Trait.

    Returns None when the payload does not split into exactly two fields.
    """
    symbol = trait_symbol.symbol
    start = trait_symbol.index_of_serialized_trait
    end = len(symbol) - len(TRAIT_APPENDIX)
    if end < start:
        return None
    fields = symbol[start:end].split(TRAIT_SEPARATOR)
    if len(fields) != 2:
        return None
    return Trait(name=fields[0], value=fields[1])


def get_traits(
    test_symbol: SourceFileLocation,
    trait_symbols: Iterable[SourceFileLocation],
    logger: Optional[Logger] = None,
) -> List[Trait]:
    traits: List[Trait] = []
    # TODO: index trait symbols by class signature instead of scanning all of them per test
    for trait_symbol in trait_symbols:
        if not test_symbol.symbol.startswith(trait_symbol.test_class_signature):
            continue
        trait = decode_trait(trait_symbol)
        if trait is None:
            if logger is not None:
                logger.debug_warning(
                    f"Ignoring malformed trait symbol '{trait_symbol.symbol}'"
                )
            continue
        traits.append(trait)
    return traits


def to_test_case_location(
    location: SourceFileLocation,
    trait_symbols: Iterable[SourceFileLocation],
    logger: Optional[Logger] = None,
) -> TestCaseLocation:
    return TestCaseLocation(
        symbol=location.symbol,
        source_file=location.source_file,
        line=location.line,
        traits=get_traits(location, trait_symbols, logger),
    )
