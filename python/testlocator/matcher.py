"""Matching of candidate method signatures against debug symbol names."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Iterable, Optional, Pattern, Sequence, Tuple

from .constants import ANONYMOUS_NAMESPACE, SCOPE_SEPARATOR
from .models import SourceFileLocation


class SignatureMatcher(ABC):
    """Decides whether a symbol name denotes one of the candidate signatures."""

    @abstractmethod
    def matches(self, symbol: str, signatures: Sequence[str]) -> bool:
        pass

    def find(
        self, symbols: Iterable[SourceFileLocation], signatures: Sequence[str]
    ) -> Optional[SourceFileLocation]:
        """Return the first symbol, in iteration order, matching a signature."""
        if not signatures:
            return None
        for location in symbols:
            if self.matches(location.symbol, signatures):
                return location
        return None


@lru_cache(maxsize=256)
def _qualified_pattern(signatures: Tuple[str, ...]) -> Pattern[str]:
    segment = r"(?:\w+|{})".format(re.escape(ANONYMOUS_NAMESPACE))
    alternatives = "|".join(re.escape(s) for s in signatures)
    return re.compile(
        r"^(?:{seg}{sep})*(?:{alt})".format(
            seg=segment, sep=re.escape(SCOPE_SEPARATOR), alt=alternatives
        )
    )


class QualifiedNameMatcher(SignatureMatcher):
    """MSVC style qualified names.

    ``ns::Fixture_Test_Test::TestBody`` and
    ```anonymous namespace'::Fixture_Test_Test::TestBody`` both match the
    signature ``Fixture_Test_Test::TestBody``. The match is anchored at the
    start of the symbol only.
    """

    def matches(self, symbol: str, signatures: Sequence[str]) -> bool:
        if not signatures:
            return False
        return _qualified_pattern(tuple(signatures)).match(symbol) is not None

    def find(
        self, symbols: Iterable[SourceFileLocation], signatures: Sequence[str]
    ) -> Optional[SourceFileLocation]:
        if not signatures:
            return None
        pattern = _qualified_pattern(tuple(signatures))
        for location in symbols:
            if pattern.match(location.symbol):
                return location
        return None
