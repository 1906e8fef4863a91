from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .constants import SCOPE_SEPARATOR, TRAIT_APPENDIX


class SourceFileLocation(BaseModel):
    """A function symbol as read from debug information."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    source_file: str = ""
    line: int = 0

    @property
    def test_class_signature(self) -> str:
        """Qualifying prefix of the symbol, including the trailing ``::``.

        For ``ns::Fixture_Test_Test::TestBody`` this is
        ``ns::Fixture_Test_Test::``; for a trait symbol it is the owning class.
        An unscoped symbol is its own signature.
        """
        end = self._trait_appendix_index()
        idx = self.symbol.rfind(SCOPE_SEPARATOR, 0, end)
        if idx < 0:
            return self.symbol
        return self.symbol[: idx + len(SCOPE_SEPARATOR)]

    @property
    def index_of_serialized_trait(self) -> int:
        """Index in ``symbol`` where an encoded trait payload starts."""
        end = self._trait_appendix_index()
        idx = self.symbol.rfind(SCOPE_SEPARATOR, 0, end)
        if idx < 0:
            return 0
        return idx + len(SCOPE_SEPARATOR)

    def _trait_appendix_index(self) -> int:
        idx = self.symbol.rfind(TRAIT_APPENDIX)
        return len(self.symbol) if idx < 0 else idx


class Trait(BaseModel):
    """A name/value pair declared on a test class."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str


class TestCaseLocation(BaseModel):
    """Where a test is defined, plus the traits attached to it."""

    __test__ = False

    symbol: str
    source_file: str
    line: int
    traits: List[Trait] = Field(default_factory=list)
