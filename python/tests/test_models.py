"""Tests for the symbol data model."""

import pytest
from pydantic import ValidationError

from testlocator.models import SourceFileLocation, TestCaseLocation, Trait


def test_test_class_signature_of_test_body():
    loc = SourceFileLocation(symbol="ns::Fixture_Test_Test::TestBody")
    assert loc.test_class_signature == "ns::Fixture_Test_Test::"


def test_test_class_signature_of_trait_symbol():
    loc = SourceFileLocation(symbol="ns::Fixture_Test_Test::Author__GTA__Jane_GTA_TRAIT")
    assert loc.test_class_signature == "ns::Fixture_Test_Test::"
    assert loc.index_of_serialized_trait == len("ns::Fixture_Test_Test::")


def test_unnamespaced_trait_symbol():
    loc = SourceFileLocation(symbol="A::Tag__GTA__x_GTA_TRAIT")
    assert loc.test_class_signature == "A::"
    assert loc.symbol[loc.index_of_serialized_trait :] == "Tag__GTA__x_GTA_TRAIT"


def test_unqualified_symbol():
    loc = SourceFileLocation(symbol="main")
    assert loc.test_class_signature == "main"
    assert loc.index_of_serialized_trait == 0


def test_defaults():
    loc = SourceFileLocation(symbol="f")
    assert loc.source_file == ""
    assert loc.line == 0


def test_source_file_location_is_frozen():
    loc = SourceFileLocation(symbol="f", source_file="a.cpp", line=3)
    with pytest.raises(ValidationError):
        loc.line = 4


def test_test_case_location_dump():
    location = TestCaseLocation(
        symbol="T::TestBody",
        source_file="t.cpp",
        line=12,
        traits=[Trait(name="Category", value="Unit")],
    )
    assert location.model_dump() == {
        "symbol": "T::TestBody",
        "source_file": "t.cpp",
        "line": 12,
        "traits": [{"name": "Category", "value": "Unit"}],
    }


def test_test_case_location_traits_default_empty():
    location = TestCaseLocation(symbol="T::TestBody", source_file="", line=0)
    assert location.traits == []
