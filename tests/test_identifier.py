"""Unit tests for TraitIdentifier."""

import copy

import pytest

from straits.identifier import TraitIdentifier, create


def test_create_returns_distinct_identifiers_for_same_name():
    """Test that identifiers created from the same name are distinct."""
    first = create("x")
    second = create("x")
    assert first is not second
    assert first != second
    assert first.name == second.name == "x"


def test_identifier_equality_is_identity():
    """Test that an identifier only equals itself and works as a dict key."""
    identifier = TraitIdentifier.create("size")
    table = {identifier: 1, create("size"): 2}
    assert len(table) == 2
    assert table[identifier] == 1
    assert identifier == identifier


def test_identifier_serials_increase():
    """Test that serials come from a monotonically increasing counter."""
    first = create("a")
    second = create("b")
    assert second.serial > first.serial


def test_identifier_str_and_repr():
    """Test the diagnostic representations of an identifier."""
    identifier = create("serialize")
    assert str(identifier) == "serialize"
    assert repr(identifier) == f"TraitIdentifier('serialize', serial={identifier.serial})"


def test_identifier_is_immutable():
    """Test that an identifier's fields cannot be reassigned."""
    identifier = create("frozen")
    with pytest.raises(AttributeError):
        identifier.name = "thawed"  # type: ignore[misc]


def test_identifier_copies_are_the_same_token():
    """Test that copying keeps the identity of an identifier."""
    identifier = create("shared")
    assert copy.copy(identifier) is identifier
    assert copy.deepcopy({"t": identifier})["t"] is identifier
