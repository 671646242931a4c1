"""Trait identifiers: opaque, globally unique capability tokens."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any

_serials = itertools.count(1)


@dataclass(frozen=True, eq=False)
class TraitIdentifier:
    """
    A unique token standing for one capability.

    Identity, not the name, determines equality: two identifiers created from
    the same name are distinct and non-interchangeable. The name is carried
    for diagnostics only.
    """

    name: str
    serial: int = field(default_factory=lambda: next(_serials))

    def __str__(self) -> str:
        """Return the diagnostic name of the trait."""
        return self.name

    def __repr__(self) -> str:
        """Return the name and serial of the identifier."""
        return f"TraitIdentifier({self.name!r}, serial={self.serial})"

    def __copy__(self) -> TraitIdentifier:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> TraitIdentifier:
        return self

    @classmethod
    def create(cls, name: str) -> TraitIdentifier:
        """Allocate a fresh identifier called `name`."""
        return cls(name=name)


def create(name: str) -> TraitIdentifier:
    """Allocate a fresh, globally unique trait identifier."""
    return TraitIdentifier.create(name)
