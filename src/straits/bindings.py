"""Per-target storage of trait implementations."""

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable, Iterator
from typing import Any

from straits.identifier import TraitIdentifier

logger = logging.getLogger(__name__)

Implementation = Callable[..., Any]


def _discard_slot(table_ref: weakref.ref[BindingTable], key: int) -> None:
    table = table_ref()
    if table is not None:
        table._slots.pop(key, None)


class _Slot:
    """The bindings and declared delegates of a single target."""

    __slots__ = ("_ref", "implementations", "delegates")

    def __init__(self, target: Any, ref: weakref.ref[Any] | None) -> None:
        # Targets that cannot be weakly referenced are kept alive by the slot.
        self._ref: Callable[[], Any] = ref if ref is not None else (lambda: target)
        self.implementations: dict[TraitIdentifier, Implementation] = {}
        self.delegates: list[Any] = []

    def get_target(self) -> Any:
        return self._ref()


class BindingTable:
    """
    A side-table mapping `(target identity, trait identifier)` to implementations.

    Bindings are keyed by `id(target)`. Weak-referenceable targets get a
    finalizer that drops their slot when they are collected, so bindings are
    owned by their target. The finalizer refers to the table weakly. Other
    targets (lists, dicts, ints, ...) are held strongly by the table to keep
    their identity stable.

    Lookups follow the delegation chain of a target: the target itself, its
    explicitly declared delegates, then their type hierarchies, `object` last.
    """

    def __init__(self) -> None:
        """Initialize an empty BindingTable."""
        self._slots: dict[int, _Slot] = {}

    def __len__(self) -> int:
        return len(self._slots)

    def _get_slot(self, target: Any) -> _Slot | None:
        slot = self._slots.get(id(target))
        if slot is None or slot.get_target() is not target:
            return None
        return slot

    def _ensure_slot(self, target: Any) -> _Slot:
        slot = self._get_slot(target)
        if slot is not None:
            return slot

        key = id(target)
        try:
            ref: weakref.ref[Any] | None = weakref.ref(target)
        except TypeError:
            ref = None
            logger.debug("Target %r is not weakly referenceable; its bindings are kept alive.", target)
        else:
            weakref.finalize(target, _discard_slot, weakref.ref(self), key)

        slot = _Slot(target, ref)
        self._slots[key] = slot
        return slot

    def bind(self, target: Any, identifier: TraitIdentifier, implementation: Implementation) -> Implementation | None:
        """
        Bind `implementation` for `identifier` on `target`.

        Returns:
            The implementation previously bound on `target` itself, if any.

        """
        slot = self._ensure_slot(target)
        previous = slot.implementations.get(identifier)
        slot.implementations[identifier] = implementation
        return previous

    def own_binding(self, target: Any, identifier: TraitIdentifier) -> Implementation | None:
        """Return the implementation bound on `target` itself, ignoring delegation."""
        slot = self._get_slot(target)
        if slot is None:
            return None
        return slot.implementations.get(identifier)

    def add_delegate(self, target: Any, delegate: Any) -> None:
        """Declare that lookups on `target` continue on `delegate`."""
        slot = self._ensure_slot(target)
        if not any(existing is delegate for existing in slot.delegates):
            slot.delegates.append(delegate)

    def iter_chain(self, target: Any) -> Iterator[Any]:
        """
        Yield `target` and everything it delegates to, each value once.

        The order is: `target` and its explicit delegates (recursively), then
        the type hierarchies of those values in the same order, and `object`
        last so that a catch-all binding never shadows a more specific class.
        """
        seen: set[int] = set()
        chain = list(self._walk_delegates(target, seen))
        yield from chain

        index = 0
        while index < len(chain):
            value = chain[index]
            index += 1
            parents = value.__mro__[1:] if isinstance(value, type) else type(value).__mro__
            for parent in parents:
                if parent is object:
                    continue
                for candidate in self._walk_delegates(parent, seen):
                    chain.append(candidate)
                    yield candidate

        yield from self._walk_delegates(object, seen)

    def _walk_delegates(self, value: Any, seen: set[int]) -> Iterator[Any]:
        if id(value) in seen:
            return
        seen.add(id(value))
        yield value

        slot = self._get_slot(value)
        if slot is not None:
            for delegate in list(slot.delegates):
                yield from self._walk_delegates(delegate, seen)

    def lookup(self, target: Any, identifier: TraitIdentifier) -> Implementation | None:
        """Return the first implementation of `identifier` along the delegation chain of `target`."""
        for candidate in self.iter_chain(target):
            implementation = self.own_binding(candidate, identifier)
            if implementation is not None:
                return implementation
        return None
