"""Trait sets: named collections of trait identifiers with bulk operations."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from straits.bindings import Implementation
from straits.dispatch import to_free_function
from straits.exceptions import DuplicateTraitDefinitionError, InvalidTraitReferenceError
from straits.identifier import TraitIdentifier, create
from straits.registry import TraitRegistry, get_registry

logger = logging.getLogger(__name__)


def _method_forwarder(source: Any, method_name: str) -> Implementation:
    """Build an implementation calling `source.<method_name>(receiver, ...)`, looked up at call time."""

    def forward(receiver: Any, /, *args: Any, **kwargs: Any) -> Any:
        return getattr(source, method_name)(receiver, *args, **kwargs)

    forward.__name__ = method_name
    forward.__qualname__ = method_name
    return forward


def _function_forwarder(function: Callable[..., Any], name: str) -> Implementation:
    def forward(receiver: Any, /, *args: Any, **kwargs: Any) -> Any:
        return function(receiver, *args, **kwargs)

    forward.__name__ = name
    forward.__qualname__ = name
    return forward


def _own_attribute_names(obj: Any) -> list[str]:
    try:
        return [name for name in vars(obj) if not name.startswith("_")]
    except TypeError:
        pass

    names: list[str] = []
    for klass in type(obj).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        for name in (slots,) if isinstance(slots, str) else slots:
            if not name.startswith("_") and name not in names and hasattr(obj, name):
                names.append(name)
    return names


def _check_unique(names: Iterable[str]) -> list[str]:
    result: list[str] = []
    for name in names:
        if name in result:
            raise DuplicateTraitDefinitionError(name)
        result.append(name)
    return result


class TraitSet(Mapping[str, TraitIdentifier]):
    """
    A mapping from names to trait identifiers.

    Within one set a name maps to at most one identifier. Different sets may
    hold the same identifier (see `borrow`), so dispatch depends on the
    identifier only, never on the set it was reached through.

    Bulk operations validate all of their input before changing the set or
    binding anything on a target.
    """

    def __init__(self, traits: Mapping[str, Any] | None = None, *, registry: TraitRegistry | None = None) -> None:
        """
        Initialize the TraitSet.

        Args:
            traits: Initial entries. Values that are not `TraitIdentifier`s are ignored.
            registry: The registry used by bulk implementations and free functions.
                Defaults to the process-wide registry, resolved when used.

        """
        self._traits: dict[str, TraitIdentifier] = {}
        self._registry = registry
        for name, value in (traits or {}).items():
            if isinstance(value, TraitIdentifier):
                self._traits[name] = value

    @classmethod
    def from_names(cls, names: Iterable[str], *, registry: TraitRegistry | None = None) -> TraitSet:
        """Create a set with one fresh trait per name."""
        trait_set = cls(registry=registry)
        for name in _check_unique(names):
            trait_set._traits[name] = create(name)
        return trait_set

    @classmethod
    def from_object(cls, obj: Any, *, registry: TraitRegistry | None = None) -> TraitSet:
        """
        Create a set with one fresh trait per key of `obj`.

        Mappings contribute their keys; other objects the public names of the
        attributes they hold themselves, from `vars()` or from their `__slots__`.
        Values with neither, such as ints, contribute nothing.
        """
        names = list(obj.keys()) if isinstance(obj, Mapping) else _own_attribute_names(obj)
        return cls.from_names(names, registry=registry)

    @property
    def registry(self) -> TraitRegistry:
        """The registry this set implements traits in."""
        return self._registry if self._registry is not None else get_registry()

    def __getitem__(self, name: str) -> TraitIdentifier:
        return self._traits[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._traits)

    def __len__(self) -> int:
        return len(self._traits)

    def __repr__(self) -> str:
        return f"TraitSet({list(self._traits)!r})"

    def _lookup(self, name: str) -> TraitIdentifier:
        identifier = self._traits.get(name)
        if identifier is None:
            raise InvalidTraitReferenceError(name)
        return identifier

    def _check_new(self, names: Iterable[str]) -> list[str]:
        names = _check_unique(names)
        for name in names:
            if name in self._traits:
                raise DuplicateTraitDefinitionError(name)
        return names

    def add_trait(self, name: str, identifier: TraitIdentifier) -> TraitIdentifier:
        """
        Add the existing `identifier` to the set under `name`.

        Raises:
            DuplicateTraitDefinitionError: If `name` is already in the set.
            InvalidTraitReferenceError: If `identifier` is not a trait identifier.

        """
        if name in self._traits:
            raise DuplicateTraitDefinitionError(name)
        if not isinstance(identifier, TraitIdentifier):
            raise InvalidTraitReferenceError(name, f"Trying to add trait '{name}', but {identifier!r} is not a trait.")
        self._traits[name] = identifier
        return identifier

    def define_trait(self, name: str) -> TraitIdentifier:
        """Define a new trait called `name` in the set and return its identifier."""
        if name in self._traits:
            raise DuplicateTraitDefinitionError(name)
        identifier = self.add_trait(name, create(name))
        logger.debug("Defined trait %r.", identifier)
        return identifier

    def borrow(self, other: Mapping[str, Any], names: Iterable[str] | None = None) -> TraitSet:
        """
        Add the traits of `other` to this set, sharing their identifiers.

        Args:
            other: A trait set, or any mapping whose `TraitIdentifier` values are borrowed.
            names: The names to borrow. All of `other`'s traits if omitted.

        Raises:
            InvalidTraitReferenceError: If a requested name is not a trait in `other`.
            DuplicateTraitDefinitionError: If a borrowed name already exists in this set.

        """
        if names is None:
            borrowed = {name: value for name, value in other.items() if isinstance(value, TraitIdentifier)}
        else:
            borrowed = {}
            for name in _check_unique(names):
                value = other.get(name)
                if not isinstance(value, TraitIdentifier):
                    raise InvalidTraitReferenceError(name, f"Cannot borrow '{name}': it is not a trait of {other!r}.")
                borrowed[name] = value

        self._check_new(borrowed)
        self._traits.update(borrowed)
        return self

    def implement_many(self, target: Any, implementations: Mapping[str, Implementation]) -> TraitSet:
        """Implement on `target` each trait of this set named in `implementations`."""
        pairs = [(self._lookup(name), implementation) for name, implementation in implementations.items()]
        self.registry.implement_many(target, pairs)
        return self

    def _define_and_implement(self, target: Any, implementations: dict[str, Implementation]) -> TraitSet:
        self._check_new(implementations)
        pairs = [(create(name), implementation) for name, implementation in implementations.items()]
        self.registry.implement_many(target, pairs)
        for name, (identifier, _) in zip(implementations, pairs):
            self._traits[name] = identifier
            logger.debug("Defined trait %r.", identifier)
        return self

    def define_and_implement_many(self, target: Any, implementations: Mapping[str, Implementation]) -> TraitSet:
        """Define a new trait for each name in `implementations` and implement it on `target`."""
        return self._define_and_implement(target, dict(implementations))

    def adapt_methods(self, target: Any, source: Any, method_names: Iterable[str]) -> TraitSet:
        """
        Define a trait for each method name and implement it on `target` by forwarding to `source`.

        Dispatching trait `name` on a receiver calls `source.name(receiver, *args, **kwargs)`.
        `source` is left untouched, and its methods are looked up at call time.
        """
        return self._define_and_implement(
            target, {name: _method_forwarder(source, name) for name in _check_unique(method_names)}
        )

    def adapt_free_functions(self, target: Any, functions: Mapping[str, Any]) -> TraitSet:
        """
        Define a trait for each function in `functions` and implement it on `target`.

        Dispatching trait `name` on a receiver calls `functions[name](receiver, *args, **kwargs)`.
        Entries whose value is not callable are skipped.
        """
        return self._define_and_implement(
            target,
            {name: _function_forwarder(function, name) for name, function in functions.items() if callable(function)},
        )

    def to_free_functions(self) -> dict[str, Callable[..., Any]]:
        """Return a dispatch callable for every trait currently in the set."""
        return {name: to_free_function(identifier, registry=self._registry) for name, identifier in self._traits.items()}

    as_free_functions = to_free_functions
