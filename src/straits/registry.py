"""The trait registry: implementation bindings, default implementations and dispatch resolution."""

import logging
import threading
from collections.abc import Iterable
from typing import Any

from straits.bindings import BindingTable, Implementation
from straits.config import get_settings
from straits.exceptions import ImplementationAlreadyBoundError, NoImplementationError
from straits.identifier import TraitIdentifier

logger = logging.getLogger(__name__)


class TraitRegistry:
    """
    Holds the implementation bindings and default implementations of traits.

    A process-wide instance is available through `get_registry()`; other
    instances can be created and passed explicitly to every operation that
    accepts a `registry` argument.
    """

    def __init__(self, strict: bool | None = None) -> None:
        """
        Initialize the TraitRegistry.

        Args:
            strict: Refuse to rebind an implementation already bound on a target.
                If None, the `STRAITS_STRICT_REBINDING` setting is consulted
                each time an implementation is bound.

        """
        self._strict = strict
        self._lock = threading.RLock()
        self.bindings = BindingTable()
        self._defaults: dict[TraitIdentifier, Implementation] = {}

    @property
    def strict(self) -> bool:
        """Whether rebinding an implementation raises instead of replacing it."""
        if self._strict is None:
            return get_settings().STRICT_REBINDING
        return self._strict

    def _check_rebinding(self, target: Any, identifier: TraitIdentifier) -> None:
        if self.strict and self.bindings.own_binding(target, identifier) is not None:
            raise ImplementationAlreadyBoundError(identifier, target)

    def implement(self, target: Any, identifier: TraitIdentifier, implementation: Implementation) -> TraitIdentifier:
        """
        Bind `implementation` as the implementation of `identifier` on `target`.

        A previous binding for the same pair is replaced, unless the registry
        is strict.

        Returns:
            The identifier, to allow chaining.

        Raises:
            ImplementationAlreadyBoundError: In strict mode, if `target` already binds `identifier`.

        """
        with self._lock:
            self._check_rebinding(target, identifier)
            previous = self.bindings.bind(target, identifier, implementation)
        if previous is not None:
            logger.debug("Replaced implementation of trait '%s' on %r.", identifier, target)
        else:
            logger.debug("Implemented trait '%s' on %r.", identifier, target)
        return identifier

    def implement_many(self, target: Any, pairs: Iterable[tuple[TraitIdentifier, Implementation]]) -> None:
        """Bind several implementations on `target`, checking all of them before binding any."""
        pairs = list(pairs)
        with self._lock:
            seen: set[TraitIdentifier] = set()
            for identifier, _ in pairs:
                self._check_rebinding(target, identifier)
                if self.strict and identifier in seen:
                    raise ImplementationAlreadyBoundError(identifier, target)
                seen.add(identifier)
            for identifier, implementation in pairs:
                self.implement(target, identifier, implementation)

    def set_default(self, identifier: TraitIdentifier, implementation: Implementation) -> TraitIdentifier:
        """
        Register `implementation` as the fallback for `identifier`.

        It is used when the trait is dispatched on None or on a target that
        doesn't implement it. Any previous default is replaced.
        """
        with self._lock:
            self._defaults[identifier] = implementation
        logger.debug("Set default implementation of trait '%s'.", identifier)
        return identifier

    def get_default(self, identifier: TraitIdentifier) -> Implementation | None:
        """Get the default implementation of `identifier`, if any."""
        return self._defaults.get(identifier)

    def has_default(self, identifier: TraitIdentifier) -> bool:
        """Check if `identifier` has a default implementation."""
        return identifier in self._defaults

    def delegate(self, target: Any, delegate: Any) -> Any:
        """Make lookups on `target` fall through to `delegate`, and return `target`."""
        with self._lock:
            self.bindings.add_delegate(target, delegate)
        return target

    def resolve(self, target: Any, identifier: TraitIdentifier) -> Implementation:
        """
        Find the implementation to call for `identifier` on `target`.

        The binding found along the delegation chain of `target` wins; None
        and targets without a binding fall back to the default implementation.

        Raises:
            NoImplementationError: If there is neither a binding nor a default.

        """
        if target is not None:
            implementation = self.bindings.lookup(target, identifier)
            if implementation is not None:
                return implementation

        default = self._defaults.get(identifier)
        if default is None:
            raise NoImplementationError(identifier, target)
        logger.debug("Trait '%s' falls back to its default implementation for %r.", identifier, target)
        return default

    def is_implemented(self, target: Any, identifier: TraitIdentifier) -> bool:
        """Check if dispatching `identifier` on `target` would find an implementation."""
        if target is not None and self.bindings.lookup(target, identifier) is not None:
            return True
        return identifier in self._defaults

    def call(self, identifier: TraitIdentifier, target: Any, /, *args: Any, **kwargs: Any) -> Any:
        """Dispatch `identifier` on `target`, passing `target` as the first argument."""
        return self.resolve(target, identifier)(target, *args, **kwargs)


_registry = TraitRegistry()


def get_registry() -> TraitRegistry:
    """Get the process-wide TraitRegistry."""
    return _registry
