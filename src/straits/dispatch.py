"""Low-level operations on trait identifiers and the free-function form of dispatch."""

from collections.abc import Callable
from typing import Any

from straits.bindings import Implementation
from straits.identifier import TraitIdentifier
from straits.registry import TraitRegistry, get_registry


def _active(registry: TraitRegistry | None) -> TraitRegistry:
    return registry if registry is not None else get_registry()


def implement(
    target: Any,
    identifier: TraitIdentifier,
    implementation: Implementation,
    *,
    registry: TraitRegistry | None = None,
) -> TraitIdentifier:
    """Bind `implementation` for `identifier` on `target`; return `identifier`."""
    return _active(registry).implement(target, identifier, implementation)


def set_default(
    identifier: TraitIdentifier,
    implementation: Implementation,
    *,
    registry: TraitRegistry | None = None,
) -> TraitIdentifier:
    """Register the fallback implementation of `identifier`; return `identifier`."""
    return _active(registry).set_default(identifier, implementation)


def delegate(target: Any, parent: Any, *, registry: TraitRegistry | None = None) -> Any:
    """Make trait lookups on `target` continue on `parent`; return `target`."""
    return _active(registry).delegate(target, parent)


def dispatch(
    identifier: TraitIdentifier,
    target: Any,
    /,
    *args: Any,
    registry: TraitRegistry | None = None,
    **kwargs: Any,
) -> Any:
    """Call the implementation of `identifier` for `target` with the given arguments."""
    return _active(registry).call(identifier, target, *args, **kwargs)


def to_free_function(identifier: TraitIdentifier, *, registry: TraitRegistry | None = None) -> Callable[..., Any]:
    """
    Wrap `identifier` into a standalone callable `fn(target, *args, **kwargs)`.

    Every call resolves the implementation afresh: the binding found on
    `target` (or anything it delegates to), else the default implementation,
    else `NoImplementationError`. When no registry is given, the process-wide
    registry is looked up at call time.
    """

    def free_function(target: Any, /, *args: Any, **kwargs: Any) -> Any:
        return _active(registry).call(identifier, target, *args, **kwargs)

    free_function.__name__ = identifier.name
    free_function.__qualname__ = identifier.name
    free_function.__doc__ = f"Dispatch trait '{identifier.name}' on the target passed as first argument."
    free_function.trait = identifier  # type: ignore[attr-defined]
    return free_function
