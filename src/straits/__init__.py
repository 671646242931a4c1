"""Traits and trait sets: capability dispatch for arbitrary Python values."""

from straits.dispatch import delegate, implement, set_default, to_free_function
from straits.exceptions import (
    DuplicateTraitDefinitionError,
    ImplementationAlreadyBoundError,
    InvalidTraitReferenceError,
    NoImplementationError,
    StraitsError,
)
from straits.identifier import TraitIdentifier, create
from straits.logging_config import setup_logging
from straits.registry import TraitRegistry, get_registry
from straits.trait_set import TraitSet

__all__ = [
    "DuplicateTraitDefinitionError",
    "ImplementationAlreadyBoundError",
    "InvalidTraitReferenceError",
    "NoImplementationError",
    "StraitsError",
    "TraitIdentifier",
    "TraitRegistry",
    "TraitSet",
    "create",
    "delegate",
    "get_registry",
    "implement",
    "set_default",
    "setup_logging",
    "to_free_function",
]
