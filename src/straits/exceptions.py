"""Custom exceptions for the straits dispatch protocol."""

from typing import Any


class StraitsError(Exception):
    """Base class for exceptions raised by straits."""

    pass


class DuplicateTraitDefinitionError(StraitsError, KeyError):
    """Raised when a trait name is defined or borrowed twice in the same trait set."""

    def __init__(self, trait_name: str) -> None:
        super().__init__(f"Trying to re-define trait '{trait_name}'.")
        self.trait_name = trait_name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class InvalidTraitReferenceError(StraitsError, LookupError):
    """Raised when a name or value does not refer to a trait in the relevant set."""

    def __init__(self, trait_name: str, message: str | None = None) -> None:
        super().__init__(message or f"No trait '{trait_name}'.")
        self.trait_name = trait_name


class NoImplementationError(StraitsError, TypeError):
    """
    Raised by dispatch when neither a binding nor a default implementation exists.

    The message names the trait and includes a representation of the target.
    """

    def __init__(self, trait: Any, target: Any) -> None:
        self.trait = trait
        self.target = target
        if target is None:
            message = f"Trait '{trait}' called on None, and it has no default implementation."
        else:
            message = f"Trait '{trait}' called on {target!r} that doesn't implement it."
        super().__init__(message)


class ImplementationAlreadyBoundError(StraitsError):
    """Raised in strict rebinding mode when a target already binds an implementation for a trait."""

    def __init__(self, trait: Any, target: Any) -> None:
        super().__init__(f"Trait '{trait}' is already implemented by {target!r}; rebinding is disabled.")
        self.trait = trait
        self.target = target
