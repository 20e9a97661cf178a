"""Domain errors – registry rule and invariant violations."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from snapreg.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a registry rule / invariant is violated."""

    default_code = "domain_error"


class InvariantViolationError(DomainError):
    """An engine invariant was violated."""

    default_code = "invariant_violation"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class NotFoundError(DomainError):
    """The requested resource does not exist."""

    default_code = "not_found"

    def __init__(
        self,
        resource: str,
        identifier: Any = None,
        **kwargs: Any,
    ) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class UnresolvedReferenceError(NotFoundError):
    """Referenced SMRIs are not registered, so references cannot be resolved."""

    default_code = "unresolved_reference"

    def __init__(self, missing: Iterable[int], **kwargs: Any) -> None:
        self.missing: tuple[int, ...] = tuple(sorted(set(missing)))
        super().__init__(
            "Referenced snapshot",
            ", ".join(str(smri) for smri in self.missing),
            detail={"missing": list(self.missing)},
            **kwargs,
        )


class ConflictError(DomainError):
    """The operation conflicts with existing state."""

    default_code = "conflict"


class DuplicateIdentifierError(ConflictError):
    """An SMRI is already registered for the given kind of entry."""

    default_code = "duplicate_identifier"

    def __init__(self, smri: int, kind: str, **kwargs: Any) -> None:
        super().__init__(
            f"SMRI {smri} is already registered as a {kind}",
            detail={"smri": smri, "kind": kind},
            **kwargs,
        )
        self.smri = smri
        self.kind = kind


class TypeMismatchError(DomainError):
    """A model was requested under a type it is not an instance of."""

    default_code = "type_mismatch"

    def __init__(self, smri: int, expected: type, actual: type, **kwargs: Any) -> None:
        super().__init__(
            f"Model {smri} is a {actual.__name__}, not a {expected.__name__}",
            detail={"smri": smri, "expected": expected.__name__, "actual": actual.__name__},
            **kwargs,
        )
        self.smri = smri
        self.expected = expected
        self.actual = actual


__all__ = [
    "ConflictError",
    "DomainError",
    "DuplicateIdentifierError",
    "InvariantViolationError",
    "NotFoundError",
    "TypeMismatchError",
    "UnresolvedReferenceError",
    "ValidationError",
]
