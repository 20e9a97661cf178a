"""Kernel – identifiers, model records, errors and clocks."""

from snapreg.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DecodeError,
    DomainError,
    DuplicateIdentifierError,
    EncodeError,
    InfrastructureError,
    InvariantViolationError,
    NotFoundError,
    ReadError,
    SerializationError,
    TypeMismatchError,
    UnresolvedReferenceError,
    ValidationError,
    WriteError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DecodeError",
    "DomainError",
    "DuplicateIdentifierError",
    "EncodeError",
    "InfrastructureError",
    "InvariantViolationError",
    "NotFoundError",
    "ReadError",
    "SerializationError",
    "TypeMismatchError",
    "UnresolvedReferenceError",
    "ValidationError",
    "WriteError",
]
