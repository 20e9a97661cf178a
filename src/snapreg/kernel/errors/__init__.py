"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   ├── InvariantViolationError
    │   ├── ValidationError
    │   ├── NotFoundError
    │   │   └── UnresolvedReferenceError
    │   ├── ConflictError
    │   │   └── DuplicateIdentifierError
    │   └── TypeMismatchError
    ├── ApplicationError         (application.py)
    │   └── PipelineClosedError
    └── InfrastructureError      (infrastructure.py)
        ├── SerializationError
        │   ├── EncodeError
        │   └── DecodeError
        ├── WriteError
        └── ReadError
"""

from snapreg.kernel.errors.application import ApplicationError, PipelineClosedError
from snapreg.kernel.errors.base import BaseError
from snapreg.kernel.errors.domain import (
    ConflictError,
    DomainError,
    DuplicateIdentifierError,
    InvariantViolationError,
    NotFoundError,
    TypeMismatchError,
    UnresolvedReferenceError,
    ValidationError,
)
from snapreg.kernel.errors.infrastructure import (
    DecodeError,
    EncodeError,
    InfrastructureError,
    ReadError,
    SerializationError,
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
    "PipelineClosedError",
    "ReadError",
    "SerializationError",
    "TypeMismatchError",
    "UnresolvedReferenceError",
    "ValidationError",
    "WriteError",
]
