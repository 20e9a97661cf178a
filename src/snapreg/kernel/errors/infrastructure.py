"""Infrastructure errors – serializer and filesystem failures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from snapreg.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a registry rule violation."""

    default_code = "infrastructure_error"


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class EncodeError(SerializationError):
    """The serializer could not turn model groups into bytes."""

    default_code = "encode_error"


class DecodeError(SerializationError):
    """The serializer could not turn bytes back into model groups."""

    default_code = "decode_error"


class WriteError(InfrastructureError):
    """The snapshot artifact could not be written."""

    default_code = "write_error"

    def __init__(self, path: str | Path, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Could not write snapshot to '{path}'", **kwargs)
        self.path = Path(path)


class ReadError(InfrastructureError):
    """The snapshot artifact exists but could not be read."""

    default_code = "read_error"

    def __init__(self, path: str | Path, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Could not read snapshot from '{path}'", **kwargs)
        self.path = Path(path)


__all__ = [
    "DecodeError",
    "EncodeError",
    "InfrastructureError",
    "ReadError",
    "SerializationError",
    "WriteError",
]
