"""Application-layer errors – misuse of the engine's lifecycle."""

from __future__ import annotations

from snapreg.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class PipelineClosedError(ApplicationError):
    """A save was requested after the pipeline was shut down."""

    default_code = "pipeline_closed"

    def __init__(self, message: str = "Save pipeline is closed") -> None:
        super().__init__(message)


__all__ = ["ApplicationError", "PipelineClosedError"]
