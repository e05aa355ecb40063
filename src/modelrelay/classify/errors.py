"""Failure taxonomy for classification requests."""

from __future__ import annotations


class ClassifyError(Exception):
    """Base class for every classification failure."""


class ValidationError(ClassifyError):
    """The payload was rejected before any network call was made."""


class TransportError(ClassifyError):
    """The remote classifier could not be reached."""


class RemoteError(ClassifyError):
    """The remote classifier answered, but not with a usable success response."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"API error: {status_code}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
