"""Exceptions raised by form metadata sources and identity providers."""

from typing import Optional


class SourceError(Exception):
    """Base exception for collaborator lookups."""

    pass


class MetadataUnavailable(SourceError):
    """The form referenced by a submission could not be resolved.

    Fatal for the current invocation; the host decides whether to alert.
    """

    def __init__(self, message: str, form_id: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.form_id = form_id
        self.status_code = status_code


class IdentityUnavailable(SourceError):
    """The identity of the submitting user is not available.

    Raised for anonymous submissions or when the runtime is not allowed to
    read the user's address. Never fatal: the formatter records a sentinel.
    """

    pass
