"""Collaborators that supply form metadata and the current user's identity."""

from .base import FormMetadataSource, IdentityProvider
from .exceptions import IdentityUnavailable, MetadataUnavailable, SourceError
from .google_forms import GoogleFormsMetadataSource
from .static import StaticFormMetadataSource, StaticIdentityProvider

__all__ = [
    # Contracts
    "FormMetadataSource",
    "IdentityProvider",
    # Implementations
    "StaticFormMetadataSource",
    "StaticIdentityProvider",
    "GoogleFormsMetadataSource",
    # Exceptions
    "SourceError",
    "MetadataUnavailable",
    "IdentityUnavailable",
]
