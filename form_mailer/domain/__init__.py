"""Domain models for form submissions and form metadata."""

from .models import FormMetadata, ItemResponse, SubmissionEvent

__all__ = ["SubmissionEvent", "ItemResponse", "FormMetadata"]
