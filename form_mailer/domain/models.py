"""Core domain models for submissions and forms.

- SubmissionEvent: one form response as handed over by the host
- ItemResponse: a single (question title, answer) pair inside a response
- FormMetadata: identity and title of a form, plus its linked spreadsheet
"""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from pydantic import AliasChoices, BaseModel, Field, field_validator

from form_mailer.utils.timestamps import ensure_utc


class ItemResponse(BaseModel):
    """Answer to one question of a form, kept exactly as submitted."""

    question_title: str = Field(
        ...,
        validation_alias=AliasChoices("question_title", "title"),
        description="Title of the question",
    )
    answer: str = Field(
        "",
        validation_alias=AliasChoices("answer", "response"),
        description="Answer text (multi-valued answers are joined)",
    )

    model_config = {"frozen": True}

    @field_validator("answer", mode="before")
    @classmethod
    def flatten_answer(cls, v: Any) -> str:
        """Join checkbox/grid answers and turn a missing answer into ''."""
        if v is None:
            return ""
        if isinstance(v, (list, tuple)):
            return ", ".join("" if part is None else str(part) for part in v)
        return str(v)


class SubmissionEvent(BaseModel):
    """A single form response with its answers in question order.

    The order of ``item_responses`` is the order the questions appear on the
    form; nothing downstream may reorder or de-duplicate it.
    """

    form_id: str = Field(..., min_length=1, description="Identifier of the originating form")
    submitted_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("submitted_at", "timestamp"),
        description="When the response was submitted (UTC)",
    )
    item_responses: Tuple[ItemResponse, ...] = Field(
        default=(),
        validation_alias=AliasChoices("item_responses", "responses"),
        description="Ordered (question, answer) pairs",
    )

    model_config = {"frozen": True}

    @field_validator("form_id")
    @classmethod
    def strip_form_id(cls, v: str) -> str:
        """Strip whitespace from the form identifier."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("form_id cannot be empty or whitespace-only")
        return stripped

    @field_validator("submitted_at")
    @classmethod
    def submitted_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure the submission timestamp is timezone-aware UTC."""
        return ensure_utc(v)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], form_id: Optional[str] = None) -> "SubmissionEvent":
        """Build an event from a host payload.

        Args:
            payload: Mapping with ``item_responses`` (or ``responses``), each
                item carrying ``question_title``/``title`` and
                ``answer``/``response``, plus an optional ``timestamp``
            form_id: Form identifier supplied by the host; takes precedence
                over any ``form_id`` inside the payload

        Returns:
            Validated SubmissionEvent

        Raises:
            pydantic.ValidationError: If the payload is malformed
        """
        data = dict(payload)
        if form_id is not None:
            data["form_id"] = form_id
        return cls.model_validate(data)


class FormMetadata(BaseModel):
    """Identity of a form and the spreadsheet its responses are mirrored into."""

    form_id: str = Field(..., min_length=1, description="Form identifier")
    title: str = Field(..., description="Form title")
    linked_storage_id: Optional[str] = Field(
        None, description="Identifier of the linked spreadsheet, if any"
    )

    model_config = {"frozen": True}

    @field_validator("form_id")
    @classmethod
    def strip_form_id(cls, v: str) -> str:
        """Strip whitespace from the form identifier."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("form_id cannot be empty or whitespace-only")
        return stripped

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()

    @field_validator("linked_storage_id")
    @classmethod
    def blank_storage_is_absent(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank storage identifier as no linked storage."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    @property
    def has_linked_storage(self) -> bool:
        return self.linked_storage_id is not None
