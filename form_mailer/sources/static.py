"""In-memory collaborators built from configuration."""

from typing import Dict, Iterable, Optional

from form_mailer.domain.models import FormMetadata
from form_mailer.logging import get_logger

from .base import FormMetadataSource, IdentityProvider
from .exceptions import IdentityUnavailable, MetadataUnavailable

logger = get_logger(__name__, component="source")


class StaticFormMetadataSource(FormMetadataSource):
    """Serves metadata for the forms listed in the ``forms:`` config section."""

    def __init__(self, forms: Iterable[FormMetadata]) -> None:
        self._forms: Dict[str, FormMetadata] = {form.form_id: form for form in forms}

    def get_form_metadata(self, form_id: str) -> FormMetadata:
        try:
            return self._forms[form_id]
        except KeyError:
            logger.error(
                f"Form {form_id} is not configured",
                extra={"event": "source.metadata.missing", "form_id": form_id},
            )
            raise MetadataUnavailable(
                f"Form not found in configuration: {form_id}", form_id=form_id
            ) from None


class StaticIdentityProvider(IdentityProvider):
    """Returns a fixed address, typically from FORM_MAILER_EFFECTIVE_USER."""

    def __init__(self, email: Optional[str] = None) -> None:
        self.email = email.strip() if email else None

    def get_current_user_email(self) -> str:
        if not self.email:
            raise IdentityUnavailable("No effective user configured")
        return self.email
