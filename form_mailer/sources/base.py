"""Collaborator contracts consumed by the notification formatter."""

from abc import ABC, abstractmethod

from form_mailer.domain.models import FormMetadata


class FormMetadataSource(ABC):
    """Looks up the title and linked spreadsheet of a form."""

    @abstractmethod
    def get_form_metadata(self, form_id: str) -> FormMetadata:
        """Resolve metadata for ``form_id``.

        Raises:
            MetadataUnavailable: If the form cannot be located
        """


class IdentityProvider(ABC):
    """Resolves the email address of the user the routine runs for."""

    @abstractmethod
    def get_current_user_email(self) -> str:
        """Return the current user's email address.

        Raises:
            IdentityUnavailable: If the identity cannot be determined
        """
