"""Form metadata source backed by the Google Forms REST API."""

from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from form_mailer.domain.models import FormMetadata
from form_mailer.logging import get_logger

from .base import FormMetadataSource
from .exceptions import MetadataUnavailable

logger = get_logger(__name__, component="source")


class GoogleFormsMetadataSource(FormMetadataSource):
    """Reads form title and linked sheet from the Google Forms API.

    API Details:
        Endpoint: https://forms.googleapis.com/v1/forms/{formId}
        Method: GET
        Authentication: OAuth bearer token (forms.body.readonly scope)
        Response: Form resource with ``info.title`` and ``linkedSheetId``

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    API_BASE_URL = "https://forms.googleapis.com/v1/forms"

    def __init__(
        self,
        access_token: str,
        timeout: int = 30,
        user_agent: str = "FormMailerNotifications/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the source.

        Args:
            access_token: OAuth access token sent as a bearer token
            timeout: HTTP request timeout in seconds
            user_agent: User-Agent header for requests
            session: Pre-built session (for tests); a new one is created if None
        """
        if not access_token or not access_token.strip():
            raise ValueError("access_token cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent
        self._session = session or requests.Session()
        self._session.headers.update({
            "User-Agent": user_agent,
            "Authorization": f"Bearer {access_token.strip()}",
        })

    def get_form_metadata(self, form_id: str) -> FormMetadata:
        url = f"{self.API_BASE_URL}/{form_id}"
        data = self._fetch(url, form_id)

        info = data.get("info") or {}
        title = info.get("title") or info.get("documentTitle") or ""

        try:
            metadata = FormMetadata(
                form_id=data.get("formId") or form_id,
                title=title,
                linked_storage_id=data.get("linkedSheetId"),
            )
        except ValidationError as e:
            raise MetadataUnavailable(
                f"Invalid form resource returned for {form_id}: {e}", form_id=form_id
            ) from e

        logger.debug(
            "Form metadata fetched",
            extra={
                "event": "source.metadata.fetched",
                "form_id": form_id,
                "has_linked_sheet": metadata.has_linked_storage,
            },
        )
        return metadata

    def _fetch(self, url: str, form_id: str) -> Dict[str, Any]:
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={"event": "source.metadata.error", "error_type": "Timeout", "url": url},
            )
            raise MetadataUnavailable(
                f"Request to {url} timed out after {self.timeout} seconds", form_id=form_id
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={"event": "source.metadata.error", "error_type": type(e).__name__, "url": url},
            )
            raise MetadataUnavailable(f"Request to {url} failed: {e}", form_id=form_id) from e

        if response.status_code >= 400:
            logger.error(
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "source.metadata.error",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise MetadataUnavailable(
                f"HTTP {response.status_code}: {response.reason}",
                form_id=form_id,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MetadataUnavailable(
                f"Failed to parse JSON response from {url}: {e}", form_id=form_id
            ) from e

        if not isinstance(data, dict):
            raise MetadataUnavailable(
                f"Expected JSON object response, got {type(data).__name__}", form_id=form_id
            )

        return data
