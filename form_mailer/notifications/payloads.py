"""Template context construction for submission emails."""

from datetime import datetime
from typing import Any, Dict

from form_mailer.config.models import NotificationConfig
from form_mailer.domain.models import FormMetadata, SubmissionEvent
from form_mailer.utils.timestamps import format_for_display

from .models import FormLinks

MISSING_STORE_WARNING = "No linked Google Sheet found for this form."


def build_submission_context(
    event: SubmissionEvent,
    metadata: FormMetadata,
    links: FormLinks,
    config: NotificationConfig,
    rendered_at: datetime,
) -> Dict[str, Any]:
    """Build the template context for one submission.

    ``rendered_at`` is the wall-clock time of rendering, which is what the
    email shows; the submission timestamp only goes to the log.

    Returns:
        Dictionary with keys:
        - form_id, form_title: Form identity
        - mode: Active delivery mode
        - rendered_at: Render time formatted in the display timezone
        - items: Ordered list of {question_title, answer}
        - form_summary_url, results_store_url: Links (store may be None)
        - missing_store_warning: Text shown when no sheet is linked
        - sender_address: From address named in the footer
    """
    return {
        "form_id": metadata.form_id,
        "form_title": metadata.title,
        "mode": config.mode,
        "rendered_at": format_for_display(
            rendered_at, config.display_timezone, config.timestamp_format
        ),
        "items": [
            {"question_title": item.question_title, "answer": item.answer}
            for item in event.item_responses
        ],
        "form_summary_url": links.form_summary_url,
        "results_store_url": links.results_store_url,
        "missing_store_warning": MISSING_STORE_WARNING,
        "sender_address": config.sender_address,
    }
