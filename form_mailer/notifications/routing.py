"""Mode routing and link derivation for submission notifications."""

from form_mailer.config.models import DeliveryMode, NotificationConfig
from form_mailer.domain.models import FormMetadata

from .models import FormLinks, ModeRouting, UnsupportedMode

SUBJECT_TEMPLATE = "New response submitted: {form_title}"

SUBJECT_PREFIXES = {
    DeliveryMode.TEST.value: "[TESTING] ",
    DeliveryMode.PROD.value: "",
}


def resolve_mode(config: NotificationConfig, form_title: str) -> ModeRouting:
    """Pick subject and recipients for the active mode.

    TEST mode prefixes the subject with "[TESTING]" and addresses only the
    test recipients; PROD mode addresses only the production recipients.
    The two lists are never combined.

    Args:
        config: Notification configuration
        form_title: Title of the submitted form

    Returns:
        ModeRouting with mode, subject and recipients

    Raises:
        UnsupportedMode: If the mode is unknown or its recipient list is empty
    """
    mode = config.mode
    if mode not in SUBJECT_PREFIXES:
        supported = ", ".join(SUBJECT_PREFIXES)
        raise UnsupportedMode(
            f"Unsupported notification mode '{mode}'. Must be one of: {supported}",
            mode=mode,
        )

    if mode == DeliveryMode.TEST.value:
        recipients = config.test_recipients
    else:
        recipients = config.prod_recipients

    if not recipients:
        raise UnsupportedMode(f"No recipients configured for mode '{mode}'", mode=mode)

    subject = SUBJECT_PREFIXES[mode] + SUBJECT_TEMPLATE.format(form_title=form_title)
    return ModeRouting(mode=mode, subject=subject, recipients=tuple(recipients))


def build_form_links(metadata: FormMetadata, config: NotificationConfig) -> FormLinks:
    """Build the responses-summary link and, if linked, the spreadsheet link.

    Example:
        >>> links = build_form_links(FormMetadata(form_id="abc", title="T"), config)
        >>> links.form_summary_url
        'https://docs.google.com/forms/d/abc/edit#responses'
        >>> links.results_store_url is None
        True
    """
    summary_url = config.form_summary_url_template.format(form_id=metadata.form_id)

    store_url = None
    if metadata.linked_storage_id:
        store_url = config.results_store_url_template.format(
            storage_id=metadata.linked_storage_id
        )

    return FormLinks(form_summary_url=summary_url, results_store_url=store_url)
