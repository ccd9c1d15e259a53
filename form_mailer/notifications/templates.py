"""Template rendering for submission emails using Jinja2.

Answers are inserted verbatim unless the renderer is built with
``escape_html=True``; the plain-text template is never escaped.
"""

import logging
from typing import Any, Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders the HTML body and plain-text fallback of a submission email.

    Templates live in the ``form_mailer.notifications/email_templates``
    package directory and are cached by the Jinja2 environment.
    """

    def __init__(
        self,
        escape_html: bool = False,
        template_dir: str = "email_templates",
        html_template: str = "submission_body.html.j2",
        text_template: str = "submission_body.txt.j2",
    ):
        """Initialize template renderer with a Jinja2 environment.

        Args:
            escape_html: Auto-escape values in the HTML template
            template_dir: Directory name within the form_mailer.notifications package
            html_template: Filename of the HTML body template
            text_template: Filename of the plain-text body template
        """
        self.escape_html = escape_html
        self.html_template_name = html_template
        self.text_template_name = text_template

        self.env = Environment(
            loader=PackageLoader("form_mailer.notifications", template_dir),
            autoescape=self._should_autoescape,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

        logger.debug(
            f"Initialized TemplateRenderer with templates from {template_dir} "
            f"(escape_html={escape_html})"
        )

    def _should_autoescape(self, template_name: str) -> bool:
        return self.escape_html and template_name.endswith(".html.j2")

    def render(self, context: Dict[str, Any]) -> Dict[str, str]:
        """Render the email bodies with the provided context.

        Args:
            context: Template variables (see payloads.build_submission_context)

        Returns:
            Dictionary with ``html_body`` and ``text_body``

        Raises:
            NotificationTemplateError: If template rendering fails
        """
        try:
            html_body = self.env.get_template(self.html_template_name).render(context)
            text_body = self.env.get_template(self.text_template_name).render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e

        logger.debug(f"Rendered templates for form: {context.get('form_id', 'unknown')}")

        return {"html_body": html_body, "text_body": text_body}
