"""Template rendering for alert e-mails using Jinja2.

This module wraps Jinja2 template rendering with strict undefined checking
to catch template errors early. Only the HTML template is autoescaped.
"""

import logging
from typing import Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from .composer import RenderContext
from .models import NotificationTemplateError

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders alert bodies (HTML and plain text) from package templates.

    Templates live in ayd_mailto_alert.notifications.email_templates and are
    cached by the Jinja2 environment after first load.
    """

    def __init__(
        self,
        template_dir: str = "email_templates",
        html_template: str = "alert_body.html.j2",
        text_template: str = "alert_body.txt.j2",
    ):
        """Initialize template renderer with Jinja2 environment.

        Args:
            template_dir: Directory name within the notifications package
            html_template: Filename of HTML body template
            text_template: Filename of plain text body template
        """
        self.html_template_name = html_template
        self.text_template_name = text_template

        self.env = Environment(
            loader=PackageLoader("ayd_mailto_alert.notifications", template_dir),
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default_for_string=False),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    def render(self, context: RenderContext) -> Dict[str, str]:
        """Render both alert bodies.

        Args:
            context: Composed alert context

        Returns:
            Dictionary containing:
            - subject: Subject line from the context
            - html_body: Rendered HTML body
            - text_body: Rendered plain text body

        Raises:
            NotificationTemplateError: If template rendering fails
        """
        variables = context.model_dump()

        try:
            html_template = self.env.get_template(self.html_template_name)
            text_template = self.env.get_template(self.text_template_name)

            html_body = html_template.render(variables)
            text_body = text_template.render(variables)
        except TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e

        logger.debug(f"Rendered alert templates for {context.target}")

        return {
            "subject": context.subject,
            "html_body": html_body,
            "text_body": text_body,
        }
