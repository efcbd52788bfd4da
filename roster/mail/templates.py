"""
HTML email templates.

Rendering is a pure function of the template name and its variables.
Variables are inserted verbatim; callers escape anything user-supplied.
"""

from typing import Any, Dict, Optional

from ..errors import ValidationError

CUSTOM_EMAIL_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .footer {{ margin-top: 40px; font-size: 12px; color: #666; }}
    </style>
</head>
<body>
    <div class="container">
        <h2>{title}</h2>
        <p>Hi {userName},</p>
        {body}
        <div class="footer">
            <p>If you weren't expecting this email, you can safely ignore it.</p>
        </div>
    </div>
</body>
</html>
"""

DEFAULT_TEMPLATES: Dict[str, str] = {
    "custom-email": CUSTOM_EMAIL_HTML,
}


class TemplateRenderer:
    """
    Renders named HTML templates with ``str.format`` placeholders.

    Example:
        ```python
        renderer = TemplateRenderer()
        html = renderer.render(
            "custom-email",
            {"userName": "", "title": "Hello", "body": "<p>...</p>"},
        )
        ```
    """

    def __init__(self, templates: Optional[Dict[str, str]] = None) -> None:
        self.templates = dict(DEFAULT_TEMPLATES)
        if templates:
            self.templates.update(templates)

    def render(self, template_name: str, variables: Dict[str, Any]) -> str:
        """
        Render a template.

        Args:
            template_name: Registered template name
            variables: Placeholder values

        Returns:
            Rendered HTML

        Raises:
            ValidationError: If the template is unknown or a placeholder is missing
        """
        template = self.templates.get(template_name)
        if template is None:
            raise ValidationError(f"Unknown email template: {template_name}")

        try:
            return template.format(**variables)
        except KeyError as e:
            raise ValidationError(
                f"Missing variable {e.args[0]!r} for template {template_name}"
            ) from e
