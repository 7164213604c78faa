"""Artifact Renderer - turns the grouped week into HTML fragments.

Templates are loaded from a directory given at construction. Rendering
uses StrictUndefined so a template referencing a field the week structure
does not carry fails instead of silently printing nothing.
"""

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from gcalsync.errors import TemplateExecutionFailure
from gcalsync.grouper import DayView

logger = logging.getLogger(__name__)

ARTIFACTS = ("display", "print")


class ArtifactRenderer:
    """Renders a week through the display and print templates."""

    def __init__(
        self,
        template_dir: str | Path,
        display_template: str = "display.html",
        print_template: str = "print.html",
    ) -> None:
        """Initialize the ArtifactRenderer.

        Args:
            template_dir: Directory holding the template files.
            display_template: File name of the kiosk display template.
            print_template: File name of the printable template.
        """
        self.template_dir = Path(template_dir)
        self.templates = {"display": display_template, "print": print_template}
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render(self, artifact: str, week: list[DayView]) -> str:
        """Render the week through one named template.

        Args:
            artifact: Either "display" or "print".
            week: Day buckets produced by the grouper.

        Returns:
            The rendered text.

        Raises:
            KeyError: If the artifact name is not known.
            TemplateExecutionFailure: If the template is missing, unreadable, or fails to render.
        """
        name = self.templates[artifact]
        try:
            text = self.env.get_template(name).render(days=week)
        except (TemplateError, OSError, UnicodeDecodeError) as e:
            raise TemplateExecutionFailure(f"Unable to render {artifact} template '{name}': {e}") from e
        logger.info("Rendered %s artifact (%d days, %d chars)", artifact, len(week), len(text))
        return text
