"""
Template Renderer for blog pages.
Handles Jinja2 template loading, filters and site-wide globals.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.common.config import SiteSettings

DateLike = Union[datetime, date, str, None]


def _as_datetime(value: DateLike) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def short_date(value: DateLike) -> str:
    """Numeric US date, e.g. "1/5/2026"."""
    dt = _as_datetime(value)
    if dt is None:
        return ""
    return f"{dt.month}/{dt.day}/{dt.year}"


def long_date(value: DateLike) -> str:
    """Spelled-out US date, e.g. "January 5, 2026"."""
    dt = _as_datetime(value)
    if dt is None:
        return ""
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"


def iso_datetime(value: DateLike) -> str:
    dt = _as_datetime(value)
    return dt.isoformat() if dt is not None else ""


class TemplateRenderer:
    """
    Renders blog pages using Jinja2 templates.

    Usage:
        renderer = TemplateRenderer(site=settings.site)
        html = renderer.render("home.html.jinja2", {"posts": posts})
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        site: Optional[SiteSettings] = None,
    ):
        """
        Initialize the template renderer.

        Args:
            templates_dir: Path to templates directory.
                          Defaults to ./templates relative to this file.
            site: Site-wide strings exposed to every template as ``site``.
        """
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"

        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["short_date"] = short_date
        self.env.filters["long_date"] = long_date
        self.env.filters["iso_datetime"] = iso_datetime
        self.env.globals["site"] = site or SiteSettings()
        self.env.globals["current_year"] = lambda: datetime.now().year

    def render(self, template_name: str, context: Optional[dict[str, Any]] = None) -> str:
        """
        Render one page template.

        Args:
            template_name: File name under the templates directory
            context: Template variables

        Returns:
            Rendered HTML string
        """
        template = self.env.get_template(template_name)
        return template.render(**(context or {}))
