"""Layout rendering with Jinja2.

Layouts are looked up in the site layouts directory, then the theme layouts
directory, then the layouts bundled with sitestage.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from sitestage.assets import get_layouts_dir
from sitestage.core.collection import PageStore, sort_pages_by_date
from sitestage.core.page import Page, urlize


class Renderer(Protocol):
    """What the build needs from a template engine."""

    def add_global(self, name: str, value: Any) -> None: ...

    def render(self, template: str, variables: dict[str, Any]) -> str: ...

    def exists(self, template: str) -> bool: ...


class JinjaRenderer:
    """Renders layouts with a Jinja2 environment."""

    def __init__(self, layout_dirs: list[Path], *, bundled: bool = True) -> None:
        """Initialize renderer.

        Args:
            layout_dirs: Layout directories in lookup order
            bundled: Append the layouts shipped with sitestage as a last resort
        """
        search_path = [str(d) for d in layout_dirs]
        if bundled:
            search_path.append(str(get_layouts_dir()))
        self._search_path = search_path

        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._register_filters()

    @property
    def search_path(self) -> list[str]:
        return list(self._search_path)

    def _register_filters(self) -> None:
        """Register custom Jinja2 filters."""
        self.env.filters["sort_by_weight"] = sort_by_weight
        self.env.filters["sort_by_date"] = sort_by_date
        self.env.filters["by_section"] = by_section
        self.env.filters["urlize_path"] = urlize

    def add_global(self, name: str, value: Any) -> None:
        """Make a variable visible to every render."""
        self.env.globals[name] = value

    def exists(self, template: str) -> bool:
        try:
            self.env.get_template(template)
        except TemplateNotFound:
            return False
        return True

    def render(self, template: str, variables: dict[str, Any]) -> str:
        """Render a layout.

        Args:
            template: Layout name relative to a layouts directory
            variables: Render context

        Returns:
            Rendered text

        Raises:
            TemplateNotFound: If the layout does not exist
        """
        return self.env.get_template(template).render(**variables)


def _weight(item: Any) -> int:
    if isinstance(item, Page):
        return int(item.variables.get("weight") or 0)
    if isinstance(item, dict):
        return int(item.get("weight") or 0)
    return int(getattr(item, "weight", 0) or 0)


def sort_by_weight(items: Iterable[Any]) -> list[Any]:
    """Sort pages, menu entries or mappings by ascending weight (stable)."""
    return sorted(items, key=_weight)


def sort_by_date(pages: Iterable[Page] | PageStore) -> list[Page]:
    """Sort pages newest first."""
    return sort_pages_by_date(pages)


def by_section(pages: Iterable[Any], section: str) -> list[Page]:
    """Keep the pages of one section."""
    return [page for page in pages if isinstance(page, Page) and page.section == section]
