"""Layout resolution.

Every page maps to an ordered list of candidate layout names, most
specific first. The site layouts directory is searched before the theme
layouts directory; the first existing file wins.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from sitestage.core.page import Page
from sitestage.core.types import NodeType
from sitestage.exceptions import LayoutNotFoundError

logger = logging.getLogger(__name__)

REDIRECT_LAYOUT = "redirect"
REDIRECT_TEMPLATE = "redirect.html"


def _homepage_layouts(page: Page) -> list[str]:
    return ["index.html", "_default/list.html", "_default/page.html"]


def _section_layouts(page: Page) -> list[str]:
    layouts = ["_default/section.html", "_default/list.html"]
    if page.section:
        layouts.insert(0, f"section/{page.section}.html")
    return layouts


def _taxonomy_layouts(page: Page) -> list[str]:
    layouts = ["_default/taxonomy.html", "_default/list.html"]
    if page.variables.singular:
        layouts.insert(0, f"taxonomy/{page.variables.singular}.html")
    return layouts


def _terms_layouts(page: Page) -> list[str]:
    layouts = ["_default/terms.html"]
    if page.variables.singular:
        layouts.insert(0, f"taxonomy/{page.variables.singular}.terms.html")
    return layouts


def _page_layouts(page: Page) -> list[str]:
    layouts: list[str] = []
    if page.section:
        if page.layout:
            layouts.append(f"{page.section}/{page.layout}.html")
        layouts.append(f"{page.section}/page.html")
    if page.layout:
        layouts.append(f"{page.layout}.html")
    layouts.extend(["page.html", "_default/page.html"])
    return layouts


_CASCADES: dict[NodeType, Callable[[Page], list[str]]] = {
    NodeType.HOMEPAGE: _homepage_layouts,
    NodeType.SECTION: _section_layouts,
    NodeType.TAXONOMY: _taxonomy_layouts,
    NodeType.TERMS: _terms_layouts,
}


def layout_candidates(page: Page) -> list[str]:
    """Build the layout cascade for a page.

    Args:
        page: Page to find layouts for

    Returns:
        Candidate layout names, most specific first
    """
    if page.layout == REDIRECT_LAYOUT:
        return [REDIRECT_TEMPLATE]
    if page.node_type is None:
        return _page_layouts(page)
    return _CASCADES[page.node_type](page)


class LayoutResolver:
    """Finds the layout file used to render a page."""

    def __init__(self, layouts_dir: Path, theme_layouts_dir: Path | None = None) -> None:
        """Initialize resolver.

        Args:
            layouts_dir: Site layouts directory
            theme_layouts_dir: Layouts directory of the active theme, if any
        """
        self._layouts_dir = layouts_dir
        self._theme_layouts_dir = theme_layouts_dir

    @property
    def search_dirs(self) -> list[Path]:
        """Directories searched, in order."""
        dirs = [self._layouts_dir]
        if self._theme_layouts_dir is not None:
            dirs.append(self._theme_layouts_dir)
        return dirs

    def resolve(self, page: Page) -> str:
        """Resolve the layout name of a page.

        Redirect pages skip the cascade and always use the redirect layout.

        Args:
            page: Page to resolve

        Returns:
            Layout name relative to a layouts directory

        Raises:
            LayoutNotFoundError: If no candidate exists in any directory
        """
        candidates = layout_candidates(page)
        if candidates == [REDIRECT_TEMPLATE]:
            return REDIRECT_TEMPLATE

        for layouts_dir in self.search_dirs:
            for candidate in candidates:
                if (layouts_dir / candidate).is_file():
                    logger.debug(f"Layout for '{page.id}': {layouts_dir / candidate}")
                    return candidate

        raise LayoutNotFoundError(page.id, candidates)
