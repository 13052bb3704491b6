"""Node page creation with pagination.

A node page lists member pages. When the list is longer than the configured
page size, it is split into a chain of paged listing pages linked by
prev/next paths.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from sitestage.config import PaginateConfig
from sitestage.core.collection import PageStore
from sitestage.core.page import INDEX_NAME, Page, urlize
from sitestage.core.types import NodeType

MAIN_MENU = "main"


@dataclass
class Paginator:
    """Members and neighbours of one paged listing page."""

    pages: list[Page] = field(default_factory=list)
    prev: str | None = None
    next: str | None = None
    number: int = 1
    total: int = 1


def node_id(path: str) -> str:
    """Id of the node page living at ``path``."""
    return urlize(f"{path}/{INDEX_NAME}")


def paginate_pages(pages: list[Page], size: int) -> list[list[Page]]:
    """Split pages into consecutive chunks of at most ``size`` pages.

    Args:
        pages: Pages in listing order
        size: Maximum chunk size, must be positive

    Returns:
        ceil(len(pages) / size) chunks preserving order
    """
    if size <= 0:
        raise ValueError("Page size must be positive")
    count = math.ceil(len(pages) / size)
    return [pages[i * size : (i + 1) * size] for i in range(count)]


def add_node_page(
    store: PageStore,
    node_type: NodeType,
    title: str,
    path: str,
    pages: list[Page],
    *,
    paginate: PaginateConfig,
    variables: dict[str, Any] | None = None,
    menu_weight: int = 0,
    section: str | None = None,
) -> list[Page]:
    """Create the node page(s) for a list of member pages and add them to the store.

    Without pagination (disabled, or the list fits in one page) a single page
    carries the full list in its ``pages`` variable. Otherwise the first
    chunk keeps the node path and gets an alias at ``<path>/<seg>/1``, and
    chunk ``i`` lives at ``<path>/<seg>/<i+1>``; every chunk carries a
    ``paginator`` variable.

    Args:
        store: Store receiving the new pages
        node_type: Node type of the created pages
        title: Node title, first letter capitalized on the page
        path: Node path (empty for the homepage)
        pages: Member pages in listing order
        paginate: Pagination settings
        variables: Extra variables set on every created page
        menu_weight: Weight of a "main" menu entry on the first page, 0 for none
        section: Section attribute of the created pages

    Returns:
        Created pages in chunk order

    Raises:
        DuplicateIdError: If a created id is already in the store
    """
    title = title[:1].upper() + title[1:]
    extra = dict(variables or {})

    if not paginate.enabled or len(pages) <= paginate.max:
        page = _new_node_page(node_id(path), urlize(path), title, node_type, section)
        page.variables.pages = list(pages)
        if menu_weight:
            page.variables.menu = {MAIN_MENU: {"weight": menu_weight}}
        page.variables.update(extra)
        return [store.add(page)]

    chunks = paginate_pages(pages, paginate.max)
    created: list[Page] = []
    for i, chunk in enumerate(chunks):
        if i == 0:
            page = _new_node_page(node_id(path), urlize(path), title, node_type, section)
            page.variables.aliases = [_page_path(path, paginate.path, 1)]
            if menu_weight:
                page.variables.menu = {MAIN_MENU: {"weight": menu_weight}}
        else:
            paged = _page_path(path, paginate.path, i + 1)
            page = _new_node_page(node_id(paged), paged, title, node_type, section)

        page.variables.paginator = Paginator(
            pages=chunk,
            prev=_page_path(path, paginate.path, i) if i > 0 else None,
            next=_page_path(path, paginate.path, i + 2) if i < len(chunks) - 1 else None,
            number=i + 1,
            total=len(chunks),
        )
        page.variables.update(extra)
        created.append(store.add(page))
    return created


def _page_path(path: str, segment: str, number: int) -> str:
    return urlize(f"{path}/{segment}/{number}")


def _new_node_page(
    page_id: str,
    pathname: str,
    title: str,
    node_type: NodeType,
    section: str | None,
) -> Page:
    return Page(
        id=page_id,
        pathname=pathname,
        title=title,
        section=section,
        node_type=node_type,
        virtual=True,
    )
