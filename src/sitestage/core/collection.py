"""Ordered page collection.

Pages are kept in insertion order and indexed by id for O(1) lookups.
Derived collections (filtered, sorted) are new stores; the source is never
touched.
"""

import datetime
import functools
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from sitestage.core.page import Page
from sitestage.exceptions import DuplicateIdError, PageNotFoundError


class PageStore:
    """Insertion-ordered, id-keyed collection of pages."""

    __slots__ = ("_pages",)

    def __init__(self, pages: Iterable[Page] = ()) -> None:
        """Initialize store.

        Args:
            pages: Initial pages, added in order

        Raises:
            DuplicateIdError: If two initial pages share an id
        """
        self._pages: dict[str, Page] = {}
        for page in pages:
            self.add(page)

    def add(self, page: Page) -> Page:
        """Append a page.

        Args:
            page: Page to add

        Returns:
            The added page

        Raises:
            DuplicateIdError: If a page with the same id exists
        """
        if page.id in self._pages:
            raise DuplicateIdError(page.id)
        self._pages[page.id] = page
        return page

    def replace(self, page_id: str, page: Page) -> None:
        """Replace the page stored under ``page_id``, keeping its position.

        Raises:
            PageNotFoundError: If ``page_id`` is not in the store
        """
        if page_id not in self._pages:
            raise PageNotFoundError(page_id)
        if page.id != page_id:
            if page.id in self._pages:
                raise DuplicateIdError(page.id)
            self._pages = {
                (page.id if key == page_id else key): (page if key == page_id else value)
                for key, value in self._pages.items()
            }
            return
        self._pages[page_id] = page

    def remove(self, page_id: str) -> Page:
        """Remove and return a page.

        Raises:
            PageNotFoundError: If ``page_id`` is not in the store
        """
        try:
            return self._pages.pop(page_id)
        except KeyError:
            raise PageNotFoundError(page_id) from None

    def get(self, page_id: str) -> Page:
        """Get page by id.

        Raises:
            PageNotFoundError: If ``page_id`` is not in the store
        """
        try:
            return self._pages[page_id]
        except KeyError:
            raise PageNotFoundError(page_id) from None

    def find(self, page_id: str) -> Page | None:
        """Get page by id, None if absent."""
        return self._pages.get(page_id)

    def has(self, page_id: str) -> bool:
        return page_id in self._pages

    def find_by_permalink(self, permalink: str) -> Page | None:
        """Get the first page published at ``permalink``, None if absent."""
        for page in self._pages.values():
            if page.permalink == permalink:
                return page
        return None

    def filter(self, predicate: Callable[[Page], bool]) -> "PageStore":
        """Return a new store with the matching pages, in the same order."""
        return PageStore(page for page in self._pages.values() if predicate(page))

    def sort(
        self,
        key: Callable[[Page], Any] | None = None,
        *,
        cmp: Callable[[Page, Page], int] | None = None,
        reverse: bool = False,
    ) -> "PageStore":
        """Return a new, stably sorted store.

        Args:
            key: Sort key function
            cmp: Three-way comparator, used when ``key`` is not given
            reverse: Sort descending (still stable)

        Returns:
            Sorted copy of the store
        """
        if key is None and cmp is None:
            raise ValueError("sort() needs a key or a cmp function")
        sort_key = key if key is not None else functools.cmp_to_key(cmp)
        return PageStore(sorted(self._pages.values(), key=sort_key, reverse=reverse))

    def sort_by_date(self) -> "PageStore":
        """Newest first; undated pages keep their order at the end."""
        return PageStore(sort_pages_by_date(self._pages.values()))

    def sort_by_weight(self) -> "PageStore":
        """Ascending ``weight`` variable; pages without one count as 0."""
        return self.sort(key=lambda page: page.variables.get("weight") or 0)

    def ids(self) -> list[str]:
        return list(self._pages)

    def to_list(self) -> list[Page]:
        return list(self._pages.values())

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._pages

    def __iter__(self) -> Iterator[Page]:
        # Snapshot so phases may add pages while iterating
        return iter(list(self._pages.values()))

    def __len__(self) -> int:
        return len(self._pages)

    def __repr__(self) -> str:
        return f"PageStore({len(self._pages)} pages)"


def sort_pages_by_date(pages: Iterable[Page]) -> list[Page]:
    """Sort pages newest first, undated pages last.

    Args:
        pages: Pages to sort

    Returns:
        New list, stable for equal dates
    """
    pages = list(pages)
    dated = [page for page in pages if page.date is not None]
    undated = [page for page in pages if page.date is None]
    dated.sort(key=lambda page: _as_datetime(page.date), reverse=True)
    return dated + undated


def _as_datetime(value: datetime.date) -> datetime.datetime:
    """Compare dates and datetimes on one timeline."""
    if isinstance(value, datetime.datetime):
        return value.replace(tzinfo=None)
    return datetime.datetime(value.year, value.month, value.day)
