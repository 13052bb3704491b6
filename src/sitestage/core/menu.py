"""Navigation menus.

Menus are built once all pages exist: entries come from page ``menu``
variables first, then configuration overrides are applied on top.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from sitestage.config import MenuOverride
from sitestage.core.page import Page

logger = logging.getLogger(__name__)


@dataclass
class Entry:
    """Menu entry."""

    id: str
    name: str
    url: str
    weight: int = 0


class Menu:
    """Named menu with entries keyed by id.

    Iteration yields entries by ascending weight; equal weights keep the
    order in which entries were first added.
    """

    __slots__ = ("_entries", "name")

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[str, Entry] = {}

    def add(self, entry: Entry) -> None:
        """Add an entry, replacing one with the same id in place."""
        self._entries[entry.id] = entry

    def remove(self, entry_id: str) -> None:
        """Remove an entry.

        Raises:
            KeyError: If no entry has this id
        """
        del self._entries[entry_id]

    def has(self, entry_id: str) -> bool:
        return entry_id in self._entries

    def get(self, entry_id: str) -> Entry | None:
        return self._entries.get(entry_id)

    def entries(self) -> list[Entry]:
        """Entries sorted by weight."""
        return sorted(self._entries.values(), key=lambda entry: entry.weight)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries


class MenuCollection:
    """Menus keyed by name, created on first access."""

    __slots__ = ("_menus",)

    def __init__(self) -> None:
        self._menus: dict[str, Menu] = {}

    def get(self, name: str) -> Menu:
        if name not in self._menus:
            self._menus[name] = Menu(name)
        return self._menus[name]

    def names(self) -> list[str]:
        return list(self._menus)

    def __getitem__(self, name: str) -> Menu:
        return self._menus[name]

    def __contains__(self, name: object) -> bool:
        return name in self._menus

    def __iter__(self) -> Iterator[str]:
        return iter(self._menus)

    def __len__(self) -> int:
        return len(self._menus)


def build_menus(
    pages: Iterable[Page],
    overrides: dict[str, list[MenuOverride]] | None = None,
) -> MenuCollection:
    """Build menus from page variables and configuration overrides.

    A page's ``menu`` variable may be a menu name, a list of names, or a
    mapping of menu name to properties (``weight``).

    Args:
        pages: Final pages, in store order
        overrides: Menu name -> overrides from configuration

    Returns:
        Assembled menus
    """
    menus = MenuCollection()

    for page in pages:
        menu = page.variables.menu
        if not menu:
            continue
        for menu_name, weight in _page_menus(page, menu):
            menus.get(menu_name).add(
                Entry(id=page.id, name=page.title, url=page.permalink, weight=weight)
            )

    for menu_name, entries in (overrides or {}).items():
        target = menus.get(menu_name)
        for override in entries:
            if override.disabled:
                if target.has(override.id):
                    target.remove(override.id)
                    logger.debug(f"Removed '{override.id}' from menu '{menu_name}'")
                continue
            target.add(
                Entry(
                    id=override.id,
                    name=override.name,
                    url=override.url,
                    weight=override.weight,
                )
            )

    return menus


def _menu_weight(page: Page, value: Any) -> int:
    """Parse a menu weight; a missing or null weight is 0.

    Raises:
        ValueError: If the weight is not an integer
    """
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid menu weight {value!r} on page '{page.id}'") from e


def _page_menus(page: Page, menu: str | list[str] | dict[str, Any]) -> list[tuple[str, int]]:
    """Normalize a page ``menu`` variable to (menu name, weight) pairs."""
    if isinstance(menu, str):
        return [(menu, 0)]
    if isinstance(menu, list):
        return [(str(name), 0) for name in menu]
    pairs: list[tuple[str, int]] = []
    for name, properties in menu.items():
        weight = 0
        if isinstance(properties, dict):
            weight = _menu_weight(page, properties.get("weight"))
        pairs.append((str(name), weight))
    return pairs
