"""Tests for menu building."""

from collections.abc import Callable

import pytest
from sitestage.config import MenuOverride
from sitestage.core.menu import Entry, Menu, MenuCollection, build_menus
from sitestage.core.page import Page


class TestMenu:
    """Tests for Menu ordering and updates."""

    def test__weights__ascending_order(self) -> None:
        """Entries iterate by ascending weight."""
        menu = Menu("main")
        for entry_id, weight in [("c", 30), ("a", 10), ("b", 20)]:
            menu.add(Entry(id=entry_id, name=entry_id, url=entry_id, weight=weight))

        assert [e.weight for e in menu] == [10, 20, 30]

    def test__equal_weights__insertion_order(self) -> None:
        """Ties keep the order entries were added."""
        menu = Menu("main")
        for entry_id in ["x", "y", "z"]:
            menu.add(Entry(id=entry_id, name=entry_id, url=entry_id))

        assert [e.id for e in menu.entries()] == ["x", "y", "z"]

    def test__same_id__replaced_in_place(self) -> None:
        """Adding an existing id updates it without moving it."""
        menu = Menu("main")
        menu.add(Entry(id="a", name="A", url="a"))
        menu.add(Entry(id="b", name="B", url="b"))

        menu.add(Entry(id="a", name="Renamed", url="a"))

        assert [e.name for e in menu] == ["Renamed", "B"]
        assert len(menu) == 2

    def test__remove_missing__raises(self) -> None:
        """Removing an unknown entry raises KeyError."""
        with pytest.raises(KeyError):
            Menu("main").remove("nope")


class TestMenuCollection:
    """Tests for MenuCollection."""

    def test__get__creates_menu(self) -> None:
        """Menus are created on first access."""
        menus = MenuCollection()

        menus.get("footer").add(Entry(id="a", name="A", url="a", weight=2))

        assert "footer" in menus
        assert menus.names() == ["footer"]
        assert [entry.id for entry in menus["footer"]] == ["a"]


class TestBuildMenus:
    """Tests for build_menus()."""

    def test__menu_name__entry_from_page(self, make_page: Callable[..., Page]) -> None:
        """A menu name adds an entry with weight 0."""
        page = make_page("about", title="About", variables={"menu": "main"})

        menus = build_menus([page])

        (entry,) = menus["main"].entries()
        assert entry == Entry(id="about", name="About", url="about", weight=0)

    def test__menu_mapping__weights_and_several_menus(
        self, make_page: Callable[..., Page]
    ) -> None:
        """A mapping places the page in several menus with weights."""
        page = make_page(
            "blog/index",
            pathname="blog/index",
            title="Blog",
            variables={"menu": {"main": {"weight": 100}, "footer": None}},
        )

        menus = build_menus([page])

        assert menus["main"].get("blog/index").weight == 100
        assert menus["main"].get("blog/index").url == "blog"
        assert menus["footer"].get("blog/index").weight == 0

    def test__null_weight__defaults_to_zero(self, make_page: Callable[..., Page]) -> None:
        """A weight left empty in frontmatter counts as 0."""
        page = make_page("about", variables={"menu": {"main": {"weight": None}}})

        menus = build_menus([page])

        assert menus["main"].get("about").weight == 0

    def test__invalid_weight__raises_with_page_id(self, make_page: Callable[..., Page]) -> None:
        """A non-numeric weight names the offending page."""
        page = make_page("about", variables={"menu": {"main": {"weight": "heavy"}}})

        with pytest.raises(ValueError, match="Invalid menu weight 'heavy' on page 'about'"):
            build_menus([page])

    def test__menu_list__entry_in_each(self, make_page: Callable[..., Page]) -> None:
        """A list of names adds the page to each menu."""
        page = make_page("about", variables={"menu": ["main", "footer"]})

        menus = build_menus([page])

        assert sorted(menus) == ["footer", "main"]

    def test__disabled_override__removes_entry(self, make_page: Callable[..., Page]) -> None:
        """A disabled override removes the page's entry."""
        pages = [
            make_page("about", variables={"menu": "main"}),
            make_page("contact", variables={"menu": "main"}),
        ]

        menus = build_menus(pages, {"main": [MenuOverride(id="about", disabled=True)]})

        assert "about" not in menus["main"]
        assert [e.id for e in menus["main"]] == ["contact"]

    def test__override__upserts_entry(self, make_page: Callable[..., Page]) -> None:
        """Overrides update existing entries and add new ones."""
        pages = [make_page("about", variables={"menu": "main"})]
        overrides = {
            "main": [
                MenuOverride(id="about", name="About us", url="about-us", weight=5),
                MenuOverride(id="github", name="GitHub", url="https://github.com", weight=-1),
            ]
        }

        menus = build_menus(pages, overrides)

        assert [(e.id, e.name, e.url) for e in menus["main"]] == [
            ("github", "GitHub", "https://github.com"),
            ("about", "About us", "about-us"),
        ]

    def test__disabled_unknown_entry__ignored(self) -> None:
        """Disabling an entry that does not exist is a no-op."""
        menus = build_menus([], {"main": [MenuOverride(id="nope", disabled=True)]})

        assert len(menus["main"]) == 0
