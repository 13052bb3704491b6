"""Tests for page collection."""

import datetime
from collections.abc import Callable

import pytest
from sitestage.core.collection import PageStore, sort_pages_by_date
from sitestage.core.page import Page
from sitestage.exceptions import DuplicateIdError, PageNotFoundError


class TestPageStoreAdd:
    """Tests for PageStore.add()."""

    def test__new_id__added_in_order(self, make_page: Callable[..., Page]) -> None:
        """Pages keep insertion order."""
        store = PageStore()

        store.add(make_page("b"))
        store.add(make_page("a"))

        assert store.ids() == ["b", "a"]
        assert len(store) == 2

    def test__duplicate_id__raises(self, make_page: Callable[..., Page]) -> None:
        """Adding an existing id fails."""
        store = PageStore([make_page("about")])

        with pytest.raises(DuplicateIdError, match="'about' already exists"):
            store.add(make_page("about"))

        assert len(store) == 1


class TestPageStoreLookup:
    """Tests for get(), find(), has() and remove()."""

    def test__get_missing__raises(self) -> None:
        """Missing ids raise PageNotFoundError."""
        with pytest.raises(PageNotFoundError, match="'nope' not found"):
            PageStore().get("nope")

    def test__find_missing__returns_none(self) -> None:
        """find() is the non-raising lookup."""
        assert PageStore().find("nope") is None

    def test__find_by_permalink__matches_published_url(
        self, make_page: Callable[..., Page]
    ) -> None:
        """Pages are found by their final URL, not their id."""
        section = make_page("blog/index", pathname="blog/index")
        moved = make_page("about", explicit_permalink="/Team/")
        store = PageStore([section, moved])

        assert store.find_by_permalink("blog") is section
        assert store.find_by_permalink("team") is moved
        assert store.find_by_permalink("about") is None

    def test__remove__drops_page(self, make_page: Callable[..., Page]) -> None:
        """remove() returns and drops the page."""
        page = make_page("a")
        store = PageStore([page])

        removed = store.remove("a")

        assert removed is page
        assert not store.has("a")
        assert "a" not in store

    def test__remove_missing__raises(self) -> None:
        """Removing an unknown id fails."""
        with pytest.raises(PageNotFoundError):
            PageStore().remove("nope")


class TestPageStoreReplace:
    """Tests for PageStore.replace()."""

    def test__same_id__keeps_position(self, make_page: Callable[..., Page]) -> None:
        """Replacement keeps the page's position."""
        store = PageStore([make_page("a"), make_page("b"), make_page("c")])
        new_b = make_page("b", title="New")

        store.replace("b", new_b)

        assert store.ids() == ["a", "b", "c"]
        assert store.get("b") is new_b

    def test__changed_id__rekeys_in_place(self, make_page: Callable[..., Page]) -> None:
        """Replacing with a new id keeps the position under the new key."""
        store = PageStore([make_page("a"), make_page("b")])

        store.replace("a", make_page("z"))

        assert store.ids() == ["z", "b"]

    def test__missing_id__raises(self, make_page: Callable[..., Page]) -> None:
        """Replacing an unknown id fails."""
        with pytest.raises(PageNotFoundError):
            PageStore().replace("a", make_page("a"))


class TestPageStoreDerived:
    """Tests for filter() and sort()."""

    def test__filter__returns_new_store(self, make_page: Callable[..., Page]) -> None:
        """Filtering keeps order and leaves the source alone."""
        store = PageStore([make_page("a", section="x"), make_page("b"), make_page("c", section="x")])

        filtered = store.filter(lambda page: page.section == "x")

        assert filtered.ids() == ["a", "c"]
        assert len(store) == 3

    def test__sort_by_key__is_stable(self, make_page: Callable[..., Page]) -> None:
        """Equal keys keep their relative order."""
        store = PageStore(
            [make_page("a", title="2"), make_page("b", title="1"), make_page("c", title="2")]
        )

        sorted_store = store.sort(key=lambda page: page.title)

        assert sorted_store.ids() == ["b", "a", "c"]
        assert store.ids() == ["a", "b", "c"]

    def test__sort_by_cmp__orders_pages(self, make_page: Callable[..., Page]) -> None:
        """A three-way comparator can be used instead of a key."""
        store = PageStore([make_page("a"), make_page("c"), make_page("b")])

        sorted_store = store.sort(cmp=lambda x, y: (x.id > y.id) - (x.id < y.id), reverse=True)

        assert sorted_store.ids() == ["c", "b", "a"]

    def test__sort_without_key__raises(self) -> None:
        """sort() needs a key or comparator."""
        with pytest.raises(ValueError, match="key or a cmp"):
            PageStore().sort()

    def test__sort_by_weight__missing_weight_is_zero(self, make_page: Callable[..., Page]) -> None:
        """Pages without weight sort as weight 0."""
        store = PageStore(
            [
                make_page("a", variables={"weight": 5}),
                make_page("b"),
                make_page("c", variables={"weight": -1}),
            ]
        )

        assert store.sort_by_weight().ids() == ["c", "b", "a"]

    def test__sort_by_date__newest_first(self, make_page: Callable[..., Page]) -> None:
        """Dated pages come newest first, undated ones last."""
        store = PageStore(
            [
                make_page("old", date=datetime.date(2023, 1, 1)),
                make_page("undated"),
                make_page("new", date=datetime.datetime(2024, 6, 1, 12, 0)),
            ]
        )

        assert store.sort_by_date().ids() == ["new", "old", "undated"]


class TestPageStoreIteration:
    """Tests for iteration."""

    def test__add_while_iterating__allowed(self, make_page: Callable[..., Page]) -> None:
        """Iteration works on a snapshot."""
        store = PageStore([make_page("a"), make_page("b")])

        for page in store:
            store.add(make_page(f"{page.id}/copy"))

        assert store.ids() == ["a", "b", "a/copy", "b/copy"]


class TestSortPagesByDate:
    """Tests for sort_pages_by_date()."""

    def test__aware_and_naive__compared(self, make_page: Callable[..., Page]) -> None:
        """Timezone-aware datetimes sort with plain dates."""
        aware = make_page(
            "aware", date=datetime.datetime(2024, 3, 1, tzinfo=datetime.UTC)
        )
        plain = make_page("plain", date=datetime.date(2024, 2, 1))

        assert [p.id for p in sort_pages_by_date([plain, aware])] == ["aware", "plain"]
