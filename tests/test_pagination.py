"""Tests for node page creation and pagination."""

from collections.abc import Callable

import pytest
from sitestage.config import PaginateConfig
from sitestage.core.collection import PageStore
from sitestage.core.page import Page
from sitestage.core.pagination import add_node_page, node_id, paginate_pages
from sitestage.core.types import NodeType


class TestPaginatePages:
    """Tests for paginate_pages()."""

    def test__chunks__concatenate_to_input(self, make_page: Callable[..., Page]) -> None:
        """Chunks preserve every page in order."""
        pages = [make_page(f"p{i}") for i in range(7)]

        chunks = paginate_pages(pages, 3)

        assert [len(c) for c in chunks] == [3, 3, 1]
        assert [p for chunk in chunks for p in chunk] == pages

    def test__empty_list__no_chunks(self) -> None:
        """No pages give no chunks."""
        assert paginate_pages([], 5) == []

    def test__zero_size__raises(self) -> None:
        """Size must be positive."""
        with pytest.raises(ValueError, match="positive"):
            paginate_pages([], 0)


class TestNodeId:
    """Tests for node_id()."""

    def test__empty_path__is_index(self) -> None:
        """The homepage node id is 'index'."""
        assert node_id("") == "index"

    def test__section_path__appends_index(self) -> None:
        """Node ids end with /index."""
        assert node_id("Blog") == "blog/index"


class TestAddNodePage:
    """Tests for add_node_page()."""

    def test__fits_one_page__single_unpaginated_page(
        self, make_page: Callable[..., Page], paginate: PaginateConfig
    ) -> None:
        """Short lists produce one page carrying all members."""
        store = PageStore()
        members = [make_page("blog/a"), make_page("blog/b")]

        created = add_node_page(
            store, NodeType.SECTION, "blog", "blog", members, paginate=paginate, menu_weight=100
        )

        assert len(created) == 1
        page = created[0]
        assert page.id == "blog/index"
        assert page.pathname == "blog"
        assert page.title == "Blog"
        assert page.virtual
        assert page.node_type is NodeType.SECTION
        assert page.variables.pages == members
        assert page.variables.paginator is None
        assert page.variables.menu == {"main": {"weight": 100}}
        assert store.get("blog/index") is page

    def test__twelve_pages_max_five__three_linked_pages(
        self, make_page: Callable[..., Page], paginate: PaginateConfig
    ) -> None:
        """Twelve members with max 5 give 5/5/2 pages linked by prev/next."""
        store = PageStore()
        members = [make_page(f"blog/p{i}") for i in range(12)]

        created = add_node_page(
            store, NodeType.SECTION, "blog", "blog", members, paginate=paginate
        )

        assert [p.id for p in created] == ["blog/index", "blog/page/2/index", "blog/page/3/index"]
        assert [p.pathname for p in created] == ["blog", "blog/page/2", "blog/page/3"]
        paginators = [p.variables.paginator for p in created]
        assert [len(pg.pages) for pg in paginators] == [5, 5, 2]
        assert [pg.prev for pg in paginators] == [None, "blog/page/1", "blog/page/2"]
        assert [pg.next for pg in paginators] == ["blog/page/2", "blog/page/3", None]
        assert [pg.number for pg in paginators] == [1, 2, 3]
        assert all(pg.total == 3 for pg in paginators)
        assert [p for pg in paginators for p in pg.pages] == members

    def test__paginated__first_page_aliased_to_page_one(
        self, make_page: Callable[..., Page], paginate: PaginateConfig
    ) -> None:
        """The first chunk is reachable at <path>/page/1."""
        members = [make_page(f"blog/p{i}") for i in range(6)]

        created = add_node_page(
            PageStore(), NodeType.SECTION, "blog", "blog", members, paginate=paginate, menu_weight=110
        )

        assert created[0].variables.aliases == ["blog/page/1"]
        assert created[1].variables.aliases == []
        assert created[0].variables.menu == {"main": {"weight": 110}}
        assert created[1].variables.menu is None

    def test__pagination_disabled__single_page(self, make_page: Callable[..., Page]) -> None:
        """max 0 keeps every member on one page."""
        members = [make_page(f"blog/p{i}") for i in range(12)]

        created = add_node_page(
            PageStore(), NodeType.SECTION, "blog", "blog", members, paginate=PaginateConfig(max=0)
        )

        assert len(created) == 1
        assert len(created[0].variables.pages) == 12

    def test__extra_variables__set_on_every_chunk(
        self, make_page: Callable[..., Page]
    ) -> None:
        """Extra variables reach all created pages."""
        members = [make_page(f"p{i}") for i in range(3)]

        created = add_node_page(
            PageStore(),
            NodeType.TAXONOMY,
            "python",
            "tags/python",
            members,
            paginate=PaginateConfig(max=2),
            variables={"singular": "tag"},
        )

        assert [p.variables.singular for p in created] == ["tag", "tag"]
        assert [p.id for p in created] == ["tags/python/index", "tags/python/page/2/index"]

    def test__homepage_path__index_id(
        self, make_page: Callable[..., Page], paginate: PaginateConfig
    ) -> None:
        """Empty path gives the homepage id and pathname."""
        (page,) = add_node_page(
            PageStore(), NodeType.HOMEPAGE, "Home", "", [make_page("a")], paginate=paginate
        )

        assert page.id == "index"
        assert page.pathname == ""
        assert page.permalink == ""
