"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from sitestage.config import Config, PaginateConfig
from sitestage.core.page import Page

from tests.sites import write_file


@pytest.fixture
def paginate() -> PaginateConfig:
    """Pagination with five pages per listing."""
    return PaginateConfig(max=5, path="page")


@pytest.fixture
def make_page() -> Callable[..., Page]:
    """Factory for content pages whose pathname equals their id."""

    def factory(page_id: str, **kwargs: object) -> Page:
        kwargs.setdefault("pathname", page_id)
        kwargs.setdefault("title", page_id.rsplit("/", 1)[-1].title())
        return Page(id=page_id, **kwargs)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create a small site with content, layouts and static files."""
    source = tmp_path / "site"
    write_file(
        source / "content" / "about.md",
        "---\ntitle: About\nmenu: main\n---\nAbout *us*.",
    )
    write_file(
        source / "content" / "blog" / "post-1.md",
        "---\ntitle: First Post\ndate: 2024-01-01\ntags: [python, web]\n---\nHello.",
    )
    write_file(
        source / "content" / "blog" / "post-2.md",
        "---\ntitle: Second Post\ndate: 2024-02-01\ntags: python\naliases:\n  - old-post\n---\nAgain.",
    )
    layouts = source / "layouts"
    write_file(layouts / "_default" / "page.html", "PAGE {{ page.title }}|{{ page.html|safe }}")
    write_file(
        layouts / "_default" / "list.html",
        "LIST {{ page.title }}:{% for p in page.variables.pages %}{{ p.title }},{% endfor %}",
    )
    write_file(
        layouts / "_default" / "terms.html",
        "TERMS {% for term, pages in page.variables.terms.items() %}{{ term }}={{ pages|length }};{% endfor %}",
    )
    write_file(
        layouts / "index.html",
        "HOME {% for entry in site.menus.main %}{{ entry.name }};{% endfor %}",
    )
    write_file(source / "static" / "css" / "site.css", "body {}")
    return source


@pytest.fixture
def site_config() -> Config:
    """Default configuration."""
    return Config.from_dict({})
