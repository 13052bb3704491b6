"""Content discovery and page loading."""

import logging
from pathlib import Path

from sitestage.core.collection import PageStore
from sitestage.core.converter import convert_page, parse_page
from sitestage.core.page import Page

logger = logging.getLogger(__name__)


def locate_content(content_dir: Path, ext: str) -> list[Path]:
    """Find content files.

    A missing content directory is not an error: it yields an empty site.

    Args:
        content_dir: Root content directory
        ext: Content file extension without dot

    Returns:
        Content file paths in sorted order
    """
    if not content_dir.is_dir():
        logger.warning(f"Content directory not found: {content_dir}")
        return []

    files = sorted(p for p in content_dir.rglob(f"*.{ext}") if p.is_file())
    if not files:
        logger.warning(f"No *.{ext} content files found in {content_dir}")
    return files


def load_pages(files: list[Path], content_dir: Path, fmt: str = "yaml") -> PageStore:
    """Create pages from content files, split but not converted.

    Args:
        files: Content file paths
        content_dir: Root content directory
        fmt: Frontmatter format

    Returns:
        PageStore with one page per file

    Raises:
        DuplicateIdError: If two files map to the same page id
    """
    store = PageStore()
    for path in files:
        page = Page.from_file(path, content_dir)
        parse_page(page, path.read_text(encoding="utf-8"), fmt)
        store.add(page)
    logger.info(f"Loaded {len(store)} pages from {content_dir}")
    return store


def convert_pages(store: PageStore, fmt: str = "yaml") -> None:
    """Convert every real page of the store in place.

    Raises:
        ValueError: If a page has malformed frontmatter
    """
    for page in store:
        if page.virtual:
            continue
        try:
            store.replace(page.id, convert_page(page, fmt))
        except ValueError as e:
            raise ValueError(f"{page.source_path}: {e}") from e
