"""Tests for content discovery and loading."""

import logging
from pathlib import Path

import pytest
from sitestage.core.content import convert_pages, load_pages, locate_content

from tests.sites import write_file


class TestLocateContent:
    """Tests for locate_content()."""

    def test__nested_files__found_sorted(self, tmp_path: Path) -> None:
        """Files are found recursively, sorted, filtered by extension."""
        write_file(tmp_path / "b.md", "")
        write_file(tmp_path / "a" / "c.md", "")
        write_file(tmp_path / "notes.txt", "")

        files = locate_content(tmp_path, "md")

        assert [f.relative_to(tmp_path).as_posix() for f in files] == ["a/c.md", "b.md"]

    def test__missing_dir__empty_with_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A missing content directory is not an error."""
        with caplog.at_level(logging.WARNING):
            files = locate_content(tmp_path / "missing", "md")

        assert files == []
        assert "Content directory not found" in caplog.text


class TestLoadPages:
    """Tests for load_pages() and convert_pages()."""

    def test__files__loaded_and_converted(self, tmp_path: Path) -> None:
        """Pages are created in file order and converted."""
        files = [
            write_file(tmp_path / "about.md", "---\ntitle: About\n---\nHi"),
            write_file(tmp_path / "blog" / "post.md", "Body"),
        ]

        store = load_pages(files, tmp_path)
        convert_pages(store)

        assert store.ids() == ["about", "blog/post"]
        assert store.get("about").title == "About"
        assert store.get("blog/post").section == "blog"
        assert store.get("blog/post").html == "<p>Body</p>"

    def test__malformed_frontmatter__error_names_file(self, tmp_path: Path) -> None:
        """Conversion errors mention the source file."""
        path = write_file(tmp_path / "bad.md", "---\ntitle: [oops\n---\nBody")
        store = load_pages([path], tmp_path)

        with pytest.raises(ValueError, match="bad.md"):
            convert_pages(store)
