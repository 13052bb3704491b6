"""Page model.

A page is one output-bound document. Real pages come from content files and
are filled in during conversion; virtual pages are synthesized listings,
redirects and the homepage.
"""

import datetime
import re
from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any
from unicodedata import normalize

from sitestage.core.types import NodeType, URLPath

if TYPE_CHECKING:
    from sitestage.core.pagination import Paginator

INDEX_NAME = "index"

_EXTENSION_RE = re.compile(r"^(?P<stem>.+?)(?P<ext>\.[A-Za-z][A-Za-z0-9]*)$")


def slugify(text: str) -> str:
    """Lowercase ASCII slug; runs of other characters become "-".

    Examples:
        >>> slugify("Café au lait!")
        'cafe-au-lait'
    """
    ascii_text = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", ascii_text.lower()).strip("-")


def urlize(path: str) -> URLPath:
    """Turn a free-form path into a URL path.

    Each segment is slugified; a file extension on the last segment survives.

    Examples:
        >>> urlize("Blog/My First Post")
        'blog/my-first-post'
        >>> urlize("/old/Page.HTML")
        'old/page.html'
    """
    segments = [s for s in path.replace("\\", "/").split("/") if s.strip()]
    result: list[str] = []
    for i, segment in enumerate(segments):
        ext = ""
        if i == len(segments) - 1:
            match = _EXTENSION_RE.match(segment)
            if match:
                segment, ext = match.group("stem"), match.group("ext").lower()
        slug = slugify(segment)
        if slug or ext:
            result.append(slug + ext)
    return URLPath("/".join(result))


class PageVariables(MutableMapping[str, Any]):
    """Open metadata of a page with typed access to reserved keys.

    Holds frontmatter values left after the known page attributes are
    extracted, plus everything synthesis attaches (member pages, paginator,
    taxonomy labels).
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"PageVariables({self._data!r})"

    @property
    def menu(self) -> str | list[str] | dict[str, Any] | None:
        """Menu membership: a menu name, a list of names or name -> properties."""
        return self._data.get("menu")

    @menu.setter
    def menu(self, value: str | list[str] | dict[str, Any]) -> None:
        self._data["menu"] = value

    @property
    def aliases(self) -> list[str]:
        """Alias paths, always as a list."""
        raw = self._data.get("aliases")
        if raw is None:
            return []
        if isinstance(raw, str):
            return [raw]
        return [str(alias) for alias in raw]

    @aliases.setter
    def aliases(self, value: list[str]) -> None:
        self._data["aliases"] = list(value)

    @property
    def pages(self) -> list["Page"]:
        """Member pages of an unpaginated node page."""
        return self._data.get("pages", [])

    @pages.setter
    def pages(self, value: list["Page"]) -> None:
        self._data["pages"] = value

    @property
    def paginator(self) -> "Paginator | None":
        return self._data.get("paginator")

    @paginator.setter
    def paginator(self, value: "Paginator") -> None:
        self._data["paginator"] = value

    @property
    def singular(self) -> str | None:
        return self._data.get("singular")

    @property
    def plural(self) -> str | None:
        return self._data.get("plural")

    @property
    def terms(self) -> dict[str, list["Page"]]:
        return self._data.get("terms", {})

    @property
    def destination(self) -> str | None:
        """Target permalink of a redirect page."""
        return self._data.get("destination")


@dataclass(eq=False)
class Page:
    """Output-bound document.

    Identity is ``id``; ``pathname`` is the URL path the page is written to
    and the source of its permalink.
    """

    id: str
    pathname: str = ""
    title: str = ""
    section: str | None = None
    date: datetime.date | None = None
    layout: str | None = None
    node_type: NodeType | None = None
    virtual: bool = False
    html: str = ""
    variables: PageVariables = field(default_factory=PageVariables)
    source_path: Path | None = None
    frontmatter: str = ""
    body: str = ""
    explicit_permalink: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.variables, PageVariables):
            self.variables = PageVariables(self.variables)
        if self.node_type is not None and not self.virtual:
            raise ValueError(f"Node page '{self.id}' must be virtual")

    @classmethod
    def from_file(cls, source_path: Path, content_dir: Path) -> "Page":
        """Create a page for a content file.

        The id and pathname come from the path relative to ``content_dir``
        without extension; the first directory is the section.

        Args:
            source_path: Content file path
            content_dir: Root content directory

        Returns:
            Page with identity and section set, not yet converted
        """
        relative = source_path.relative_to(content_dir).with_suffix("")
        pathname = urlize(relative.as_posix())
        section = relative.parts[0] if len(relative.parts) > 1 else None
        return cls(
            id=pathname,
            pathname=pathname,
            title=relative.name,
            section=section,
            source_path=source_path,
        )

    @property
    def name(self) -> str:
        """Last segment of the pathname."""
        return self.pathname.rsplit("/", 1)[-1]

    @property
    def path(self) -> str:
        """Pathname without its last segment."""
        if "/" not in self.pathname:
            return ""
        return self.pathname.rsplit("/", 1)[0]

    @property
    def permalink(self) -> str:
        """Final URL path of the page.

        An explicit permalink from frontmatter wins; otherwise the pathname
        with a trailing index segment removed.
        """
        if self.explicit_permalink:
            return urlize(self.explicit_permalink)
        if self.name == INDEX_NAME:
            return self.path
        return self.pathname

    @property
    def is_node(self) -> bool:
        return self.node_type is not None

    def __getitem__(self, key: str) -> Any:
        return self.variables[key]

    def __contains__(self, key: object) -> bool:
        return key in self.variables

    def __repr__(self) -> str:
        kind = self.node_type.value if self.node_type else "page"
        return f"Page(id={self.id!r}, {kind})"
