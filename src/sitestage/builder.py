"""Site build pipeline.

Runs the build phases in order over one page store:

    locate → load → convert → sections → taxonomies → homepage → aliases
    → menus → render → static

Each phase finishes before the next one starts. Observers are notified
around every phase.
"""

import logging
import re
import shutil
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Protocol

from sitestage import __version__
from sitestage.config import Config
from sitestage.core.collection import PageStore
from sitestage.core.content import convert_pages, load_pages, locate_content
from sitestage.core.layout import LayoutResolver
from sitestage.core.menu import MenuCollection, build_menus
from sitestage.core.page import INDEX_NAME, Page
from sitestage.core.renderer import JinjaRenderer, Renderer
from sitestage.core.synthesis import (
    generate_aliases,
    generate_homepage,
    generate_sections,
    generate_taxonomies,
)
from sitestage.exceptions import (
    BuildSetupError,
    LayoutNotFoundError,
    OutputConflictError,
    ThemeNotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildContext:
    """Immutable inputs of one build, resolved and validated up front."""

    source_dir: Path
    dest_dir: Path
    config: Config
    theme_dir: Path | None = None

    @classmethod
    def create(
        cls,
        source_dir: Path,
        dest_dir: Path | None = None,
        config: Config | None = None,
    ) -> "BuildContext":
        """Validate directories and resolve the theme.

        Args:
            source_dir: Site source directory
            dest_dir: Directory receiving output.dir (default: source_dir)
            config: Configuration (default: discovered from source_dir)

        Returns:
            BuildContext ready for a build

        Raises:
            BuildSetupError: If a directory is missing
            ThemeNotFoundError: If the configured theme directory is missing
        """
        if not source_dir.is_dir():
            raise BuildSetupError(f"'{source_dir}' is not a valid source directory")
        dest_dir = dest_dir if dest_dir is not None else source_dir
        if not dest_dir.is_dir():
            raise BuildSetupError(f"'{dest_dir}' is not a valid destination directory")
        if config is None:
            config = Config.load(start_dir=source_dir)

        layouts_dir = source_dir / config.layouts.dir
        if not layouts_dir.is_dir():
            raise BuildSetupError(f"'{layouts_dir}' is not a valid layouts directory")

        theme_dir: Path | None = None
        if config.theme:
            theme_dir = source_dir / config.themes.dir / config.theme
            if not theme_dir.is_dir():
                raise ThemeNotFoundError(f"Theme directory '{theme_dir}' not found")

        return cls(source_dir=source_dir, dest_dir=dest_dir, config=config, theme_dir=theme_dir)

    @property
    def content_dir(self) -> Path:
        return self.source_dir / self.config.content.dir

    @property
    def layouts_dir(self) -> Path:
        return self.source_dir / self.config.layouts.dir

    @property
    def static_dir(self) -> Path:
        return self.source_dir / self.config.static.dir

    @property
    def output_dir(self) -> Path:
        return self.dest_dir / self.config.output.dir

    @property
    def theme_layouts_dir(self) -> Path | None:
        return self.theme_dir / "layouts" if self.theme_dir else None

    @property
    def theme_static_dir(self) -> Path | None:
        return self.theme_dir / "static" if self.theme_dir else None


class BuildObserver(Protocol):
    """Receives notifications around build phases."""

    def on_before_phase(self, phase: str, context: BuildContext) -> None: ...

    def on_after_phase(self, phase: str, context: BuildContext) -> None: ...


@dataclass
class BuildResult:
    """Outcome of a build."""

    pages: PageStore
    menus: MenuCollection
    written: list[Path] = field(default_factory=list)


def output_path(page: Page, output_dir: Path, filename: str) -> Path:
    """Compute the file a page is written to.

    Index pages go to ``<dir>/<path>/<filename>``; permalinks with an
    extension are used as is; other permalinks get ``/<filename>``
    appended. Repeated slashes are collapsed.

    Args:
        page: Page to write
        output_dir: Output root
        filename: Default file name (e.g. index.html)

    Returns:
        Output file path
    """
    root = output_dir.as_posix()
    if page.name == INDEX_NAME and not page.explicit_permalink:
        pathname = f"{root}/{page.path}/{filename}"
    elif PurePosixPath(page.permalink).suffix:
        pathname = f"{root}/{page.permalink}"
    else:
        pathname = f"{root}/{page.permalink}/{filename}"
    return Path(re.sub(r"/+", "/", pathname))


class RenderDispatcher:
    """Renders pages with their resolved layouts and writes the output files."""

    def __init__(
        self,
        renderer: Renderer,
        resolver: LayoutResolver,
        output_dir: Path,
        filename: str = "index.html",
    ) -> None:
        self._renderer = renderer
        self._resolver = resolver
        self._output_dir = output_dir
        self._filename = filename

    def render_page(self, page: Page) -> Path:
        """Render one page and write it.

        Raises:
            LayoutNotFoundError: If no layout exists for the page or the
                renderer cannot load the resolved one
        """
        layout = self._resolver.resolve(page)
        if not self._renderer.exists(layout):
            raise LayoutNotFoundError(page.id, [layout])
        text = self._renderer.render(layout, {"page": page})
        path = output_path(page, self._output_dir, self._filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        logger.debug(f"Rendered '{page.id}' with {layout} -> {path}")
        return path

    def render_all(self, pages: Iterable[Page]) -> list[Path]:
        """Render pages in order.

        Raises:
            OutputConflictError: If two pages map to the same output file;
                nothing is written in that case
        """
        ordered = list(pages)
        owners: dict[Path, str] = {}
        for page in ordered:
            path = output_path(page, self._output_dir, self._filename)
            if path in owners:
                raise OutputConflictError(str(path), page.id, owners[path])
            owners[path] = page.id
        return [self.render_page(page) for page in ordered]


def copy_static(context: BuildContext) -> None:
    """Mirror theme static files, then site static files, into the output root.

    Site files override theme files with the same path.
    """
    for static_dir in (context.theme_static_dir, context.static_dir):
        if static_dir is not None and static_dir.is_dir():
            shutil.copytree(static_dir, context.output_dir, dirs_exist_ok=True)
            logger.info(f"Copied static files from {static_dir}")


class Builder:
    """Builds a site from a BuildContext."""

    def __init__(
        self,
        context: BuildContext,
        *,
        renderer: Renderer | None = None,
        observers: list[BuildObserver] | None = None,
    ) -> None:
        """Initialize builder.

        Args:
            context: Validated build inputs
            renderer: Template renderer (default: Jinja2 over site and theme layouts)
            observers: Phase observers, notified in order
        """
        self._context = context
        self._resolver = LayoutResolver(context.layouts_dir, context.theme_layouts_dir)
        if renderer is None:
            renderer = JinjaRenderer(self._resolver.search_dirs)
        self._renderer = renderer
        self._observers = list(observers or [])
        self._files: list[Path] = []
        self._pages = PageStore()
        self._menus = MenuCollection()

    @property
    def context(self) -> BuildContext:
        return self._context

    @property
    def pages(self) -> PageStore:
        return self._pages

    @property
    def menus(self) -> MenuCollection:
        return self._menus

    def add_observer(self, observer: BuildObserver) -> None:
        self._observers.append(observer)

    def build(self) -> BuildResult:
        """Run every phase in order.

        Returns:
            Final pages, menus and written files

        Raises:
            SitestageError: If a phase fails
        """
        config = self._context.config
        paginate = config.site.paginate
        fmt = config.frontmatter.format
        written: list[Path] = []

        self._run("locate_content", self._locate_content)
        self._run(
            "load_pages",
            lambda: self._set_pages(load_pages(self._files, self._context.content_dir, fmt)),
        )
        self._run("convert_pages", lambda: convert_pages(self._pages, fmt))
        self._run("generate_sections", lambda: generate_sections(self._pages, paginate))
        self._run(
            "generate_taxonomies",
            lambda: generate_taxonomies(
                self._pages, config.site.taxonomies, paginate, self._resolver
            ),
        )
        self._run("generate_homepage", lambda: generate_homepage(self._pages, paginate))
        self._run("generate_aliases", lambda: generate_aliases(self._pages))
        self._run("generate_menus", self._generate_menus)
        self._run("render_pages", lambda: written.extend(self._render_pages()))
        self._run("copy_static", lambda: copy_static(self._context))

        logger.info(f"Built {len(written)} files into {self._context.output_dir}")
        return BuildResult(pages=self._pages, menus=self._menus, written=written)

    def _run(self, phase: str, step: Callable[[], Any]) -> None:
        for observer in self._observers:
            observer.on_before_phase(phase, self._context)
        logger.debug(f"Phase {phase}")
        step()
        for observer in self._observers:
            observer.on_after_phase(phase, self._context)

    def _locate_content(self) -> None:
        config = self._context.config
        self._files = locate_content(self._context.content_dir, config.content.ext)

    def _set_pages(self, pages: PageStore) -> None:
        self._pages = pages

    def _generate_menus(self) -> None:
        self._menus = build_menus(self._pages, self._context.config.site.menu)

    def _render_pages(self) -> list[Path]:
        config = self._context.config
        site = dict(config.site.params)
        site["menus"] = self._menus
        site["pages"] = self._pages
        self._renderer.add_global("site", site)
        self._renderer.add_global(
            "sitestage",
            {
                "version": __version__,
                "poweredby": f"Sitestage v{__version__}",
            },
        )

        output_dir = self._context.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        dispatcher = RenderDispatcher(
            self._renderer, self._resolver, output_dir, config.output.filename
        )
        return dispatcher.render_all(self._pages)


def build_site(
    source_dir: Path,
    dest_dir: Path | None = None,
    config: Config | None = None,
    *,
    observers: list[BuildObserver] | None = None,
) -> BuildResult:
    """Create a build context and build the site.

    Args:
        source_dir: Site source directory
        dest_dir: Destination directory (default: source_dir)
        config: Configuration (default: discovered from source_dir)
        observers: Phase observers

    Returns:
        BuildResult of the build
    """
    context = BuildContext.create(source_dir, dest_dir, config)
    return Builder(context, observers=observers).build()
