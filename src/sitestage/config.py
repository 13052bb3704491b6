"""Configuration management for Sitestage.

Supports TOML configuration format with auto-discovery.
"""

import copy
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "sitestage.toml"

DEFAULT_SITE: dict[str, Any] = {
    "title": "Sitestage",
    "baseline": "A Sitestage website",
    "baseurl": "http://localhost:8000/",
    "description": "",
    "taxonomies": {"tags": "tag", "categories": "category"},
    "paginate": {"max": 5, "path": "page"},
}


@dataclass
class ContentConfig:
    """Content files configuration."""

    dir: str = "content"
    ext: str = "md"


@dataclass
class FrontmatterConfig:
    """Frontmatter configuration."""

    format: str = "yaml"


@dataclass
class StaticConfig:
    """Static files configuration."""

    dir: str = "static"


@dataclass
class LayoutsConfig:
    """Layouts configuration."""

    dir: str = "layouts"


@dataclass
class OutputConfig:
    """Output configuration."""

    dir: str = "_site"
    filename: str = "index.html"


@dataclass
class ThemesConfig:
    """Themes configuration."""

    dir: str = "themes"


@dataclass
class PaginateConfig:
    """Pagination configuration.

    A ``max`` of 0 disables pagination.
    """

    max: int = 5
    path: str = "page"
    homepage_section: str | None = None

    @property
    def enabled(self) -> bool:
        return self.max > 0


@dataclass
class MenuOverride:
    """Menu entry declared in configuration."""

    id: str
    name: str = ""
    url: str = ""
    weight: int = 0
    disabled: bool = False


@dataclass
class SiteConfig:
    """Site configuration.

    ``params`` keeps the whole ``[site]`` table (with defaults) for templates.
    """

    title: str = "Sitestage"
    baseurl: str = "http://localhost:8000/"
    taxonomies: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SITE["taxonomies"]))
    paginate: PaginateConfig = field(default_factory=PaginateConfig)
    menu: dict[str, list[MenuOverride]] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULT_SITE))


@dataclass
class Config:
    """Application configuration."""

    site: SiteConfig
    content: ContentConfig
    frontmatter: FrontmatterConfig
    static: StaticConfig
    layouts: LayoutsConfig
    output: OutputConfig
    themes: ThemesConfig
    theme: str | None = None
    options: dict[str, Any] = field(default_factory=dict)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None, start_dir: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for sitestage.toml in start_dir (default: current
        directory) and its parents.

        Args:
            config_path: Optional explicit path to config file
            start_dir: Directory where discovery starts

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config(start_dir)
        if discovered_path is None:
            return cls.from_dict({})

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls, start_dir: Path | None = None) -> Path | None:
        """Search for config file in start directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = (start_dir or Path.cwd()).resolve()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        return replace(cls.from_dict(data), config_path=path)

    @classmethod
    def from_dict(cls, data: object) -> "Config":
        """Build configuration from a parsed TOML document.

        Args:
            data: Parsed configuration mapping

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        site = cls._parse_site(data.get("site"))
        content = ContentConfig(
            dir=cls._parse_dir(data.get("content"), "content", "content"),
            ext=cls._parse_str(data.get("content"), "content", "ext", "md"),
        )
        frontmatter_format = cls._parse_str(data.get("frontmatter"), "frontmatter", "format", "yaml")
        if frontmatter_format not in ("yaml", "ini"):
            raise ValueError("frontmatter.format must be 'yaml' or 'ini'")
        output = OutputConfig(
            dir=cls._parse_dir(data.get("output"), "output", "_site"),
            filename=cls._parse_str(data.get("output"), "output", "filename", "index.html"),
        )

        theme = data.get("theme")
        if theme is not None and not isinstance(theme, str):
            raise ValueError("theme must be a string")

        options = copy.deepcopy(data)
        options["site"] = site.params

        return cls(
            site=site,
            content=content,
            frontmatter=FrontmatterConfig(format=frontmatter_format),
            static=StaticConfig(dir=cls._parse_dir(data.get("static"), "static", "static")),
            layouts=LayoutsConfig(dir=cls._parse_dir(data.get("layouts"), "layouts", "layouts")),
            output=output,
            themes=ThemesConfig(dir=cls._parse_dir(data.get("themes"), "themes", "themes")),
            theme=theme or None,
            options=options,
        )

    @classmethod
    def _parse_dir(cls, data: object, section: str, default: str) -> str:
        """Parse the ``dir`` key of a section."""
        return cls._parse_str(data, section, "dir", default)

    @classmethod
    def _parse_str(cls, data: object, section: str, key: str, default: str) -> str:
        """Parse a string key of an optional section.

        Args:
            data: Raw section data
            section: Section name for error messages
            key: Key inside the section
            default: Value used when section or key is missing

        Returns:
            The string value
        """
        if data is None:
            return default

        if not isinstance(data, dict):
            raise ValueError(f"{section} section must be a dictionary")

        value = data.get(key, default)
        if not isinstance(value, str):
            raise ValueError(f"{section}.{key} must be a string")
        return value

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        """Parse site configuration section.

        Args:
            data: Raw site section data

        Returns:
            SiteConfig instance
        """
        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        params = copy.deepcopy(DEFAULT_SITE)
        params.update(copy.deepcopy(data))

        title = params["title"]
        if not isinstance(title, str):
            raise ValueError("site.title must be a string")

        baseurl = params["baseurl"]
        if not isinstance(baseurl, str):
            raise ValueError("site.baseurl must be a string")

        taxonomies = params["taxonomies"]
        if not isinstance(taxonomies, dict):
            raise ValueError("site.taxonomies must be a dictionary")
        for plural, singular in taxonomies.items():
            if not isinstance(singular, str):
                raise ValueError(f"site.taxonomies.{plural} must be a string")

        return SiteConfig(
            title=title,
            baseurl=baseurl,
            taxonomies=dict(taxonomies),
            paginate=cls._parse_paginate(params["paginate"]),
            menu=cls._parse_menu(params.get("menu")),
            params=params,
        )

    @classmethod
    def _parse_paginate(cls, data: object) -> PaginateConfig:
        """Parse site.paginate configuration.

        Args:
            data: Raw paginate data, a table or the string "disabled"

        Returns:
            PaginateConfig instance
        """
        if data == "disabled":
            return PaginateConfig(max=0)

        if not isinstance(data, dict):
            raise ValueError("site.paginate must be a dictionary or 'disabled'")

        max_pages = data.get("max", 5)
        if not isinstance(max_pages, int) or isinstance(max_pages, bool) or max_pages < 0:
            raise ValueError("site.paginate.max must be a non-negative integer")

        path = data.get("path", "page")
        if not isinstance(path, str) or not path:
            raise ValueError("site.paginate.path must be a non-empty string")

        homepage = data.get("homepage", {})
        if not isinstance(homepage, dict):
            raise ValueError("site.paginate.homepage must be a dictionary")
        homepage_section = homepage.get("section")
        if homepage_section is not None and not isinstance(homepage_section, str):
            raise ValueError("site.paginate.homepage.section must be a string")

        return PaginateConfig(max=max_pages, path=path, homepage_section=homepage_section)

    @classmethod
    def _parse_menu(cls, data: object) -> dict[str, list[MenuOverride]]:
        """Parse site.menu entries.

        Args:
            data: Raw menu data, menu name -> list of entry tables

        Returns:
            Menu name -> overrides, in declaration order
        """
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("site.menu must be a dictionary")

        menus: dict[str, list[MenuOverride]] = {}
        for menu_name, entries in data.items():
            if not isinstance(entries, list):
                raise ValueError(f"site.menu.{menu_name} must be a list")
            overrides: list[MenuOverride] = []
            for entry in entries:
                if not isinstance(entry, dict):
                    raise ValueError(f"site.menu.{menu_name} items must be dictionaries")
                entry_id = entry.get("id")
                if not isinstance(entry_id, str):
                    raise ValueError(f"site.menu.{menu_name} items need a string id")
                name = entry.get("name", entry_id)
                url = entry.get("url", "")
                weight = entry.get("weight", 0)
                disabled = entry.get("disabled", False)
                if not isinstance(name, str) or not isinstance(url, str):
                    raise ValueError(f"site.menu.{menu_name}.{entry_id} name and url must be strings")
                if not isinstance(weight, int) or isinstance(weight, bool):
                    raise ValueError(f"site.menu.{menu_name}.{entry_id}.weight must be an integer")
                if not isinstance(disabled, bool):
                    raise ValueError(f"site.menu.{menu_name}.{entry_id}.disabled must be a boolean")
                overrides.append(
                    MenuOverride(id=entry_id, name=name, url=url, weight=weight, disabled=disabled)
                )
            menus[menu_name] = overrides
        return menus

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a raw option by dotted path.

        Args:
            key: Dotted path, e.g. "site.paginate.max"
            default: Value returned when any segment is missing

        Returns:
            The option value or default
        """
        current: Any = self.options
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def with_overrides(
        self,
        *,
        output_dir: str | None = None,
        theme: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            output_dir: Override output.dir
            theme: Override theme

        Returns:
            New Config instance with overrides applied
        """
        output = self.output
        options = copy.deepcopy(self.options)
        if output_dir is not None:
            output = replace(self.output, dir=output_dir)
            options.setdefault("output", {})["dir"] = output_dir

        effective_theme = self.theme
        if theme is not None:
            effective_theme = theme or None
            options["theme"] = theme

        return replace(self, output=output, theme=effective_theme, options=options)
