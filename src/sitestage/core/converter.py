"""Content conversion.

Splits content files into frontmatter and body, parses the frontmatter
(YAML or INI) and converts the Markdown body to HTML with mistune.
"""

import configparser
import datetime
import logging
from typing import Any

import mistune
import yaml
from frontmatter.default_handlers import BaseHandler, YAMLHandler
from mistune.toc import add_toc_hook

from sitestage.core.page import Page, slugify

logger = logging.getLogger(__name__)

MARKDOWN_PLUGINS = ["table", "strikethrough", "footnotes"]


class IniHandler(BaseHandler):
    """INI frontmatter between ``---`` delimiters.

    Top-level keys become page variables; ``[sections]`` become nested
    mappings. Values are strings.
    """

    FM_BOUNDARY = YAMLHandler.FM_BOUNDARY
    START_DELIMITER = END_DELIMITER = "---"

    def load(self, fm: str, **kwargs: object) -> dict[str, Any]:
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str  # type: ignore[assignment, method-assign]
        parser.read_string(f"[{configparser.DEFAULTSECT}]\n{fm}")
        result: dict[str, Any] = dict(parser.defaults())
        for section in parser.sections():
            result[section] = {
                key: value
                for key, value in parser.items(section, raw=True)
                if key not in parser.defaults()
            }
        return result

    def export(self, metadata: dict[str, object], **kwargs: object) -> str:
        lines = [f"{key} = {value}" for key, value in metadata.items()]
        return "\n".join(lines)


_HANDLERS: dict[str, BaseHandler] = {
    "yaml": YAMLHandler(),
    "ini": IniHandler(),
}


def split_content(text: str, fmt: str = "yaml") -> tuple[str, str]:
    """Split raw file text into frontmatter and body.

    Args:
        text: Raw content file text
        fmt: Frontmatter format ("yaml" or "ini")

    Returns:
        Tuple of (frontmatter text, body text); frontmatter is empty when
        the file has none
    """
    handler = _handler(fmt)
    text = text.strip()
    if not handler.detect(text):
        return "", text
    try:
        fm, body = handler.split(text)
    except ValueError:
        return "", text
    return fm, body.strip()


def convert_frontmatter(fm: str, fmt: str = "yaml") -> dict[str, Any]:
    """Parse frontmatter text.

    Args:
        fm: Frontmatter text without delimiters
        fmt: Frontmatter format ("yaml" or "ini")

    Returns:
        Metadata mapping, empty when nothing could be parsed

    Raises:
        ValueError: If the frontmatter is malformed
    """
    if not fm.strip():
        return {}
    try:
        metadata = _handler(fmt).load(fm)
    except (yaml.YAMLError, configparser.Error) as e:
        raise ValueError(f"Invalid {fmt} frontmatter: {e}") from e
    if not isinstance(metadata, dict):
        logger.warning(f"Frontmatter is not a mapping: {type(metadata).__name__}")
        return {}
    return metadata


class MarkdownConverter:
    """Convert Markdown to HTML.

    Raw HTML passes through; headings get slug ids.
    """

    def __init__(self) -> None:
        self.markdown = mistune.create_markdown(escape=False, plugins=MARKDOWN_PLUGINS)
        add_toc_hook(self.markdown, max_level=6, heading_id=_heading_id)

    def convert(self, markdown_text: str) -> str:
        """Convert Markdown text to HTML.

        Args:
            markdown_text: Markdown source text

        Returns:
            HTML fragment
        """
        return str(self.markdown(markdown_text)).strip()


def _heading_id(token: dict[str, Any], index: int) -> str:
    return slugify(token["text"]) or f"heading-{index + 1}"


_converter = MarkdownConverter()


def convert_body(body: str) -> str:
    """Convert a Markdown body to HTML."""
    return _converter.convert(body)


def parse_date(value: object) -> datetime.date | None:
    """Coerce a frontmatter date value.

    Args:
        value: date, datetime, ISO 8601 string or Unix timestamp

    Returns:
        Parsed date or None when the value cannot be read as a date
    """
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return datetime.datetime.fromtimestamp(value, tz=datetime.UTC)
    if isinstance(value, str):
        try:
            return datetime.datetime.fromisoformat(value.strip())
        except ValueError:
            logger.warning(f"Unreadable date: {value!r}")
    return None


def parse_page(page: Page, text: str, fmt: str = "yaml") -> Page:
    """Split file text and store the raw parts on the page."""
    page.frontmatter, page.body = split_content(text, fmt)
    return page


def convert_page(page: Page, fmt: str = "yaml") -> Page:
    """Convert a parsed page in place.

    Known keys (``title``, ``section``, ``date``, ``permalink``,
    ``layout``) become page attributes; ``date`` also stays a variable.
    Everything else becomes a page variable.

    Args:
        page: Page with raw frontmatter and body
        fmt: Frontmatter format

    Returns:
        The same page, converted
    """
    variables = convert_frontmatter(page.frontmatter, fmt)
    html = convert_body(page.body)

    if variables.get("title"):
        page.title = str(variables.pop("title"))
    if variables.get("section"):
        page.section = str(variables.pop("section"))
    if variables.get("date"):
        page.date = parse_date(variables["date"])
    if variables.get("permalink"):
        page.explicit_permalink = str(variables.pop("permalink"))
    if variables.get("layout"):
        page.layout = str(variables.pop("layout"))

    page.html = html
    page.variables.update(variables)
    return page


def _handler(fmt: str) -> BaseHandler:
    try:
        return _HANDLERS[fmt]
    except KeyError:
        raise ValueError(f"Unsupported frontmatter format: {fmt}") from None
