"""Taxonomy model.

Vocabularies (e.g. "tags") own terms (e.g. "python"); each term owns the
pages carrying it. These structures only live while taxonomy pages are
being synthesized.
"""

import logging
from collections.abc import Iterator

from sitestage.core.page import Page, slugify

logger = logging.getLogger(__name__)


class Term:
    """A single taxonomy value and the pages tagged with it.

    ``name`` is the spelling first encountered; ``slug`` identifies the term
    and is its URL segment.
    """

    __slots__ = ("_pages", "name", "slug")

    def __init__(self, name: str, slug: str) -> None:
        self.name = name
        self.slug = slug
        self._pages: dict[str, Page] = {}

    def add(self, page: Page) -> None:
        """Add a page; a page already present is ignored."""
        self._pages.setdefault(page.id, page)

    @property
    def pages(self) -> list[Page]:
        return list(self._pages.values())

    def __len__(self) -> int:
        return len(self._pages)


class Vocabulary:
    """Named taxonomy dimension holding terms in first-seen order.

    Terms are keyed by slug, so spellings differing only in case or
    punctuation ("Python", "python") share one term.
    """

    __slots__ = ("_terms", "plural", "singular")

    def __init__(self, plural: str, singular: str) -> None:
        self.plural = plural
        self.singular = singular
        self._terms: dict[str, Term] = {}

    def term(self, name: str) -> Term:
        """Get the term matching ``name``, creating it on first use.

        Raises:
            ValueError: If ``name`` has an empty slug
        """
        slug = slugify(name)
        if not slug:
            raise ValueError(f"Term {name!r} has an empty slug")
        if slug not in self._terms:
            self._terms[slug] = Term(name, slug)
        return self._terms[slug]

    def to_dict(self) -> dict[str, list[Page]]:
        """Map term display name to its pages, for templates."""
        return {term.name: term.pages for term in self._terms.values()}

    def __iter__(self) -> Iterator[Term]:
        return iter(self._terms.values())

    def __len__(self) -> int:
        return len(self._terms)


def collect_vocabularies(
    pages: list[Page],
    taxonomies: dict[str, str],
) -> list[Vocabulary]:
    """Aggregate pages into vocabularies.

    A page's value for a plural key may be a single term or a list; single
    values are normalized to a one-element list on the page itself. Terms
    without any letter or digit are skipped with a warning.

    Args:
        pages: Pages to scan, in order
        taxonomies: Plural name -> singular label

    Returns:
        One Vocabulary per configured taxonomy, in configuration order
    """
    vocabularies = {plural: Vocabulary(plural, singular) for plural, singular in taxonomies.items()}
    for page in pages:
        for plural, vocabulary in vocabularies.items():
            if plural not in page.variables:
                continue
            terms = page.variables[plural]
            if terms is None:
                continue
            if not isinstance(terms, list):
                terms = [terms]
                page.variables[plural] = terms
            for term in terms:
                name = str(term)
                if not slugify(name):
                    logger.warning(f"Ignoring empty {plural} term {name!r} on page '{page.id}'")
                    continue
                vocabulary.term(name).add(page)
    return list(vocabularies.values())
