"""Virtual page synthesis.

Adds the pages no content file provides: section listings, taxonomy term
and index pages, the homepage and alias redirects. Steps must run in that
order. A page is only added when no page already has its id or is
published at its URL, so content files win over synthesized pages and
running a step again over the same store adds nothing.
"""

import logging

from sitestage.config import PaginateConfig
from sitestage.core.collection import PageStore
from sitestage.core.layout import REDIRECT_LAYOUT, LayoutResolver
from sitestage.core.page import Page, slugify, urlize
from sitestage.core.pagination import add_node_page, node_id
from sitestage.core.taxonomy import collect_vocabularies
from sitestage.core.types import NodeType
from sitestage.exceptions import LayoutNotFoundError

logger = logging.getLogger(__name__)

SECTION_MENU_WEIGHT = 100
SECTION_MENU_STEP = 10
HOMEPAGE_MENU_WEIGHT = 1
HOMEPAGE_TITLE = "Home"


def _is_taken(store: PageStore, path: str) -> bool:
    """Whether a page already has the node id of ``path`` or its URL."""
    return store.has(node_id(path)) or store.find_by_permalink(urlize(path)) is not None


def generate_sections(store: PageStore, paginate: PaginateConfig) -> list[Page]:
    """Add one section node page per distinct section of the content pages.

    Section names are grouped by slug ("Blog" and "blog" are one section,
    named after its first spelling). Sections are weighted in the main menu
    in the order they are first encountered: 100, 110, 120...

    Args:
        store: Page store, modified in place
        paginate: Pagination settings

    Returns:
        Added pages
    """
    sections: dict[str, tuple[str, list[Page]]] = {}
    for page in store:
        if page.virtual or not page.section:
            continue
        slug = slugify(page.section)
        if not slug:
            logger.warning(f"Ignoring empty section {page.section!r} on page '{page.id}'")
            continue
        sections.setdefault(slug, (page.section, []))[1].append(page)

    added: list[Page] = []
    weight = SECTION_MENU_WEIGHT
    for slug, (section, pages) in sections.items():
        if _is_taken(store, slug):
            logger.debug(f"Section '{slug}' already has a page, skipping")
        else:
            added.extend(
                add_node_page(
                    store,
                    NodeType.SECTION,
                    section,
                    slug,
                    pages,
                    paginate=paginate,
                    menu_weight=weight,
                    section=section,
                )
            )
        weight += SECTION_MENU_STEP

    logger.info(f"Generated {len(added)} section pages from {len(sections)} sections")
    return added


def generate_taxonomies(
    store: PageStore,
    taxonomies: dict[str, str],
    paginate: PaginateConfig,
    resolver: LayoutResolver,
) -> list[Page]:
    """Add taxonomy term pages and one terms index page per vocabulary.

    The index page of a vocabulary is only added when a layout can be
    resolved for it; otherwise it is skipped with a warning.

    Args:
        store: Page store, modified in place
        taxonomies: Plural name -> singular label
        paginate: Pagination settings
        resolver: Layout resolver used to check index page layouts

    Returns:
        Added pages
    """
    vocabularies = collect_vocabularies(
        [page for page in store if not page.virtual],
        taxonomies,
    )

    added: list[Page] = []
    for vocabulary in vocabularies:
        if len(vocabulary) == 0:
            continue

        for term in vocabulary:
            path = f"{vocabulary.plural}/{term.slug}"
            if _is_taken(store, path):
                logger.debug(f"Term page '{path}' already exists, skipping")
                continue
            added.extend(
                add_node_page(
                    store,
                    NodeType.TAXONOMY,
                    term.name,
                    path,
                    term.pages,
                    paginate=paginate,
                    variables={
                        "plural": vocabulary.plural,
                        "singular": vocabulary.singular,
                        "term": term.name,
                    },
                )
            )

        if _is_taken(store, vocabulary.plural):
            continue
        index_page = Page(
            id=node_id(vocabulary.plural),
            pathname=urlize(vocabulary.plural),
            title=vocabulary.plural[:1].upper() + vocabulary.plural[1:],
            node_type=NodeType.TERMS,
            virtual=True,
        )
        index_page.variables.update(
            {
                "plural": vocabulary.plural,
                "singular": vocabulary.singular,
                "terms": vocabulary.to_dict(),
            }
        )
        try:
            resolver.resolve(index_page)
        except LayoutNotFoundError as e:
            logger.warning(f"Skipping '{vocabulary.plural}' index page: {e}")
            continue
        added.append(store.add(index_page))

    logger.info(f"Generated {len(added)} taxonomy pages")
    return added


def generate_homepage(store: PageStore, paginate: PaginateConfig) -> list[Page]:
    """Add the homepage unless a page already has the "index" id or the root URL.

    Members are the content pages of ``paginate.homepage_section`` (pages
    without a section when it is unset).

    Args:
        store: Page store, modified in place
        paginate: Pagination settings

    Returns:
        Added pages, empty if a homepage already exists
    """
    if _is_taken(store, ""):
        logger.debug("Homepage already exists, skipping")
        return []

    section = paginate.homepage_section or None
    members = store.filter(
        lambda page: not page.virtual and page.node_type is None and page.section == section
    )
    return add_node_page(
        store,
        NodeType.HOMEPAGE,
        HOMEPAGE_TITLE,
        "",
        members.to_list(),
        paginate=paginate,
        menu_weight=HOMEPAGE_MENU_WEIGHT,
    )


def generate_aliases(store: PageStore) -> list[Page]:
    """Add one redirect page per alias declared on any page.

    Args:
        store: Page store, modified in place

    Returns:
        Added redirect pages
    """
    added: list[Page] = []
    for page in store:
        for alias in page.variables.aliases:
            alias_path = urlize(alias)
            if not alias_path:
                logger.warning(f"Ignoring empty alias on page '{page.id}'")
                continue
            if store.has(alias_path):
                logger.debug(f"Alias '{alias_path}' of '{page.id}' already exists, skipping")
                continue
            owner = store.find_by_permalink(alias_path)
            if owner is not None:
                logger.warning(
                    f"Ignoring alias '{alias_path}' of '{page.id}': already the URL of '{owner.id}'"
                )
                continue
            redirect = Page(
                id=alias_path,
                pathname=alias_path,
                title=alias,
                layout=REDIRECT_LAYOUT,
                virtual=True,
            )
            redirect.variables["destination"] = page.permalink
            added.append(store.add(redirect))

    logger.info(f"Generated {len(added)} alias pages")
    return added
