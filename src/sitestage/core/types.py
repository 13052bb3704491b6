"""Core type definitions."""

from enum import Enum
from typing import NewType

# URL path of a page relative to the site root (e.g., "blog/post-1")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)


class NodeType(Enum):
    """Kind of virtual listing page."""

    HOMEPAGE = "homepage"
    SECTION = "section"
    TAXONOMY = "taxonomy"
    TERMS = "terms"
