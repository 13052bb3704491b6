"""Exceptions raised by the Sitestage build pipeline."""


class SitestageError(Exception):
    """Base exception for all Sitestage errors."""


class BuildSetupError(SitestageError):
    """Raised when source, destination or layouts directories are unusable."""


class ThemeNotFoundError(BuildSetupError):
    """Raised when a configured theme has no directory under themes.dir."""


class DuplicateIdError(SitestageError):
    """Raised when adding a page whose id is already in the store."""

    def __init__(self, page_id: str) -> None:
        super().__init__(f"Page '{page_id}' already exists")
        self.page_id = page_id


class PageNotFoundError(SitestageError):
    """Raised when a page id is not in the store."""

    def __init__(self, page_id: str) -> None:
        super().__init__(f"Page '{page_id}' not found")
        self.page_id = page_id


class LayoutNotFoundError(SitestageError):
    """Raised when no layout of the cascade exists for a page."""

    def __init__(self, page_id: str, candidates: list[str]) -> None:
        tried = ", ".join(candidates) or "none"
        super().__init__(f"Layout not found for page '{page_id}' (tried: {tried})")
        self.page_id = page_id
        self.candidates = candidates


class OutputConflictError(SitestageError):
    """Raised when two pages would be written to the same output file."""

    def __init__(self, path: str, page_id: str, other_id: str) -> None:
        super().__init__(f"Pages '{other_id}' and '{page_id}' both write to '{path}'")
        self.path = path
        self.page_id = page_id
        self.other_id = other_id
