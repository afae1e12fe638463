"""Pagination — page-number resolution and skip/limit windows.

Invariants:
    - All functions are PURE
    - Page numbers are 1-based; absent, zero or negative pages resolve to 1
    - No upper bound: a page past the end yields a window that selects nothing
"""

from dataclasses import dataclass

from postboard.core.domain_types import DEFAULT_POSTS_PER_PAGE


@dataclass(frozen=True)
class PageWindow:
    page: int
    skip: int
    limit: int


def resolve_page(page: int | None) -> int:
    if not page or page < 1:
        return 1
    return page


def page_window(page: int | None, per_page: int = DEFAULT_POSTS_PER_PAGE) -> PageWindow:
    """Translate a requested page into the skip/limit the store should apply."""
    if per_page < 1:
        raise ValueError(f"per_page must be positive, got {per_page}")
    resolved = resolve_page(page)
    return PageWindow(page=resolved, skip=(resolved - 1) * per_page, limit=per_page)
