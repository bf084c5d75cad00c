from typing import Sequence, TypeVar

T = TypeVar("T")


def page_count(total: int, per_page: int = 10) -> int:
    if per_page < 1:
        per_page = 10
    return (total + per_page - 1) // per_page


def page_slice(items: Sequence[T], page: int = 1, per_page: int = 10) -> list[T]:
    """
    Items shown on ``page`` (1-based). A page past the end is empty.
    """
    if page < 1:
        page = 1
    start = (page - 1) * per_page
    return list(items[start:start + per_page])


def page_window(current_page: int, total_pages: int, size: int = 5) -> list[int]:
    """
    Page numbers to render as links.

    At most ``size`` distinct pages, centred on ``current_page`` where
    possible and clamped to ``[1, total_pages]``. Empty when there are no
    pages.
    """
    if total_pages < 1:
        return []

    width = min(size, total_pages)
    start = current_page - size // 2
    start = max(1, min(start, total_pages - width + 1))
    return list(range(start, start + width))
