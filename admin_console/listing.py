"""
List View Module

Holds a full result set fetched from the backend and derives the filtered and
paginated view of it. The displayed page is always a pure function of
(items, filter state, page, page size); the cached set is only ever replaced
by a completed fetch.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from .errors import ConsoleError
from .notifications import Notifier, LogNotifier

logger = logging.getLogger("admin_console.listing")

ALL = "all"

Item = Dict[str, Any]
Fetcher = Callable[[], Awaitable[List[Item]]]


@dataclass
class FilterState:
    """Free-text search plus categorical equality filters"""
    search: str = ""
    filters: Dict[str, str] = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return bool(self.search.strip()) or any(
            v not in (None, "", ALL) for v in self.filters.values()
        )


@dataclass
class Page:
    """One page of a filtered list"""
    items: List[Item]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def start_index(self) -> int:
        """Zero-based index of the first item on this page"""
        return (self.page - 1) * self.page_size

    @property
    def end_index(self) -> int:
        """Exclusive end index, clipped to the item count"""
        return min(self.start_index + self.page_size, self.total_items)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": self.items,
            "page": self.page,
            "page_size": self.page_size,
            "total_items": self.total_items,
            "total_pages": self.total_pages,
            "showing_from": self.start_index + 1 if self.total_items else 0,
            "showing_to": self.end_index,
            "has_previous": self.has_previous,
            "has_next": self.has_next,
        }


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def matches(item: Item, state: FilterState, search_fields: Sequence[str]) -> bool:
    """True when the item satisfies every active predicate of the filter state"""
    term = state.search.strip().lower()
    if term and not any(term in _text(item.get(f)).lower() for f in search_fields):
        return False

    for name, wanted in state.filters.items():
        if wanted in (None, "", ALL):
            continue
        if item.get(name) != wanted:
            return False
    return True


def filter_items(items: Sequence[Item], state: FilterState, search_fields: Sequence[str]) -> List[Item]:
    """Order-preserving subset of items matching the filter state"""
    return [item for item in items if matches(item, state, search_fields)]


def total_pages(count: int, page_size: int) -> int:
    """ceil(count / page_size), never less than 1"""
    if page_size < 1:
        raise ValueError("Page size must be at least 1")
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, count: int, page_size: int) -> int:
    """Clamp a page index into [1, total_pages]"""
    return min(max(page, 1), total_pages(count, page_size))


def paginate(items: Sequence[Item], page: int, page_size: int) -> Page:
    """Return the slice [(page-1)*size, page*size) of items, page clamped first"""
    count = len(items)
    page = clamp_page(page, count, page_size)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_items=count,
        total_pages=total_pages(count, page_size),
    )


def page_window(current: int, total: int, width: int = 5) -> List[int]:
    """
    Page numbers to show as buttons: at most `width`, centred on the current
    page and pinned to the first/last pages near the ends.
    """
    if total <= width:
        return list(range(1, total + 1))
    half = width // 2
    start = current - half
    start = max(1, min(start, total - width + 1))
    return list(range(start, start + width))


def summarize(items: Sequence[Item], field_name: str, values: Sequence[str]) -> Dict[str, int]:
    """Count items per categorical value"""
    counts = {value: 0 for value in values}
    for item in items:
        value = item.get(field_name)
        if value in counts:
            counts[value] += 1
    return counts


class ListViewController:
    """
    Stateful list view: cached result set, filter state and page position.

    The controller never raises on fetch failures; it keeps the previous set,
    records `last_error` and emits an error notice.
    """

    def __init__(
        self,
        fetch: Fetcher,
        search_fields: Sequence[str],
        filter_fields: Sequence[str] = (),
        page_size: int = 10,
        notifier: Optional[Notifier] = None,
        name: str = "items",
    ):
        if page_size < 1:
            raise ValueError("Page size must be at least 1")
        self._fetch = fetch
        self.search_fields = list(search_fields)
        self.filter_fields = list(filter_fields)
        self.notifier = notifier or LogNotifier()
        self.name = name

        self._items: List[Item] = []
        self.state = FilterState(filters={f: ALL for f in self.filter_fields})
        self.page = 1
        self.page_size = page_size

        self.loading = False
        self.loaded = False
        self.last_error: Optional[str] = None
        self._sequence = 0

    @property
    def items(self) -> List[Item]:
        """The full cached result set (read-only copy)"""
        return list(self._items)

    async def load(self) -> bool:
        """Fetch the full set. Returns False on failure or a superseded response."""
        self._sequence += 1
        sequence = self._sequence
        self.loading = True
        try:
            items = await self._fetch()
        except ConsoleError as e:
            if sequence != self._sequence:
                return False
            self.last_error = e.message
            logger.warning(f"Failed to fetch {self.name}: {e.message}")
            self.notifier.error(e.message or f"Failed to fetch {self.name}")
            return False
        finally:
            if sequence == self._sequence:
                self.loading = False

        if sequence != self._sequence:
            logger.debug(f"Discarding stale {self.name} response #{sequence}")
            return False

        self._items = list(items)
        self.loaded = True
        self.last_error = None
        self.page = clamp_page(self.page, len(self.visible_items()), self.page_size)
        logger.debug(f"Loaded {len(self._items)} {self.name}")
        return True

    async def refresh(self) -> bool:
        """Re-fetch after a mutation"""
        return await self.load()

    def set_search(self, term: str) -> None:
        self.state.search = term or ""
        self.page = 1

    def set_filter(self, field_name: str, value: Optional[str]) -> None:
        if field_name not in self.filter_fields:
            raise KeyError(f"Unknown filter: {field_name}")
        self.state.filters[field_name] = value if value not in (None, "") else ALL
        self.page = 1

    def clear_filters(self) -> None:
        self.state = FilterState(filters={f: ALL for f in self.filter_fields})
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("Page size must be at least 1")
        self.page_size = page_size
        self.page = 1

    def visible_items(self) -> List[Item]:
        """Filtered subset of the cached set"""
        return filter_items(self._items, self.state, self.search_fields)

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.visible_items()), self.page_size)

    def current_page(self) -> Page:
        return paginate(self.visible_items(), self.page, self.page_size)

    def go_to_page(self, page: int) -> int:
        self.page = clamp_page(page, len(self.visible_items()), self.page_size)
        return self.page

    def next_page(self) -> int:
        return self.go_to_page(self.page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.page - 1)

    def page_numbers(self, width: int = 5) -> List[int]:
        return page_window(self.page, self.total_pages, width)

    @property
    def is_empty(self) -> bool:
        """True when nothing matches: render the "no results" state"""
        return not self.visible_items()
