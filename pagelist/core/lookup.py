"""
Page list lookups: page <-> CFI <-> percentage.

A PageList owns one PageIndex built at construction and answers queries
against it. Queries never mutate anything. "Not found" is reported as None
(or an empty list), never as an exception.

Two different integer arguments appear below and must not be mixed up:

- page number: the ``page`` value of an entry (1-based list position as
  declared by the parser)
- entry position: a 0-based index into ``entries``, used by ``entry_at``
  and ``page_label``
"""

import logging
import math
from bisect import bisect_left
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_CONFIG, PageListConfig
from .cfi import CFIComparator, cfi_sort_key, compare_cfi
from .entries import PageListEntry, PageRecord
from .errors import EmptyPageRangeError, InvalidCFIError, PageListClosedError
from .index import PageIndex, build_index
from .parser import Document, parse_page_list
from .paths import Canonicalizer, NavPathResolver, PathResolver, canonicalize_path

logger = logging.getLogger(__name__)

PageNumber = Union[int, str]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves up (2.5 -> 3), not to even as round() does."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _coerce_page(page: PageNumber) -> Optional[int]:
    if isinstance(page, bool):
        return None
    if isinstance(page, int):
        return page
    try:
        return int(str(page).strip())
    except ValueError:
        return None


def _position_cfi(location: Any, end: str) -> Optional[str]:
    point = location.get(end) if isinstance(location, Mapping) else getattr(location, end, None)
    if point is None:
        return None
    if isinstance(point, Mapping):
        return point.get('cfi')
    return getattr(point, 'cfi', None)


class PageList:
    """
    Page list of one publication.

    Args:
        document: Navigation document (XHTML nav or NCX), parsed at construction
        resolve: href -> package path; defaults to resolving from the package root
        canonicalize: package path -> canonical absolute path
        compare: three-way CFI comparator (reading order)
        config: Parser and lookup configuration

    Usable as a context manager; queries after close() raise PageListClosedError.
    """

    def __init__(self,
                 document: Document = None,
                 resolve: Optional[PathResolver] = None,
                 canonicalize: Optional[Canonicalizer] = None,
                 compare: Optional[CFIComparator] = None,
                 config: Optional[PageListConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.resolve = resolve or NavPathResolver().resolve
        self.canonicalize = canonicalize or canonicalize_path
        self.compare = compare or compare_cfi
        self._key = cfi_sort_key(self.compare)

        entries = parse_page_list(document, self.config)
        self._index: Optional[PageIndex] = build_index(
            entries, self.resolve, self.canonicalize, self.compare
        )

    @classmethod
    def from_entries(cls,
                     entries: Sequence[PageListEntry],
                     resolve: Optional[PathResolver] = None,
                     canonicalize: Optional[Canonicalizer] = None,
                     compare: Optional[CFIComparator] = None,
                     config: Optional[PageListConfig] = None) -> 'PageList':
        """Build from entries parsed elsewhere (no navigation document)."""
        page_list = cls(resolve=resolve, canonicalize=canonicalize,
                        compare=compare, config=config)
        page_list._index = build_index(
            entries, page_list.resolve, page_list.canonicalize, page_list.compare
        )
        return page_list

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the index. Further queries raise PageListClosedError."""
        self._index = None

    @property
    def closed(self) -> bool:
        return self._index is None

    def __enter__(self) -> 'PageList':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def index(self) -> PageIndex:
        if self._index is None:
            raise PageListClosedError("PageList has been closed")
        return self._index

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def entries(self) -> Tuple[PageListEntry, ...]:
        return self.index.entries

    @property
    def pages(self) -> Tuple[int, ...]:
        return self.index.pages

    @property
    def locations(self) -> Tuple[str, ...]:
        return self.index.locations

    @property
    def first_page(self) -> int:
        return self.index.first_page

    @property
    def last_page(self) -> int:
        return self.index.last_page

    @property
    def total_pages(self) -> int:
        return self.index.total_pages

    @property
    def is_empty(self) -> bool:
        return self.index.is_empty

    def __len__(self) -> int:
        return len(self.index.records)

    def __repr__(self) -> str:
        if self.closed:
            return "<PageList closed>"
        return (f"<PageList {len(self)} pages, first={self.first_page} "
                f"last={self.last_page} located={len(self.index.located)}>")

    # ------------------------------------------------------------------
    # CFI -> page
    # ------------------------------------------------------------------

    def page_from_cfi(self, cfi: str) -> Optional[int]:
        """
        Page containing *cfi*.

        An exact location match returns its own page. Otherwise the page of
        the nearest location before *cfi* is returned; a *cfi* before every
        location gives the first page of the list, located or not. None if
        nothing is located or the CFI cannot be parsed.
        """
        index = self.index
        located = index.located
        if not located:
            return None

        try:
            key = self._key(cfi)
            position = bisect_left(index.location_keys, key)
            if position < len(located) and self.compare(located[position].location, cfi) == 0:
                return located[position].page
        except InvalidCFIError as e:
            logger.warning(f"page_from_cfi: {e}")
            return None

        # position is now the insertion point: first location after cfi
        if position == 0:
            return index.records[0].page
        return located[position - 1].page

    def pages_from_location(self, location: Any) -> List[int]:
        """
        Pages visible in a reading range.

        *location* needs start.cfi and end.cfi (attributes or mapping keys,
        e.g. a ReadingRange). Returns [], [start] or [start, end]; the end
        page is only added when it differs from the start page.
        """
        if not self.index.located:
            return []

        start_cfi = _position_cfi(location, 'start')
        start_page = self.page_from_cfi(start_cfi) if start_cfi is not None else None
        if start_page is None:
            return []

        pages = [start_page]
        end_cfi = _position_cfi(location, 'end')
        end_page = self.page_from_cfi(end_cfi) if end_cfi is not None else None
        if end_page is not None and end_page != start_page:
            pages.append(end_page)
        return pages

    # ------------------------------------------------------------------
    # Page -> CFI
    # ------------------------------------------------------------------

    def record_for_page(self, page: PageNumber) -> Optional[PageRecord]:
        """First record with this page number. Linear: pages may be unsorted."""
        page = _coerce_page(page)
        if page is None:
            return None
        for record in self.index.records:
            if record.page == page:
                return record
        return None

    def cfi_from_page(self, page: PageNumber) -> Optional[str]:
        """Location declared for *page*, or None when the page is unknown or unlocated."""
        record = self.record_for_page(page)
        return record.location if record is not None else None

    def cfi_from_page_label(self, label: str) -> Optional[str]:
        """Location of the first entry whose label equals *label* exactly."""
        for entry in self.index.entries:
            if entry.page_label == label:
                return self.cfi_from_page(entry.page)
        return None

    # ------------------------------------------------------------------
    # Percentages
    # ------------------------------------------------------------------

    def page_from_percentage(self, percent: float) -> Optional[int]:
        """round(total_pages * percent); not clamped to first/last page."""
        index = self.index
        if index.is_empty:
            return None
        return int(round_half_up(index.total_pages * percent))

    def percentage_from_page(self, page: PageNumber) -> Optional[float]:
        """
        Position of *page* between first_page (0.0) and last_page (1.0).

        Raises:
            EmptyPageRangeError: if first_page == last_page on a non-empty list
        """
        index = self.index
        page = _coerce_page(page)
        if index.is_empty or page is None:
            return None
        if index.total_pages == 0:
            raise EmptyPageRangeError(
                f"Cannot compute a percentage: page list spans a single page ({index.first_page})"
            )
        percentage = (page - index.first_page) / index.total_pages
        return round_half_up(percentage, self.config.percentage_precision)

    def percentage_from_cfi(self, cfi: str) -> Optional[float]:
        page = self.page_from_cfi(cfi)
        if page is None:
            return None
        return self.percentage_from_page(page)

    # ------------------------------------------------------------------
    # Entries by position
    # ------------------------------------------------------------------

    def entry_at(self, position: int) -> Optional[PageListEntry]:
        """Entry at 0-based *position* in the list, or None."""
        entries = self.index.entries
        if 0 <= position < len(entries):
            return entries[position]
        return None

    def item_from_percentage(self, percent: float) -> Optional[PageListEntry]:
        """
        Entry for a percentage, taking the computed page as a 1-based entry
        position. Only exact when page numbers run 1..n without gaps.
        """
        page = self.page_from_percentage(percent)
        if page is None:
            return None
        return self.entry_at(page - 1)

    def item_from_cfi(self, cfi: str) -> Optional[PageListEntry]:
        page = self.page_from_cfi(cfi)
        if page is None:
            return None
        return self.entry_at(page - 1)

    def page_label(self, position: int) -> Optional[str]:
        """
        Label of the entry at 0-based *position* (an entry position, not a
        page number); "#<position>" when that entry has an empty label.
        """
        entry = self.entry_at(position)
        if entry is None:
            return None
        return entry.page_label or f"#{position}"

    # ------------------------------------------------------------------
    # Path registry
    # ------------------------------------------------------------------

    @property
    def pages_by_absolute_path(self) -> Mapping[str, Tuple[int, ...]]:
        return self.index.pages_by_absolute_path

    def pages_for_path(self, absolute_path: str) -> Tuple[int, ...]:
        """Pages whose markers resolve into *absolute_path* (a canonical path)."""
        return self.index.pages_for_path(absolute_path)

    def pages_for_href(self, href: str) -> Tuple[int, ...]:
        """Same as pages_for_path, resolving and canonicalizing *href* first."""
        return self.index.pages_for_path(self.canonicalize(self.resolve(href.split('#')[0])))
