"""
Page index: the immutable structure the lookup engine searches.

Every parsed entry becomes one PageRecord (page number plus optional
location). Records carrying a location are additionally kept in a separate
tuple, in document order, for binary search by CFI. Pages and locations are
therefore never matched up by array position.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .cfi import CFIComparator, cfi_sort_key, compare_cfi
from .entries import PageListEntry, PageRecord
from .errors import InvalidCFIError
from .paths import Canonicalizer, NavPathResolver, PathResolver, canonicalize_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageIndex:
    """Built once from a page list; read-only afterwards."""
    entries: Tuple[PageListEntry, ...] = ()
    records: Tuple[PageRecord, ...] = ()
    located: Tuple[PageRecord, ...] = ()  # records with a location, document order
    location_keys: Tuple[Any, ...] = field(default=(), repr=False, compare=False)
    pages_by_absolute_path: Mapping[str, Tuple[int, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    first_page: int = 0
    last_page: int = 0
    total_pages: int = 0  # last_page - first_page, a range and not a count

    @property
    def pages(self) -> Tuple[int, ...]:
        return tuple(record.page for record in self.records)

    @property
    def locations(self) -> Tuple[str, ...]:
        return tuple(record.location for record in self.located)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def pages_for_path(self, absolute_path: str) -> Tuple[int, ...]:
        """Page numbers whose markers point into *absolute_path*, in list order."""
        return self.pages_by_absolute_path.get(absolute_path, ())


def _checked_locations(records: List[PageRecord],
                       compare: CFIComparator) -> List[PageRecord]:
    """Drop locations the comparator cannot order, warn if the rest is unsorted."""
    located = []
    for record in records:
        if record.location is None:
            continue
        try:
            compare(record.location, record.location)
        except InvalidCFIError as e:
            logger.warning(f"Page {record.page}: ignoring location, {e}")
            continue
        located.append(record)

    for previous, current in zip(located, located[1:]):
        if compare(previous.location, current.location) > 0:
            logger.warning(
                f"Page list locations are not in reading order "
                f"(page {previous.page} sorts after page {current.page}); "
                f"CFI lookups may be inaccurate"
            )
            break

    return located


def build_index(entries: Iterable[PageListEntry],
                resolve: Optional[PathResolver] = None,
                canonicalize: Optional[Canonicalizer] = None,
                compare: Optional[CFIComparator] = None) -> PageIndex:
    """
    Build a PageIndex from parsed entries.

    Args:
        entries: Page list entries in document order
        resolve: href -> package path (default: relative to the package root)
        canonicalize: package path -> canonical absolute path
        compare: three-way CFI comparator defining reading order

    Returns:
        PageIndex; an empty one (zero first/last/total) for no entries
    """
    entries = tuple(entries)
    if not entries:
        return PageIndex()

    resolve = resolve or NavPathResolver().resolve
    canonicalize = canonicalize or canonicalize_path
    compare = compare or compare_cfi

    records = []
    by_path: Dict[str, List[int]] = {}

    for entry in entries:
        records.append(PageRecord(entry.page, entry.cfi))

        if entry.href:
            href = entry.href.split('#')[0]
            absolute = canonicalize(resolve(href))
            by_path.setdefault(absolute, []).append(entry.page)

    located = _checked_locations(records, compare)
    key = cfi_sort_key(compare)

    first_page = int(records[0].page)
    last_page = int(records[-1].page)

    index = PageIndex(
        entries=entries,
        records=tuple(records),
        located=tuple(located),
        location_keys=tuple(key(record.location) for record in located),
        pages_by_absolute_path=MappingProxyType(
            {path: tuple(pages) for path, pages in by_path.items()}
        ),
        first_page=first_page,
        last_page=last_page,
        total_pages=last_page - first_page,
    )

    logger.debug(
        f"Built page index: {len(records)} pages, {len(located)} located, "
        f"{len(by_path)} documents, pages {first_page}-{last_page}"
    )
    return index
