"""
Page list parsing, indexing and lookups.
"""

from .cfi import EpubCFI, compare_cfi, is_cfi, parse_cfi
from .entries import PageListEntry, PageRecord, ReadingPosition, ReadingRange
from .errors import EmptyPageRangeError, InvalidCFIError, PageListClosedError, PageListError
from .index import PageIndex, build_index
from .lookup import PageList
from .parser import parse_page_list
from .paths import NavPathResolver, canonicalize_path

__all__ = [
    "PageList",
    "PageIndex",
    "PageListEntry",
    "PageRecord",
    "ReadingPosition",
    "ReadingRange",
    "EpubCFI",
    "NavPathResolver",
    "build_index",
    "parse_page_list",
    "parse_cfi",
    "compare_cfi",
    "is_cfi",
    "canonicalize_path",
    "PageListError",
    "PageListClosedError",
    "EmptyPageRangeError",
    "InvalidCFIError",
]
