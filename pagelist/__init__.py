"""
epub-pagelist: map between EPUB CFIs, print page numbers and read progress.

Builds an index from a publication's page list (EPUB 3 nav or NCX) and
answers "which page am I on", "jump to page N" and progress-bar queries.
"""

from .config import PageListConfig, load_config
from .core import (
    EmptyPageRangeError,
    InvalidCFIError,
    NavPathResolver,
    PageIndex,
    PageList,
    PageListClosedError,
    PageListEntry,
    PageListError,
    ReadingPosition,
    ReadingRange,
    build_index,
    canonicalize_path,
    compare_cfi,
    parse_page_list,
)
from .epub_loader import load_page_list, page_list_from_book

__version__ = "0.1.0"

__all__ = [
    "PageList",
    "PageIndex",
    "PageListEntry",
    "ReadingPosition",
    "ReadingRange",
    "NavPathResolver",
    "PageListConfig",
    "build_index",
    "parse_page_list",
    "compare_cfi",
    "canonicalize_path",
    "load_config",
    "load_page_list",
    "page_list_from_book",
    "PageListError",
    "PageListClosedError",
    "EmptyPageRangeError",
    "InvalidCFIError",
]
