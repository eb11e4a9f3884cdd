"""
Build a PageList straight from an .epub file.

The EPUB 3 navigation document is preferred; the NCX is used when there is
no navigation document or when it declares no page list.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ebooklib import epub

from .config import DEFAULT_CONFIG, PageListConfig
from .core import NavPathResolver, PageList, parse_page_list

logger = logging.getLogger(__name__)

NCX_MEDIA_TYPE = 'application/x-dtbncx+xml'


def navigation_items(book: epub.EpubBook) -> List[epub.EpubItem]:
    """Navigation documents of *book*: the XHTML nav first, then any NCX."""
    navs = []
    ncxs = []
    for item in book.get_items():
        if isinstance(item, epub.EpubNav):
            navs.append(item)
        elif getattr(item, 'media_type', None) == NCX_MEDIA_TYPE:
            ncxs.append(item)
    return navs + ncxs


def find_navigation_item(book: epub.EpubBook) -> Optional[epub.EpubItem]:
    """The navigation document a reading system would use, or None."""
    items = navigation_items(book)
    return items[0] if items else None


def page_list_from_book(book: epub.EpubBook,
                        config: Optional[PageListConfig] = None) -> PageList:
    """
    Build a PageList from an already opened book.

    Hrefs are resolved relative to the navigation document, so
    pages_by_absolute_path is keyed like "/Text/chapter01.xhtml".
    """
    config = config or DEFAULT_CONFIG

    items = navigation_items(book)
    if not items:
        logger.warning("No navigation document found in ePub")
        return PageList(config=config)

    for item in items:
        # raw bytes: EpubHtml.get_content() rebuilds the document from a template
        entries = parse_page_list(item.content, config)
        if entries:
            logger.info(f"Found page list with {len(entries)} entries in {item.file_name}")
            return PageList.from_entries(
                entries,
                resolve=NavPathResolver(item.file_name).resolve,
                config=config,
            )
        logger.debug(f"No page list in {item.file_name}")

    logger.warning("ePub declares no page list")
    return PageList(config=config)


def load_page_list(epub_path: Union[str, Path],
                   config: Optional[PageListConfig] = None) -> PageList:
    """
    Read an ePub and build its PageList.

    Args:
        epub_path: Path to the .epub file
        config: Parser and lookup configuration

    Returns:
        PageList (empty if the book has no page list)
    """
    book = epub.read_epub(str(epub_path))
    return page_list_from_book(book, config)
