"""
Page list parser.

Reads the page-list section of an EPUB navigation document and returns its
markers in document order. Two sources are understood:

- EPUB 3 XHTML navigation: <nav epub:type="page-list"> (or role="doc-pagelist")
  holding an <ol> of <li><a href="...">label</a></li>
- EPUB 2 NCX: <pageList> holding <pageTarget> elements with a navLabel and a
  content/@src

Absent or malformed input never raises; it simply yields no entries.
"""

import logging
import re
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

from ..config import DEFAULT_CONFIG, PageListConfig
from .entries import PageListEntry

logger = logging.getLogger(__name__)

Document = Union[str, bytes, BeautifulSoup, Tag, None]

NCX_ROOT = re.compile(rb'<(?:[\w-]+:)?ncx[\s>/]', re.IGNORECASE)

# NCX element names keep their case with the XML parser but are lowercased
# by the HTML parsers; match either
PAGE_LIST_TAG = re.compile(r'^pagelist$', re.IGNORECASE)
PAGE_TARGET_TAG = re.compile(r'^pagetarget$', re.IGNORECASE)
NAV_LABEL_TAG = re.compile(r'^navlabel$', re.IGNORECASE)
NCX_TAG = re.compile(r'^ncx$', re.IGNORECASE)


def _load_document(document: Document, config: PageListConfig) -> Optional[Tag]:
    if document is None:
        return None
    if isinstance(document, Tag):
        return document
    if isinstance(document, str):
        head = document[:4096].encode('utf-8', errors='replace')
    elif isinstance(document, (bytes, bytearray)):
        document = bytes(document)
        head = document[:4096]
    else:
        raise TypeError(
            f"Expected str, bytes or a BeautifulSoup tree, got {type(document).__name__}"
        )

    if not document.strip():
        return None

    features = 'xml' if NCX_ROOT.search(head) else config.html_parser
    return BeautifulSoup(document, features)


def make_entry(position: int, href: str, text: str,
               config: PageListConfig = DEFAULT_CONFIG) -> PageListEntry:
    """
    Build the entry for the marker at 0-based *position*.

    The CFI marker is a substring test on the whole href, not a scheme check.
    A CFI link without "#" keeps cfi=None.
    """
    page = position + 1

    if config.cfi_marker not in href:
        return PageListEntry(page=page, page_label=text, href=href)

    split = href.split('#')
    package_url = split[0]
    cfi = split[1] if len(split) > 1 and split[1] else None
    return PageListEntry(
        page=page,
        page_label=text,
        href=href,
        package_url=package_url,
        cfi=cfi,
        is_cfi_link=True,
    )


def find_page_list_nav(root: Tag, config: PageListConfig = DEFAULT_CONFIG) -> Optional[Tag]:
    """Return the first <nav> typed as a page list, or None."""
    for nav in root.find_all('nav'):
        nav_types = (nav.get('epub:type') or nav.get('type') or '').split()
        if config.nav_type in nav_types or nav.get('role') == config.nav_role:
            return nav
    return None


def parse_nav(root: Tag, config: PageListConfig = DEFAULT_CONFIG) -> List[PageListEntry]:
    """Parse the page-list <nav> of an XHTML navigation document."""
    nav = find_page_list_nav(root, config)
    if nav is None:
        logger.debug(f"No <nav> of type {config.nav_type!r} found")
        return []

    entries = []
    for i, item in enumerate(nav.find_all('li')):
        link = item.find('a')
        if link is None:
            logger.warning(f"Page list item {i + 1} has no link")
            entries.append(make_entry(i, '', '', config))
            continue
        href = link.get('href') or ''
        entries.append(make_entry(i, href, link.get_text(), config))

    return entries


def parse_ncx(root: Tag, config: PageListConfig = DEFAULT_CONFIG) -> List[PageListEntry]:
    """Parse the <pageList> of an NCX document."""
    page_list = root.find(PAGE_LIST_TAG)
    if page_list is None:
        logger.debug("NCX has no pageList")
        return []

    entries = []
    for i, target in enumerate(page_list.find_all(PAGE_TARGET_TAG)):
        label = target.find(NAV_LABEL_TAG)
        if label is not None:
            text_elem = label.find('text')
            text = (text_elem if text_elem is not None else label).get_text()
        else:
            text = target.get('value') or ''

        content = target.find('content')
        href = (content.get('src') if content is not None else None) or ''
        entries.append(make_entry(i, href, text, config))

    return entries


def parse_page_list(document: Document,
                    config: Optional[PageListConfig] = None) -> List[PageListEntry]:
    """
    Parse the page list of a navigation document.

    Args:
        document: XHTML nav or NCX markup (str/bytes), an already parsed
                  BeautifulSoup tree, or None
        config: Parser configuration (nav type, CFI marker, parser backend)

    Returns:
        Entries in document order; empty if the document has no page list
    """
    config = config or DEFAULT_CONFIG

    root = _load_document(document, config)
    if root is None:
        return []

    if root.find(NCX_TAG) is not None or getattr(root, 'name', None) == 'ncx':
        entries = parse_ncx(root, config)
        source = "NCX pageList"
    else:
        entries = parse_nav(root, config)
        source = "nav page-list"

    logger.debug(f"Parsed {len(entries)} page list entries from {source}")
    return entries
