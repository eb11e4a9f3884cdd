"""
Default path collaborators: resolve a page-list href against the navigation
document's location and turn the result into a canonical absolute path.

Both are plain callables so a host application can swap in its own
(e.g., resolving against the book URL instead of the package root).
"""

import posixpath
from typing import Callable
from urllib.parse import unquote, urlsplit

PathResolver = Callable[[str], str]
Canonicalizer = Callable[[str], str]


def _is_external(href: str) -> bool:
    return bool(urlsplit(href).scheme) or href.startswith('//')


class NavPathResolver:
    """
    Resolves hrefs relative to the navigation document.

    Args:
        base_path: Path of the navigation document inside the package
                   (e.g., "OEBPS/nav.xhtml"); "" resolves against the package root
    """

    def __init__(self, base_path: str = ""):
        self.base_path = base_path
        self.directory = posixpath.dirname(base_path)

    def resolve(self, href: str) -> str:
        """
        Resolve *href* to a package path.

        A fragment-only href ("#p12") points into the navigation document itself.
        External URLs are returned unchanged.
        """
        link_path = href.split('#', 1)[0]
        if _is_external(link_path):
            return link_path

        link_path = unquote(link_path)
        if not link_path:
            return self.base_path
        if link_path.startswith('/'):
            return posixpath.normpath(link_path)
        return posixpath.normpath(posixpath.join(self.directory, link_path))

    __call__ = resolve

    def __repr__(self) -> str:
        return f"NavPathResolver({self.base_path!r})"


def canonicalize_path(path: str) -> str:
    """
    Canonical absolute form of a package path.

    "Text/../Text/chap1.xhtml" and "/Text/chap1.xhtml" both become
    "/Text/chap1.xhtml". External URLs are returned unchanged.
    """
    if _is_external(path):
        return path
    return posixpath.normpath('/' + path.lstrip('/'))
