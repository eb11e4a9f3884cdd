"""
Exceptions raised by the page list engine.

Ordinary "not found" results are returned as None / empty collections;
the classes below cover misuse that should fail loudly.
"""


class PageListError(Exception):
    """Base class for page list errors."""


class PageListClosedError(PageListError, RuntimeError):
    """A query was made on a PageList after close()."""


class EmptyPageRangeError(PageListError, ZeroDivisionError):
    """Percentage conversion on a page list whose first and last page coincide."""


class InvalidCFIError(PageListError, ValueError):
    """A string could not be parsed as an EPUB CFI."""

    def __init__(self, cfi: str, reason: str = ""):
        self.cfi = cfi
        self.reason = reason
        message = f"Invalid CFI {cfi!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
