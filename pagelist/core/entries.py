"""
Value types shared by the parser, the index builder and the lookup engine.
"""

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class PageListEntry:
    """One declared page marker of a page list"""
    page: int                   # 1-based position of the marker in the list, not its label
    page_label: str             # Visible label (e.g., "iv", "12")
    href: str                   # Raw link target (e.g., "chap1.xhtml#epubcfi(/6/2!/4)")
    package_url: Optional[str] = None  # href before "#", CFI links only
    cfi: Optional[str] = None   # Fragment after "#", CFI links only
    is_cfi_link: bool = False   # href contained the CFI marker

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return asdict(self)


@dataclass(frozen=True)
class PageRecord:
    """A page number and the location it was declared at, if any"""
    page: int
    location: Optional[str] = None

    @property
    def has_location(self) -> bool:
        return self.location is not None


@dataclass(frozen=True)
class ReadingPosition:
    cfi: str


@dataclass(frozen=True)
class ReadingRange:
    """Visible range reported by a renderer: first and last position on screen."""
    start: ReadingPosition
    end: ReadingPosition

    @classmethod
    def from_cfis(cls, start: str, end: str) -> 'ReadingRange':
        return cls(ReadingPosition(start), ReadingPosition(end))
