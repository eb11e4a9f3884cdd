r"""
EPUB Canonical Fragment Identifier ordering.

Only what the page list needs is implemented: parsing a CFI string into its
numeric path and terminal parts, and a total order over CFIs that follows
reading order. Generating CFIs from DOM nodes is out of scope.

    epubcfi(/6/4[chap01ref]!/4[body01]/10[para05]/3:10)
            \____ spine ___/ \________ content path _____/

Range CFIs ("epubcfi(/6/4!/4,/2/1:0,/3:5)") are ordered by their start
point, i.e. the parent path followed by the start path.
"""

import re
from dataclasses import dataclass
from functools import lru_cache, cmp_to_key
from typing import Callable, List, Optional, Tuple

from .errors import InvalidCFIError

CFI_WRAPPER = re.compile(r'^\s*epubcfi\((?P<body>.*)\)\s*$', re.DOTALL)

# /N or /N[assertion], assertions may contain ^-escaped characters
STEP = re.compile(r'/(\d+)(?:\[(?:[^\]\^]|\^.)*\])?')

TERMINAL = re.compile(
    r'(?::(?P<offset>\d+))?'
    r'(?:\[(?:[^\]\^]|\^.)*\])?'
    r'(?:~(?P<temporal>\d+(?:\.\d+)?))?'
    r'(?:@(?P<x>\d+(?:\.\d+)?):(?P<y>\d+(?:\.\d+)?))?'
)

CFIComparator = Callable[[str, str], int]


@dataclass(frozen=True)
class EpubCFI:
    """Parsed, comparable form of a CFI"""
    components: Tuple[Tuple[int, ...], ...]  # one step tuple per "!" indirection
    offset: Optional[int] = None             # character offset (":N")
    temporal: Optional[float] = None         # "~N"
    spatial: Optional[Tuple[float, float]] = None  # "@x:y"
    is_range: bool = False

    def sort_key(self) -> tuple:
        return (
            self.components,
            -1 if self.offset is None else self.offset,
            -1.0 if self.temporal is None else self.temporal,
        )


def _split_outside_brackets(text: str, separator: str) -> List[str]:
    """Split on *separator*, ignoring occurrences inside [...] assertions."""
    parts = []
    depth = 0
    escaped = False
    current = []
    for char in text:
        if escaped:
            escaped = False
        elif char == '^':
            escaped = True
        elif char == '[':
            depth += 1
        elif char == ']' and depth:
            depth -= 1
        elif char == separator and depth == 0:
            parts.append(''.join(current))
            current = []
            continue
        current.append(char)
    parts.append(''.join(current))
    return parts


def _parse_steps(cfi: str, component: str) -> Tuple[Tuple[int, ...], str]:
    steps = []
    pos = 0
    match = STEP.match(component, pos)
    while match:
        steps.append(int(match.group(1)))
        pos = match.end()
        match = STEP.match(component, pos)
    if not steps:
        raise InvalidCFIError(cfi, f"no path steps in {component!r}")
    return tuple(steps), component[pos:]


@lru_cache(maxsize=4096)
def parse_cfi(cfi: str) -> EpubCFI:
    """
    Parse a CFI string.

    Accepts both the wrapped form ("epubcfi(/6/4!/2)") and a bare path
    ("/6/4!/2").

    Raises:
        InvalidCFIError: if the string is not a CFI
    """
    if not isinstance(cfi, str):
        raise InvalidCFIError(repr(cfi), "not a string")

    match = CFI_WRAPPER.match(cfi)
    body = match.group('body') if match else cfi.strip()
    if not body.startswith('/'):
        raise InvalidCFIError(cfi, "path must start with '/'")

    is_range = False
    pieces = _split_outside_brackets(body, ',')
    if len(pieces) == 3:
        parent, start, _end = pieces
        body = parent + start
        is_range = True
    elif len(pieces) != 1:
        raise InvalidCFIError(cfi, "range must have a parent, a start and an end")

    raw_components = _split_outside_brackets(body, '!')
    components = []
    remainder = ''
    for i, raw in enumerate(raw_components):
        steps, remainder = _parse_steps(cfi, raw)
        if remainder and i < len(raw_components) - 1:
            raise InvalidCFIError(cfi, f"unexpected {remainder!r} before '!'")
        components.append(steps)

    terminal = TERMINAL.fullmatch(remainder)
    if terminal is None:
        raise InvalidCFIError(cfi, f"unexpected {remainder!r}")

    offset = terminal.group('offset')
    temporal = terminal.group('temporal')
    spatial = None
    if terminal.group('x') is not None:
        spatial = (float(terminal.group('x')), float(terminal.group('y')))

    return EpubCFI(
        components=tuple(components),
        offset=int(offset) if offset is not None else None,
        temporal=float(temporal) if temporal is not None else None,
        spatial=spatial,
        is_range=is_range,
    )


def is_cfi(value: str) -> bool:
    try:
        parse_cfi(value)
    except InvalidCFIError:
        return False
    return True


def compare_cfi(a: str, b: str) -> int:
    """
    Compare two CFIs in reading order.

    Returns -1 if *a* comes before *b*, 1 if after, 0 if both address the
    same point. An ancestor sorts before its descendants and an element
    before any character offset inside it.

    Raises:
        InvalidCFIError: if either side cannot be parsed
    """
    key_a = parse_cfi(a).sort_key()
    key_b = parse_cfi(b).sort_key()
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def cfi_sort_key(compare: CFIComparator = compare_cfi):
    """Key factory for sorted()/bisect built from a three-way comparator."""
    return cmp_to_key(compare)
