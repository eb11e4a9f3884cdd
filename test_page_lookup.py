#!/usr/bin/env python3
"""
Tests for PageList lookups: CFI <-> page <-> percentage, positional items,
labels, the path registry and the closed-handle behaviour.
"""

import pytest

from pagelist import (
    EmptyPageRangeError,
    PageList,
    PageListClosedError,
    PageListConfig,
    PageListEntry,
    ReadingRange,
)
from pagelist.core.lookup import round_half_up

CFI_I = "epubcfi(/6/2!/4)"
CFI_1 = "epubcfi(/6/2!/6)"


def create_nav_document(links) -> str:
    """Navigation document with one page-list item per (href, label)."""
    items = ''.join(f'<li><a href="{href}">{label}</a></li>' for href, label in links)
    return f"""<html xmlns:epub="http://www.idpf.org/2007/ops"><body>
<nav epub:type="page-list"><ol>{items}</ol></nav>
</body></html>"""


def create_sample_page_list(**kwargs) -> PageList:
    return PageList(create_nav_document([
        (f"chap1.xhtml#{CFI_I}", "i"),
        (f"chap1.xhtml#{CFI_1}", "1"),
        ("chap2.xhtml", "2"),
    ]), **kwargs)


def create_numbered_page_list(count: int) -> PageList:
    """Pages 1..count, each located at /6/2!/<2n>."""
    return PageList(create_nav_document([
        (f"chap1.xhtml#epubcfi(/6/2!/{2 * n})", str(n)) for n in range(1, count + 1)
    ]))


# ----------------------------------------------------------------------
# Construction
# ----------------------------------------------------------------------

def test_sample_page_list():
    page_list = create_sample_page_list()
    assert page_list.pages == (1, 2, 3)
    assert page_list.locations == (CFI_I, CFI_1)
    assert (page_list.first_page, page_list.last_page, page_list.total_pages) == (1, 3, 2)
    assert len(page_list) == 3
    assert not page_list.is_empty


def test_no_document_gives_empty_page_list():
    page_list = PageList()
    assert page_list.is_empty
    assert page_list.pages == ()
    assert page_list.total_pages == 0


def test_from_entries():
    entries = [
        PageListEntry(page=1, page_label="1", href="a.xhtml#epubcfi(/6/2!/4)",
                      package_url="a.xhtml", cfi="epubcfi(/6/2!/4)", is_cfi_link=True),
        PageListEntry(page=2, page_label="2", href="b.xhtml"),
    ]
    page_list = PageList.from_entries(entries)
    assert page_list.entries == tuple(entries)
    assert page_list.page_from_cfi("epubcfi(/6/2!/4)") == 1
    assert page_list.pages_for_path("/b.xhtml") == (2,)


def test_from_entries_takes_no_document():
    with pytest.raises(TypeError):
        PageList.from_entries([], document=create_nav_document([("a.xhtml", "1")]))


# ----------------------------------------------------------------------
# CFI -> page
# ----------------------------------------------------------------------

def test_exact_cfi_match():
    page_list = create_sample_page_list()
    assert page_list.page_from_cfi(CFI_I) == 1
    assert page_list.page_from_cfi(CFI_1) == 2


def test_cfi_match_ignores_id_assertions():
    assert create_sample_page_list().page_from_cfi("epubcfi(/6/2[chap1]!/6)") == 2


def test_cfi_after_all_locations_gives_last_located_page():
    """Page 3 has no location, so the answer is 2, not 3."""
    assert create_sample_page_list().page_from_cfi("epubcfi(/6/4!/2)") == 2


def test_cfi_between_locations_gives_preceding_page():
    page_list = create_sample_page_list()
    assert page_list.page_from_cfi("epubcfi(/6/2!/4/2/1:5)") == 1
    assert page_list.page_from_cfi("epubcfi(/6/2!/5)") == 1


def test_cfi_before_all_locations_gives_first_page():
    assert create_sample_page_list().page_from_cfi("epubcfi(/6/2)") == 1


def test_cfi_before_all_locations_with_unlocated_front_matter():
    """Page 1 has no location; a CFI before every location still gives page 1."""
    page_list = PageList(create_nav_document([
        ("front.xhtml", "i"),
        ("c.xhtml#epubcfi(/6/4!/4)", "1"),
        ("c.xhtml#epubcfi(/6/4!/8)", "2"),
    ]))
    assert page_list.pages == (1, 2, 3)
    assert page_list.page_from_cfi("epubcfi(/6/2!/4)") == 1
    assert page_list.page_from_cfi("epubcfi(/6/4!/6)") == 2


def test_page_from_cfi_on_empty_page_list():
    assert PageList().page_from_cfi(CFI_I) is None


def test_page_from_cfi_without_locations():
    page_list = PageList(create_nav_document([("a.xhtml", "1"), ("b.xhtml", "2")]))
    assert page_list.page_from_cfi(CFI_I) is None


def test_invalid_cfi_is_not_found():
    assert create_sample_page_list().page_from_cfi("chapter 3") is None


def test_every_location_maps_to_its_own_page():
    page_list = create_numbered_page_list(25)
    for page, location in zip(page_list.pages, page_list.locations):
        assert page_list.page_from_cfi(location) == page


def test_pages_between_many_locations():
    page_list = create_numbered_page_list(25)
    # inside the element of page 7
    assert page_list.page_from_cfi("epubcfi(/6/2!/14/3:40)") == 7


def test_locations_not_matched_by_array_position():
    """A page without a CFI must not shift the pages of later locations."""
    page_list = PageList(create_nav_document([
        ("c.xhtml#epubcfi(/6/2!/4)", "1"),
        ("c.xhtml#anchor", "2"),
        ("c.xhtml#epubcfi(/6/2!/8)", "3"),
    ]))
    assert page_list.page_from_cfi("epubcfi(/6/2!/8)") == 3
    assert page_list.page_from_cfi("epubcfi(/6/2!/6)") == 1
    assert page_list.cfi_from_page(2) is None
    assert page_list.cfi_from_page(3) == "epubcfi(/6/2!/8)"


def test_custom_comparator():
    entries = [
        PageListEntry(page=1, page_label="1", href="a#a", cfi="a"),
        PageListEntry(page=2, page_label="2", href="a#c", cfi="c"),
    ]
    page_list = PageList.from_entries(entries, compare=lambda a, b: (a > b) - (a < b))
    assert page_list.page_from_cfi("c") == 2
    assert page_list.page_from_cfi("b") == 1


# ----------------------------------------------------------------------
# Ranges
# ----------------------------------------------------------------------

def test_pages_from_location_spanning_two_pages():
    page_list = create_sample_page_list()
    assert page_list.pages_from_location(ReadingRange.from_cfis(CFI_I, CFI_1)) == [1, 2]


def test_pages_from_zero_width_location():
    page_list = create_sample_page_list()
    assert page_list.pages_from_location(ReadingRange.from_cfis(CFI_1, CFI_1)) == [2]


def test_pages_from_location_within_one_page():
    page_list = create_sample_page_list()
    location = ReadingRange.from_cfis("epubcfi(/6/2!/4/2:0)", "epubcfi(/6/2!/4/8:10)")
    assert page_list.pages_from_location(location) == [1]


def test_pages_from_location_mapping():
    page_list = create_sample_page_list()
    location = {'start': {'cfi': CFI_I}, 'end': {'cfi': "epubcfi(/6/8!/2)"}}
    assert page_list.pages_from_location(location) == [1, 2]


def test_pages_from_unresolved_location():
    page_list = create_sample_page_list()
    assert page_list.pages_from_location(ReadingRange.from_cfis("bad", CFI_1)) == []
    assert PageList().pages_from_location(ReadingRange.from_cfis(CFI_I, CFI_1)) == []
    assert page_list.pages_from_location({'end': {'cfi': CFI_1}}) == []


# ----------------------------------------------------------------------
# Page -> CFI
# ----------------------------------------------------------------------

def test_cfi_from_page():
    page_list = create_sample_page_list()
    assert page_list.cfi_from_page(1) == CFI_I
    assert page_list.cfi_from_page("2") == CFI_1


def test_cfi_from_page_without_location():
    assert create_sample_page_list().cfi_from_page(3) is None


@pytest.mark.parametrize("page", [0, 4, -1, "abc", ""])
def test_cfi_from_unknown_page(page):
    assert create_sample_page_list().cfi_from_page(page) is None


def test_cfi_from_page_with_unsorted_pages():
    entries = [
        PageListEntry(page=3, page_label="3", href="a#x", cfi="epubcfi(/6/2!/2)"),
        PageListEntry(page=1, page_label="1", href="a#y", cfi="epubcfi(/6/2!/4)"),
    ]
    page_list = PageList.from_entries(entries)
    assert page_list.cfi_from_page(1) == "epubcfi(/6/2!/4)"


def test_page_cfi_round_trip():
    page_list = create_numbered_page_list(10)
    for page in page_list.pages:
        assert page_list.page_from_cfi(page_list.cfi_from_page(page)) == page


def test_cfi_from_page_label():
    page_list = create_sample_page_list()
    assert page_list.cfi_from_page_label("i") == CFI_I
    assert page_list.cfi_from_page_label("1") == CFI_1
    assert page_list.cfi_from_page_label("2") is None
    assert page_list.cfi_from_page_label("ii") is None


# ----------------------------------------------------------------------
# Percentages
# ----------------------------------------------------------------------

def test_page_from_percentage():
    page_list = create_sample_page_list()
    assert page_list.page_from_percentage(0) == 0
    assert page_list.page_from_percentage(0.25) == 1  # 0.5 rounds up
    assert page_list.page_from_percentage(0.5) == 1
    assert page_list.page_from_percentage(1) == 2


def test_page_from_percentage_is_not_clamped():
    assert create_sample_page_list().page_from_percentage(2.0) == 4


def test_page_from_percentage_on_empty_page_list():
    assert PageList().page_from_percentage(0.5) is None


def test_percentage_from_page_bounds():
    page_list = create_sample_page_list()
    assert page_list.percentage_from_page(page_list.first_page) == 0
    assert page_list.percentage_from_page(page_list.last_page) == 1
    assert page_list.percentage_from_page(2) == 0.5


def test_percentage_precision():
    page_list = create_numbered_page_list(4)
    assert page_list.percentage_from_page(2) == 0.333
    assert page_list.percentage_from_page(3) == 0.667

    config = PageListConfig(percentage_precision=1)
    coarse = PageList(create_nav_document([("a.xhtml", str(n)) for n in range(1, 5)]),
                      config=config)
    assert coarse.percentage_from_page(2) == 0.3


def test_percentage_from_page_on_single_page_list():
    page_list = PageList(create_nav_document([("a.xhtml", "1")]))
    with pytest.raises(EmptyPageRangeError):
        page_list.percentage_from_page(1)
    with pytest.raises(ZeroDivisionError):
        page_list.percentage_from_page(1)


def test_percentage_from_page_on_empty_page_list():
    assert PageList().percentage_from_page(1) is None


def test_percentage_from_cfi():
    page_list = create_sample_page_list()
    assert page_list.percentage_from_cfi(CFI_1) == 0.5
    assert page_list.percentage_from_cfi("epubcfi(/6/2!/4/2:3)") == 0
    assert page_list.percentage_from_cfi("not a cfi") is None


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(-0.5) == 0
    assert round_half_up(0.0625, 3) == 0.063


# ----------------------------------------------------------------------
# Entries by position
# ----------------------------------------------------------------------

def test_item_from_percentage():
    page_list = create_sample_page_list()
    assert page_list.item_from_percentage(0.5).page_label == "i"
    assert page_list.item_from_percentage(1).page_label == "1"
    assert page_list.item_from_percentage(1.5).page_label == "2"


def test_item_from_percentage_out_of_range():
    page_list = create_sample_page_list()
    assert page_list.item_from_percentage(0) is None   # page 0 -> position -1
    assert page_list.item_from_percentage(-1) is None
    assert page_list.item_from_percentage(5) is None
    assert PageList().item_from_percentage(0.5) is None


def test_item_from_cfi():
    page_list = create_sample_page_list()
    assert page_list.item_from_cfi(CFI_1).page_label == "1"
    assert page_list.item_from_cfi("epubcfi(/6/9!/2)").page_label == "1"
    assert page_list.item_from_cfi("bad") is None


def test_page_label_uses_entry_position():
    page_list = create_sample_page_list()
    assert page_list.page_label(0) == "i"
    assert page_list.page_label(2) == "2"
    assert page_list.page_label(3) is None
    assert page_list.page_label(-1) is None


def test_page_label_fallback():
    page_list = PageList(create_nav_document([("a.xhtml", "1"), ("b.xhtml", "")]))
    assert page_list.page_label(1) == "#1"


def test_entry_at():
    page_list = create_sample_page_list()
    assert page_list.entry_at(1).cfi == CFI_1
    assert page_list.entry_at(10) is None


# ----------------------------------------------------------------------
# Path registry
# ----------------------------------------------------------------------

def test_pages_for_path():
    page_list = create_sample_page_list()
    assert page_list.pages_for_path("/chap1.xhtml") == (1, 2)
    assert page_list.pages_for_path("/chap2.xhtml") == (3,)
    assert page_list.pages_for_path("chap2.xhtml") == ()


def test_pages_for_href():
    page_list = create_sample_page_list()
    assert page_list.pages_for_href("chap1.xhtml#epubcfi(/6/2!/4)") == (1, 2)
    assert page_list.pages_for_href("./chap2.xhtml") == (3,)
    assert page_list.pages_for_href("chap9.xhtml") == ()


def test_pages_by_absolute_path():
    page_list = create_sample_page_list()
    assert list(page_list.pages_by_absolute_path) == ["/chap1.xhtml", "/chap2.xhtml"]


# ----------------------------------------------------------------------
# Lifetime
# ----------------------------------------------------------------------

def test_queries_after_close_raise():
    page_list = create_sample_page_list()
    page_list.close()

    assert page_list.closed
    with pytest.raises(PageListClosedError):
        page_list.page_from_cfi(CFI_I)
    with pytest.raises(PageListClosedError):
        page_list.cfi_from_page(1)
    with pytest.raises(PageListClosedError):
        page_list.pages
    with pytest.raises(PageListClosedError):
        page_list.pages_from_location({'end': {'cfi': CFI_1}})
    with pytest.raises(PageListClosedError):
        page_list.pages_from_location(ReadingRange.from_cfis(CFI_I, CFI_1))


def test_context_manager_closes():
    with create_sample_page_list() as page_list:
        assert page_list.page_from_cfi(CFI_1) == 2
    assert page_list.closed
    assert repr(page_list) == "<PageList closed>"
    with pytest.raises(PageListClosedError):
        page_list.percentage_from_page(1)
