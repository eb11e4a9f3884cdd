#!/usr/bin/env python3
"""
ePub page list inspection tool.

Shows the print page list of an ePub and answers page / CFI / percentage
conversions against it:

    pagelist-inspect book.epub
    pagelist-inspect book.epub --page 12 --percentage 0.5
    pagelist-inspect book.epub --cfi "epubcfi(/6/8!/4/2/1:0)" --json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from pagelist import PageList, load_config, load_page_list
from pagelist.core import EmptyPageRangeError, is_cfi
from pagelist.utils import configure_logging


def summarize(page_list: PageList) -> dict:
    """Summary counts for a page list."""
    entries = page_list.entries
    return {
        'entries': len(entries),
        'first_page': page_list.first_page,
        'last_page': page_list.last_page,
        'total_pages': page_list.total_pages,
        'located': len(page_list.locations),
        'cfi_links_without_cfi': sum(1 for e in entries if e.is_cfi_link and e.cfi is None),
        'documents': {path: list(pages) for path, pages in page_list.pages_by_absolute_path.items()},
    }


def answer_queries(page_list: PageList, args: argparse.Namespace) -> dict:
    """Run the conversions requested on the command line."""
    answers = {}

    if args.page is not None:
        answers['page'] = {
            'page': args.page,
            'cfi': page_list.cfi_from_page(args.page),
        }
        try:
            answers['page']['percentage'] = page_list.percentage_from_page(args.page)
        except EmptyPageRangeError as e:
            answers['page']['percentage'] = None
            answers['page']['error'] = str(e)

    if args.label is not None:
        answers['label'] = {
            'label': args.label,
            'cfi': page_list.cfi_from_page_label(args.label),
        }

    if args.cfi is not None:
        item = page_list.item_from_cfi(args.cfi)
        answers['cfi'] = {
            'cfi': args.cfi,
            'page': page_list.page_from_cfi(args.cfi),
            'label': item.page_label if item else None,
        }
        try:
            answers['cfi']['percentage'] = page_list.percentage_from_cfi(args.cfi)
        except EmptyPageRangeError as e:
            answers['cfi']['percentage'] = None
            answers['cfi']['error'] = str(e)

    if args.percentage is not None:
        item = page_list.item_from_percentage(args.percentage)
        answers['percentage'] = {
            'percentage': args.percentage,
            'page': page_list.page_from_percentage(args.percentage),
            'label': item.page_label if item else None,
        }

    return answers


def print_report(summary: dict, answers: dict) -> None:
    print(f"Page list entries: {summary['entries']}")
    print(f"Pages: {summary['first_page']} - {summary['last_page']} "
          f"(range {summary['total_pages']})")
    print(f"Entries with a CFI location: {summary['located']}")
    if summary['cfi_links_without_cfi']:
        print(f"⚠️  {summary['cfi_links_without_cfi']} CFI link(s) without a '#' fragment")

    if summary['documents']:
        print("\nDocuments:")
        for path, pages in summary['documents'].items():
            print(f"  • {path}: {len(pages)} page(s), {pages[0]} - {pages[-1]}")

    for name, answer in answers.items():
        print(f"\n{name}:")
        for key, value in answer.items():
            print(f"  {key}: {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect the print page list of an ePub"
    )
    parser.add_argument('epub', help='ePub file to inspect')
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='YAML configuration file (default: config.yaml)')
    parser.add_argument('--page', help='page number to convert to CFI / percentage')
    parser.add_argument('--label', help='page label to convert to CFI')
    parser.add_argument('--cfi', help='CFI to convert to page / percentage')
    parser.add_argument('--percentage', type=float, help='read progress (0-1) to convert to page')
    parser.add_argument('--json', action='store_true', help='print JSON instead of text')
    parser.add_argument('--verbose', '-v', action='store_true', help='debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    configure_logging(config, verbose=args.verbose)

    epub_path = Path(args.epub).resolve()
    if not epub_path.exists():
        print(f"Error: File not found: {epub_path}", file=sys.stderr)
        return 1

    if args.cfi is not None and not is_cfi(args.cfi):
        print(f"Error: Not a CFI: {args.cfi}", file=sys.stderr)
        return 2

    with load_page_list(epub_path, config) as page_list:
        if page_list.is_empty:
            print(f"❌ No page list found in {epub_path.name}", file=sys.stderr)
            return 1
        summary = summarize(page_list)
        answers = answer_queries(page_list, args)

    if args.json:
        print(json.dumps({'summary': summary, 'queries': answers}, indent=2, ensure_ascii=False))
    else:
        print_report(summary, answers)
    return 0


if __name__ == '__main__':
    sys.exit(main())
