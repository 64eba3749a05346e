from __future__ import annotations
from typing import List, Sequence

from .types import BlankRule, PageRef, PaginationPlan
from .errors import InvalidInput

def plan_pages(
    page_counts: Sequence[int],
    insert_empty_pages: bool,
    blank_rule: BlankRule = "entry_parity",
) -> PaginationPlan:
    """Start page of every document in the merged output, 1-based.

    entry_parity: a blank page follows a document whose own page count is odd.
    running_parity: a blank page follows a document when the number of source
    pages copied so far, blank pages not counted, is odd.
    """
    if blank_rule not in ("entry_parity", "running_parity"):
        raise InvalidInput(f"Unknown blank page rule: {blank_rule}")

    cursor = 1
    copied = 0
    starts: List[int] = []
    blanks: List[bool] = []
    for n in page_counts:
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise InvalidInput(f"Page count must be a positive integer: {n!r}")
        starts.append(cursor)
        cursor += n
        copied += n
        if not insert_empty_pages:
            blank = False
        elif blank_rule == "entry_parity":
            blank = n % 2 == 1
        else:
            blank = copied % 2 == 1
        if blank:
            cursor += 1
        blanks.append(blank)
    return PaginationPlan(start_pages=tuple(starts), blank_after=tuple(blanks), total_pages=cursor - 1)

def build_page_sequence(page_counts: Sequence[int], plan: PaginationPlan) -> List[PageRef]:
    """Merged document page by page: each document's pages, then its blank page if any."""
    if len(page_counts) != len(plan.start_pages):
        raise ValueError("plan does not match the entry list")
    pages: List[PageRef] = []
    for idx, n in enumerate(page_counts):
        for pno in range(n):
            pages.append(PageRef(entry_index=idx, pdf_page_index=pno))
        if plan.blank_after[idx]:
            pages.append(PageRef(entry_index=idx, is_blank=True))
    return pages

def blank_pages_contributed(plan: PaginationPlan) -> int:
    return sum(1 for b in plan.blank_after if b)
