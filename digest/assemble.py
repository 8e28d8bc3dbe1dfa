# digest/assemble.py
from __future__ import annotations

from .models import Category, DateRange, Digest, DigestSection, SummaryResult


def assemble_digest(date_range: DateRange, summary: SummaryResult) -> Digest:
    """Pair the date range with one section per category, in fixed order."""
    sections = tuple(
        DigestSection(category=category, items=summary.items_for(category))
        for category in Category
    )
    return Digest(date_range=date_range, sections=sections)
