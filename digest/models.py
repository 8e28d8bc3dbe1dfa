"""
Data structures for commits, date windows and categorized digests.

Commit records are produced by the log parser and never mutated afterwards;
summaries and digests always carry exactly the four fixed categories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple


class Category(Enum):
    """Fixed digest categories, declared in rendering order."""
    FEATURES = "features"
    FIXES = "fixes"
    IMPROVEMENTS = "improvements"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value

    @property
    def title(self) -> str:
        """Human-readable section heading."""
        return _CATEGORY_TITLES[self]


_CATEGORY_TITLES = {
    Category.FEATURES: "New Features",
    Category.FIXES: "Bug Fixes",
    Category.IMPROVEMENTS: "Improvements",
    Category.OTHER: "Other Changes",
}


class Audience(Enum):
    """Readers a digest can be tailored for."""
    GENERAL = "general"
    SALES = "sales"
    OPS = "ops"
    CX = "cx"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Optional[object]) -> Audience:
        """
        Map any selector to an Audience, falling back to GENERAL.

        Args:
            value: Audience instance, name string, or None

        Returns:
            Matching Audience, or Audience.GENERAL for missing/unknown values
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.GENERAL
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GENERAL


@dataclass(frozen=True)
class CommitRecord:
    """
    A single commit as read from git log.

    Attributes:
        hash: Short commit hash
        date: ISO-8601 author date
        author: Author display name
        message: Subject line
        body: Commit body, or None when the commit has no body
    """
    hash: str
    date: str
    author: str
    message: str
    body: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Return the record as a plain dict, leaving out an absent body."""
        data = {
            "hash": self.hash,
            "date": self.date,
            "author": self.author,
            "message": self.message,
        }
        if self.body is not None:
            data["body"] = self.body
        return data


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar window, both ends formatted YYYY-MM-DD."""
    start: str
    end: str

    def __str__(self) -> str:
        if self.start == self.end:
            return self.start
        return f"{self.start} → {self.end}"


@dataclass(frozen=True)
class DigestSection:
    """One category of the digest with its summarized items."""
    category: Category
    items: Tuple[str, ...] = ()

    @property
    def title(self) -> str:
        return self.category.title

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class SummaryResult:
    """
    Validated model output: one ordered item list per category.

    Attributes:
        features: New user-facing capabilities
        fixes: Resolved defects
        improvements: Things that work better without being new
        other: Internal and technical changes
    """
    features: Tuple[str, ...] = ()
    fixes: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()
    other: Tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Dict[Category, Iterable[str]]) -> SummaryResult:
        """Build a result from a Category-keyed mapping; missing keys become empty."""
        return cls(**{
            category.value: tuple(data.get(category, ()))
            for category in Category
        })

    def items_for(self, category: Category) -> Tuple[str, ...]:
        """Return the items stored for ``category``."""
        return getattr(self, category.value)

    def as_dict(self) -> Dict[str, list]:
        return {category.value: list(self.items_for(category)) for category in Category}


@dataclass(frozen=True)
class Digest:
    """
    Final categorized digest handed to the renderers.

    Attributes:
        date_range: Calendar window covered by the commits
        sections: Exactly four sections, ordered features, fixes, improvements, other
    """
    date_range: DateRange
    sections: Tuple[DigestSection, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """True when no section has any items."""
        return all(section.is_empty for section in self.sections)

    @property
    def total_items(self) -> int:
        return sum(len(section.items) for section in self.sections)

    def section(self, category: Category) -> DigestSection:
        """Return the section for ``category``."""
        for section in self.sections:
            if section.category is category:
                return section
        raise KeyError(category)
