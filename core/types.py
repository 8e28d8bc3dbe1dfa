"""
Type definitions for rendering and exporting digests.

The domain records (commits, categories, digests) live in ``digest.models``
and are re-exported here for convenience.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from digest.models import (
    Audience,
    Category,
    CommitRecord,
    DateRange,
    Digest,
    DigestSection,
    SummaryResult,
)


class OutputFormat(Enum):
    """Document formats a digest can be rendered to."""
    MARKDOWN = "markdown"
    HTML = "html"
    JSON = "json"

    def __str__(self) -> str:
        return self.value

    @property
    def file_extension(self) -> str:
        """Return the file extension without the leading dot."""
        return {"markdown": "md", "html": "html", "json": "json"}[self.value]

    @classmethod
    def parse(cls, value: object) -> OutputFormat:
        """
        Resolve a format name, accepting the usual aliases (md, htm).

        Raises:
            ValueError: If the format is not supported
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        name = {"md": "markdown", "htm": "html"}.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unsupported export format: {value}") from None


@dataclass
class ExportOptions:
    """
    Configuration options for rendering a digest.

    Attributes:
        format: Output format (markdown, html, json)
        audience: Audience the digest was written for, shown in the header
        title: Document title
    """
    format: OutputFormat = OutputFormat.MARKDOWN
    audience: Audience = Audience.GENERAL
    title: str = "Changelog Digest"

    def __post_init__(self):
        """Accept plain strings for format and audience."""
        self.format = OutputFormat.parse(self.format)
        self.audience = Audience.parse(self.audience)

    @property
    def file_extension(self) -> str:
        return self.format.file_extension


__all__ = [
    "Audience",
    "Category",
    "CommitRecord",
    "DateRange",
    "Digest",
    "DigestSection",
    "SummaryResult",
    "OutputFormat",
    "ExportOptions",
]
