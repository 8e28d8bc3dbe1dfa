"""
changelog-digest Core Module
============================

Provides the services behind the changelog-digest CLI:
- Configuration management
- Commit collection from a Git repository
- LLM-powered summarization into a categorized digest
- Markdown, HTML and JSON export

Version: 1.0.0
"""

__version__ = "1.0.0"

# Type definitions
from .types import (
    Audience,
    Category,
    CommitRecord,
    DateRange,
    Digest,
    DigestSection,
    SummaryResult,
    OutputFormat,
    ExportOptions,
)

# Configuration management
from .config import (
    OllamaConfig,
    GitConfig,
    DigestConfig,
    ExportConfig,
    ChangelogDigestConfig,
    get_config,
    reload_config,
    reset_config,
)

# Repository scanner
from .scanner import (
    RepositoryScanner,
)

# LLM summarizer
from .summarizer import (
    DigestSummarizer,
)

# Export service
from .exporter import (
    Exporter,
)

__all__ = [
    # Version
    "__version__",
    # Types
    "Audience",
    "Category",
    "CommitRecord",
    "DateRange",
    "Digest",
    "DigestSection",
    "SummaryResult",
    "OutputFormat",
    "ExportOptions",
    # Config
    "OllamaConfig",
    "GitConfig",
    "DigestConfig",
    "ExportConfig",
    "ChangelogDigestConfig",
    "get_config",
    "reload_config",
    "reset_config",
    # Scanner
    "RepositoryScanner",
    # Summarizer
    "DigestSummarizer",
    # Exporter
    "Exporter",
]
