# digest/date_utils.py
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Sequence

from .errors import InvalidCommitDateError
from .models import CommitRecord, DateRange

logger = logging.getLogger(__name__)


def get_today_date() -> str:
    return datetime.now().strftime("%Y-%m-%d")

def get_past_days_date(days: int) -> str:
    return (datetime.now() - timedelta(days=days)).strftime("%Y-%m-%d")

def get_first_day_of_month() -> str:
    today = datetime.now()
    return today.replace(day=1).strftime("%Y-%m-%d")


def resolve_since_date(since: str) -> str:
    """
    Convert a window keyword to a git --since value.

    ``today``, ``weekly``, ``monthly`` and ``custom:YYYY-MM-DD`` are resolved
    to dates; any other expression ("2 weeks ago", "2024-01-01") is handed
    to git unchanged.
    """
    mode = since.strip().lower()
    if mode == "today":
        return get_today_date()
    elif mode == "weekly":
        return get_past_days_date(7)
    elif mode == "monthly":
        return get_first_day_of_month()
    elif mode.startswith("custom:"):
        return mode.split("custom:")[1].strip()
    return since.strip()


def parse_commit_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 commit date into an aware UTC datetime.

    Raises:
        ValueError: If ``value`` is not an ISO-8601 timestamp
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def get_date_range(commits: Sequence[CommitRecord], today: Optional[date] = None) -> DateRange:
    """
    Get the calendar span covered by the commits.

    Args:
        commits: Commit records in any order
        today: Date used when there are no commits (defaults to the local date)

    Returns:
        DateRange from the oldest to the newest commit (UTC calendar dates)

    Raises:
        InvalidCommitDateError: If a commit date cannot be parsed
    """
    if not commits:
        day = (today or date.today()).isoformat()
        return DateRange(start=day, end=day)

    instants = []
    for commit in commits:
        try:
            instants.append(parse_commit_timestamp(commit.date))
        except (ValueError, OverflowError) as e:
            logger.error(f"Invalid date on commit {commit.hash}: {commit.date!r}")
            raise InvalidCommitDateError(
                f"Commit {commit.hash} has an invalid date: {commit.date!r}"
            ) from e

    oldest = min(instants)
    newest = max(instants)
    return DateRange(start=oldest.date().isoformat(), end=newest.date().isoformat())
