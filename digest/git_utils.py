# digest/git_utils.py
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from .errors import GitCommandError, NotARepositoryError
from .models import CommitRecord

logger = logging.getLogger(__name__)

# ASCII record/unit separators; git emits them through %x1e / %x1f
COMMIT_SEPARATOR = "\x1e"
FIELD_SEPARATOR = "\x1f"

# %h short hash, %aI author date (strict ISO), %an author name, %s subject, %b body
LOG_FORMAT = "%h%x1f%aI%x1f%an%x1f%s%x1f%b%x1e"


def _run_git(args: List[str], cwd: Path) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as e:
        raise GitCommandError("Git is not installed or not found in PATH") from e


def is_git_repository(repo_path: Path) -> bool:
    """Return True if ``repo_path`` lies inside a git work tree."""
    repo_path = Path(repo_path)
    if not repo_path.is_dir():
        return False
    result = _run_git(["rev-parse", "--is-inside-work-tree"], repo_path)
    return result.returncode == 0 and result.stdout.strip() == "true"


def get_raw_log(repo_path: Path, since: str, until: Optional[str] = None) -> str:
    """Run git log over the window and return its raw delimited output."""
    args = ["log", f"--since={since}"]
    if until:
        args.append(f"--until={until}")
    args.append(f"--pretty=format:{LOG_FORMAT}")

    logger.debug(f"Running git {' '.join(args)} in {repo_path}")
    result = _run_git(args, Path(repo_path))

    if result.returncode != 0:
        error_msg = result.stderr.strip() or f"exit status {result.returncode}"
        if "not a git repository" in error_msg.lower():
            raise NotARepositoryError(_not_a_repo_message(repo_path))
        # a repository without any commits yet has nothing to report
        if "does not have any commits" in error_msg.lower():
            logger.debug(f"Repository {repo_path} has no commits")
            return ""
        raise GitCommandError(f"Git command failed: git {' '.join(args)}\nError: {error_msg}")

    return result.stdout


def parse_git_log(
    raw: str,
    commit_separator: str = COMMIT_SEPARATOR,
    field_separator: str = FIELD_SEPARATOR,
) -> List[CommitRecord]:
    """
    Parse raw git log output into structured commit records.

    Chunks with fewer than four fields are dropped. Everything after the
    fourth field is body text and is rejoined with the field separator, so a
    body that happens to contain the separator survives intact.
    """
    commits: List[CommitRecord] = []
    chunks = [c for c in raw.split(commit_separator) if c.strip()]

    for chunk in chunks:
        parts = chunk.split(field_separator)
        if len(parts) < 4:
            logger.debug(f"Skipping malformed log record with {len(parts)} field(s)")
            continue

        hash_, date, author, message, *body_parts = parts
        body = field_separator.join(body_parts).strip()

        commits.append(CommitRecord(
            hash=hash_.strip(),
            date=date.strip(),
            author=author.strip(),
            message=message.strip(),
            body=body or None,
        ))

    logger.debug(f"Parsed {len(commits)} commits from {len(chunks)} log chunks")
    return commits


def get_commits(repo_path: Path, since: str, until: Optional[str] = None) -> List[CommitRecord]:
    """Fetch and parse the commits of ``repo_path`` inside the given window."""
    repo_path = Path(repo_path)
    if not is_git_repository(repo_path):
        raise NotARepositoryError(_not_a_repo_message(repo_path))

    raw_log = get_raw_log(repo_path, since, until)
    if not raw_log.strip():
        return []

    return parse_git_log(raw_log, COMMIT_SEPARATOR, FIELD_SEPARATOR)


def _not_a_repo_message(repo_path: Path) -> str:
    return (
        f"Not a git repository: {repo_path}\n"
        "Please run this command from within a git repository "
        "or specify a valid repo path with --repo."
    )
