"""
Exception types raised by changelog-digest.

Every error is fatal for the run; the CLI reports the message and exits.
"""


class DigestError(Exception):
    """Base class for all changelog-digest errors."""
    pass


class ConfigurationError(DigestError):
    """Exception raised for invalid or incomplete configuration."""
    pass


class GitCommandError(DigestError):
    """Exception raised when git cannot be run or a git command fails."""
    pass


class NotARepositoryError(GitCommandError):
    """Exception raised when the target path is not inside a git repository."""
    pass


class InvalidCommitDateError(DigestError):
    """Exception raised when a commit date is not a valid ISO-8601 timestamp."""
    pass


class SummarizationError(DigestError):
    """Exception raised when the summarization service call fails."""
    pass


class ServiceAuthenticationError(SummarizationError):
    """The summarization service rejected the credentials."""
    pass


class ServiceRateLimitError(SummarizationError):
    """The summarization service is throttling requests."""
    pass


class ServiceUnavailableError(SummarizationError):
    """The summarization service could not be reached."""
    pass


class UnparseableResponseError(SummarizationError):
    """The service reply does not contain a usable JSON object."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class InvalidSummaryFieldError(UnparseableResponseError):
    """A JSON object was found, but a category holds the wrong type."""

    def __init__(self, category: str, value, raw_text: str = ""):
        super().__init__(
            f"Category '{category}' in model response must be a list of strings, "
            f"got {type(value).__name__}",
            raw_text,
        )
        self.category = category
