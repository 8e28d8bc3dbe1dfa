# digest/summarize.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from ollama import Client, ResponseError

from .errors import (
    InvalidSummaryFieldError,
    ServiceAuthenticationError,
    ServiceRateLimitError,
    ServiceUnavailableError,
    SummarizationError,
    UnparseableResponseError,
)
from .models import Audience, Category, CommitRecord, SummaryResult

logger = logging.getLogger(__name__)

AUDIENCE_GUIDANCE: Dict[Audience, str] = {
    Audience.GENERAL: "Write for a general business audience.",
    Audience.SALES: (
        "Write for a sales team. Emphasize customer-facing features "
        "and competitive advantages."
    ),
    Audience.OPS: (
        "Write for an operations team. Emphasize reliability, performance, "
        "and process improvements."
    ),
    Audience.CX: (
        "Write for a customer experience team. Emphasize user-facing changes "
        "and support-related fixes."
    ),
}

CATEGORY_DEFINITIONS: Dict[Category, str] = {
    Category.FEATURES: "New Features (things users can now do)",
    Category.FIXES: "Bug Fixes (problems that were solved)",
    Category.IMPROVEMENTS: "Improvements (things that work better, without being new)",
    Category.OTHER: "Other Changes (everything else, including internal/technical updates)",
}


# -------------------------
# Client
# -------------------------
def get_ollama_client(
    endpoint: Optional[str] = None,
    timeout: Optional[float] = None,
    api_key: Optional[str] = None,
) -> Client:
    """
    Create an Ollama client for the given endpoint.

    Args:
        endpoint: Ollama server URL (None uses the library default / OLLAMA_HOST)
        timeout: Request timeout in seconds, enforced by the client
        api_key: Optional bearer token for hosted Ollama endpoints

    Returns:
        Client: Ollama client instance
    """
    kwargs: Dict[str, Any] = {}
    if timeout is not None:
        kwargs["timeout"] = timeout
    if api_key:
        kwargs["headers"] = {"Authorization": f"Bearer {api_key}"}

    logger.debug(f"Creating Ollama client (endpoint={endpoint or 'default'})")
    return Client(host=endpoint, **kwargs)


def list_model_names(client: Client) -> List[str]:
    """Return the names of models installed on the Ollama server."""
    models_response = client.list()
    if hasattr(models_response, "models"):
        return [model.model for model in models_response.models]
    if isinstance(models_response, dict) and "models" in models_response:
        return [m.get("name", m.get("model", "")) for m in models_response["models"]]
    return []


# -------------------------
# Request building
# -------------------------
def build_summary_prompt(commits: Sequence[CommitRecord], audience: Optional[object] = None) -> str:
    """
    Build the instruction sent to the model for a set of commits.

    Unknown or missing audiences fall back to the general framing.
    """
    guidance = AUDIENCE_GUIDANCE[Audience.parse(audience)]
    definitions = "\n".join(
        f"- {category.value}: {CATEGORY_DEFINITIONS[category]}" for category in Category
    )
    example = json.dumps(
        {category.value: ["item 1"] for category in Category}, indent=2
    )
    commits_json = json.dumps([c.to_dict() for c in commits], indent=2, ensure_ascii=False)

    return f"""You are a technical writer who translates git commits into plain English for non-technical teams.

Given these git commits, create a summary with these sections:
{definitions}

Rules:
- Write for someone who doesn't code
- Focus on user/business impact, not technical details
- Keep each item to 1-2 sentences
- Skip merge commits and version bumps
- If a commit is unclear, summarize what you can infer instead of skipping it
- {guidance}

Respond ONLY with valid JSON in this exact format, with no other text:
{example}

If a category has no items, use an empty array.

Commits:
{commits_json}"""


# -------------------------
# Service call
# -------------------------
def request_summary(client: Client, model: str, prompt: str, json_mode: bool = True) -> str:
    """
    Send the prompt to the model and return the raw reply text.

    Service errors are translated into SummarizationError subclasses.
    """
    kwargs: Dict[str, Any] = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
    }
    if json_mode:
        kwargs["format"] = "json"
        logger.debug("Requesting JSON-formatted response from LLM")

    logger.debug(f"Sending chat request to Ollama (model={model}, {len(prompt)} chars)")
    try:
        resp = client.chat(**kwargs)
    except (ResponseError, ConnectionError) as e:
        raise translate_service_error(e) from e

    content = resp["message"]["content"]
    if not isinstance(content, str):
        raise SummarizationError("Unexpected response type from the summarization service")

    logger.debug(f"Received response from Ollama ({len(content)} chars)")
    return content


def translate_service_error(error: Exception) -> SummarizationError:
    """Map an Ollama client error to a user-facing SummarizationError."""
    if isinstance(error, ResponseError):
        status = getattr(error, "status_code", -1)
        if status in (401, 403):
            return ServiceAuthenticationError(
                "The summarization service rejected the API key. "
                "Please check CHANGELOG_DIGEST_API_KEY and try again."
            )
        if status == 429:
            return ServiceRateLimitError(
                "Summarization service rate limit exceeded. "
                "Please wait a moment and try again."
            )
        return SummarizationError(f"Summarization service error ({status}): {error.error}")

    if isinstance(error, ConnectionError):
        return ServiceUnavailableError(
            "Failed to connect to the Ollama server.\n\n"
            "Please ensure Ollama is installed and running:\n"
            "  1. Install Ollama from https://ollama.com/\n"
            "  2. Start the Ollama service (it usually runs automatically)\n"
            "  3. Check the endpoint in your configuration\n\n"
            f"Error details: {error}"
        )

    return SummarizationError(f"Summarization failed: {type(error).__name__}: {error}")


# -------------------------
# Reply parsing
# -------------------------
def _extract_json_block(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start:end + 1]


def _category_items(category: Category, value: Any, raw_text: str) -> tuple:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise InvalidSummaryFieldError(category.value, value, raw_text)
    items = tuple(item.strip() for item in value if item.strip())
    if len(items) != len(value):
        logger.debug(f"Dropped {len(value) - len(items)} blank {category.value} item(s) from model response")
    return items


def parse_summary_response(text: str) -> SummaryResult:
    """
    Extract the four-category summary from a model reply.

    The reply may wrap the JSON object in prose; everything from the first
    ``{`` to the last ``}`` is taken as the payload.

    Raises:
        UnparseableResponseError: No JSON object could be found or parsed
        InvalidSummaryFieldError: A category is present but not a list of strings
    """
    block = _extract_json_block(text)
    if block is None:
        logger.error("Model response contains no JSON object")
        raise UnparseableResponseError("Could not parse model response as JSON", text)

    try:
        data = json.loads(block)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.error(f"Model response JSON is invalid: {e}")
        raise UnparseableResponseError(f"Could not parse model response as JSON: {e}", text) from e

    if not isinstance(data, dict):
        raise UnparseableResponseError("Model response JSON is not an object", text)

    known = {category.value for category in Category}
    extra = [key for key in data if key not in known]
    if extra:
        logger.debug(f"Ignoring unknown keys in model response: {extra}")

    return SummaryResult.from_mapping({
        category: _category_items(category, data.get(category.value), text)
        for category in Category
    })
