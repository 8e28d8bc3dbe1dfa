"""
LLM summarization service for changelog-digest.

Turns a set of commit records into a validated four-category summary using
an Ollama-hosted language model, and assembles the final digest.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence, Dict, Any, List

from ollama import Client, ResponseError

from core.config import ChangelogDigestConfig, get_config
from digest.assemble import assemble_digest
from digest.date_utils import get_date_range
from digest.errors import SummarizationError
from digest.models import Audience, CommitRecord, Digest, SummaryResult
from digest.summarize import (
    build_summary_prompt,
    get_ollama_client,
    list_model_names,
    parse_summary_response,
    request_summary,
    translate_service_error,
)

logger = logging.getLogger(__name__)


class DigestSummarizer:
    """
    Service for LLM-powered changelog summaries.

    One prompt is sent per run; the reply is validated and never retried.
    """

    def __init__(self, config: Optional[ChangelogDigestConfig] = None, client: Optional[Client] = None):
        """
        Initialize the summarizer.

        Args:
            config: Configuration instance. If None, uses global config.
            client: Ollama client to use. If None, one is created on first use.
        """
        self.config = config if config is not None else get_config()
        self._client = client
        logger.debug(f"DigestSummarizer initialized (model={self.config.ollama.model})")

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_ollama_client(
                endpoint=self.config.ollama.endpoint,
                timeout=self.config.ollama.timeout,
                api_key=self.config.ollama.api_key,
            )
        return self._client

    def summarize(self, commits: Sequence[CommitRecord], audience: Optional[object] = None) -> SummaryResult:
        """
        Summarize commits into the four digest categories.

        Args:
            commits: Commit records to summarize
            audience: Audience selector; unknown values use the general framing

        Returns:
            SummaryResult with every category present

        Raises:
            SummarizationError: If the service call fails or the reply is unusable
        """
        resolved = Audience.parse(audience)
        if audience and str(audience).strip().lower() != resolved.value:
            logger.warning(f"Unknown audience {audience!r}, using '{resolved.value}'")

        logger.info(f"Summarizing {len(commits)} commits for the {resolved.value} audience")
        prompt = build_summary_prompt(commits, resolved)

        try:
            reply = request_summary(
                self.client,
                self.config.ollama.model,
                prompt,
                json_mode=self.config.ollama.json_mode,
            )
        except SummarizationError as e:
            logger.error(f"Summarization request failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Unexpected summarization failure: {type(e).__name__}: {e}", exc_info=True)
            raise translate_service_error(e) from e

        result = parse_summary_response(reply)
        logger.info(
            "Summary generated: "
            + ", ".join(f"{k}={len(v)}" for k, v in result.as_dict().items())
        )
        return result

    def build_digest(
        self,
        commits: Sequence[CommitRecord],
        audience: Optional[object] = None,
        today: Optional[date] = None,
    ) -> Digest:
        """
        Build the complete digest for a set of commits.

        Raises:
            InvalidCommitDateError: If a commit date cannot be parsed
            SummarizationError: If summarization fails
        """
        date_range = get_date_range(commits, today=today)
        summary = self.summarize(commits, audience)
        return assemble_digest(date_range, summary)

    def test_connection(self) -> Dict[str, Any]:
        """
        Test the Ollama connection and return status information.

        Returns:
            Dictionary with:
                - available (bool): Whether the server answered
                - models (list): List of available model names
                - model_available (bool): Whether the configured model is installed
                - error (str|None): Error message if unavailable
        """
        logger.info("Testing Ollama connection")

        try:
            available_models: List[str] = list_model_names(self.client)
        except (ResponseError, ConnectionError) as e:
            error = translate_service_error(e)
            logger.error(f"Ollama connection test failed: {error}")
            return {"available": False, "models": [], "model_available": False, "error": str(error)}
        except Exception as e:
            error = translate_service_error(e)
            logger.error(f"Ollama connection test failed: {type(e).__name__}: {e}")
            return {"available": False, "models": [], "model_available": False, "error": str(error)}

        wanted = self.config.ollama.model.lower()
        model_available = any(
            name.lower() == wanted or name.lower().split(":")[0] == wanted
            for name in available_models
        )
        logger.info(f"Ollama connection successful, {len(available_models)} models available")

        return {
            "available": True,
            "models": available_models,
            "model_available": model_available,
            "error": None,
        }
