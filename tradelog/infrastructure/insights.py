"""Insight Requester: Narrative journal critique from Google Gemini.

Serializes trade summaries into a coaching prompt and asks the Gemini
API for a Markdown report. This is the only asynchronous, fallible
collaborator in the package; nothing in the domain layer depends on it.

Environment:
    GEMINI_API_KEY (or API_KEY): API key for the Gemini developer API
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
EMPTY_RESPONSE_MESSAGE = "Unable to generate analysis at this time."

PROMPT_TEMPLATE = """
Act as a professional trading coach and quantitative analyst.
Analyze the following trade history from my journal:
{summary}

Provide a concise, professional analysis including:
1. Overall Performance Review (Identify strengths/weaknesses).
2. Strategy Efficacy (Which strategies are working best?).
3. Psychological/Behavioral Insights (Based on notes/outcome).
4. Actionable Advice (3 specific things to improve in the next 10 trades).

Keep the formatting clean with Markdown. Use professional trading terminology.
""".strip()


class InsightError(Exception):
    """Raised when the text-generation service cannot produce an analysis."""


def build_prompt(summaries: Sequence[dict[str, Any]]) -> str:
    """Render the coaching prompt for a list of trade summaries."""
    return PROMPT_TEMPLATE.format(summary=json.dumps(list(summaries), ensure_ascii=False))


def _get_genai_client(api_key: str | None = None):
    """Gemini developer-API client.

    Raises:
        InsightError: If google-genai is missing or no API key is configured
    """
    try:
        from google import genai
    except ImportError as e:
        raise InsightError(
            "Missing dependency 'google-genai'. Install it to enable the trading coach."
        ) from e

    key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    if not key:
        raise InsightError("No Gemini API key configured (set GEMINI_API_KEY)")
    return genai.Client(api_key=key)


class GeminiInsightRequester:
    """Asks Gemini for a narrative critique of the journal.

    The client is created lazily so that constructing a requester never
    needs network access or credentials; tests pass a fake client.

    Example:
        >>> requester = GeminiInsightRequester(model="gemini-2.5-flash")
        >>> text = asyncio.run(requester.analyze_journal(summaries))
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        timeout: float = 60.0,
        client: Any = None,
    ):
        self._model = model
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self):
        if self._client is None:
            self._client = _get_genai_client(self._api_key)
        return self._client

    async def analyze_journal(self, summaries: Sequence[dict[str, Any]]) -> str:
        """Request the coaching report.

        Args:
            summaries: Per-trade dicts (symbol, side, pnl, strategy, notes, date)

        Returns:
            Markdown text, or EMPTY_RESPONSE_MESSAGE if the model returned nothing

        Raises:
            InsightError: On missing credentials, timeout or any API failure
        """
        client = self._get_client()
        prompt = build_prompt(summaries)
        logger.debug("requesting analysis of %d trades from %s", len(summaries), self._model)

        try:
            response = await asyncio.wait_for(
                client.aio.models.generate_content(model=self._model, contents=prompt),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise InsightError(f"Gemini did not answer within {self._timeout:.0f}s") from e
        except Exception as e:  # noqa: BLE001
            raise InsightError(f"Gemini request failed: {e}") from e

        text = getattr(response, "text", None)
        return text or EMPTY_RESPONSE_MESSAGE
