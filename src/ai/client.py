"""Gemini ``generateContent`` client with rate-limit backoff.

``GeminiClient.generate`` posts one system instruction plus one user query
and returns the first generated text fragment.  It never raises: when every
attempt fails the caller receives a fixed, displayable error string, and a
successful response without text yields a placeholder.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

import httpx

from src.utils.logger import get_logger
from src.utils.retry import retry

log = get_logger(__name__, component="gemini_client")

NO_ANALYSIS_TEXT = "No analysis generated."
UNAVAILABLE_TEXT = (
    "Error: Could not connect to Supply Chain Analyst. Please check your network."
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class GeminiAPIError(Exception):
    """Raised for a failed attempt: non-2xx status or an unreadable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(GeminiAPIError):
    """Raised when the endpoint answers 429 Too Many Requests."""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class GeminiClient:
    """Async client for a single Gemini text-generation endpoint.

    Parameters
    ----------
    api_key:
        Key sent as the ``key`` query parameter.
    endpoint:
        Full ``...:generateContent`` URL.
    max_attempts:
        Default attempt budget per ``generate`` call.
    base_delay:
        Base backoff delay in seconds after a 429.
    timeout:
        Deadline in seconds for each individual attempt.
    http_client:
        Optional shared ``httpx.AsyncClient``.  When ``None`` each call
        opens and closes its own client.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        max_attempts: int = 5,
        base_delay: float = 1.0,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._timeout = timeout
        self._http_client = http_client
        log.info(
            "gemini_client.init",
            endpoint=endpoint,
            max_attempts=max_attempts,
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate(
        self,
        system_instruction: str,
        user_query: str,
        max_attempts: int | None = None,
    ) -> str:
        """Return generated text for *user_query* under *system_instruction*.

        429 responses back off exponentially with jitter; other failures are
        retried straight away.  Once the attempt budget is spent the fixed
        ``UNAVAILABLE_TEXT`` is returned instead of raising.  A budget below one
        or a malformed endpoint URL yields the same string.
        """
        attempts = max_attempts if max_attempts is not None else self._max_attempts
        if attempts < 1:
            log.error("gemini.invalid_attempt_budget", attempts=attempts)
            return UNAVAILABLE_TEXT
        body = build_request_body(system_instruction, user_query)

        send = retry(
            max_attempts=attempts,
            base_delay=self._base_delay,
            max_delay=float("inf"),
            exceptions=(GeminiAPIError, httpx.HTTPError),
            backoff_on=(RateLimitedError,),
        )(self._post)

        try:
            if self._http_client is not None:
                payload = await send(self._http_client, body)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    payload = await send(client, body)
        except (GeminiAPIError, httpx.HTTPError, httpx.InvalidURL) as exc:
            log.error(
                "gemini.request_failed",
                attempts=attempts,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return UNAVAILABLE_TEXT

        text = extract_text(payload)
        if text is None:
            log.warning("gemini.empty_response")
            return NO_ANALYSIS_TEXT
        log.info("gemini.response_received", length=len(text))
        return text

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _post(self, client: httpx.AsyncClient, body: dict[str, Any]) -> Any:
        """Perform one attempt and return the decoded JSON payload."""
        response = await client.post(
            self._endpoint,
            params={"key": self._api_key},
            json=body,
            timeout=self._timeout,
        )
        if response.status_code == HTTPStatus.TOO_MANY_REQUESTS:
            raise RateLimitedError("Rate limited by analysis endpoint", status_code=429)
        if not response.is_success:
            raise GeminiAPIError(
                f"API call failed with status: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise GeminiAPIError("Response body is not valid JSON") from exc


def build_request_body(system_instruction: str, user_query: str) -> dict[str, Any]:
    """Return the ``generateContent`` JSON body."""
    return {
        "contents": [{"parts": [{"text": user_query}]}],
        "systemInstruction": {"parts": [{"text": system_instruction}]},
    }


def extract_text(payload: Any) -> str | None:
    """Return ``candidates[0].content.parts[0].text`` or ``None`` if absent or empty."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text:
        return None
    return text
