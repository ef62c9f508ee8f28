"""Client for the completion service.

The service takes ``{"messages": [...], "max_tokens": N}`` and answers with
``{"content": [{"text": "..."}]}``. Every deviation from that (network error,
HTTP error status, malformed JSON, missing field) surfaces as a single
CompletionError so callers can fall back uniformly.
"""

import asyncio
import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from kgchat.config import settings
from kgchat.errors import CompletionError

logger = logging.getLogger(__name__)


def extract_reply_text(data: Any) -> str:
    """Pull the reply string out of a completion response body.

    Raises:
        CompletionError: If the body does not carry content[0].text as a string
    """
    try:
        text = data["content"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise CompletionError(f"Malformed completion response: {data!r}") from e
    if not isinstance(text, str):
        raise CompletionError(f"Completion text is not a string: {text!r}")
    return text


class CompletionClient:
    """Async-wrapped client for the completion endpoint using requests."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        max_concurrent: int | None = None,
    ) -> None:
        self.url = url or settings.completion_url
        self.api_key = api_key or settings.completion_api_key
        self.timeout = timeout or settings.completion_timeout
        self.max_concurrent = max_concurrent or settings.completion_max_concurrent

        self._semaphore = asyncio.Semaphore(self.max_concurrent)
        self._session: requests.Session | None = None

    def _get_session(self) -> requests.Session:
        """Get or create requests session with connection pooling."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Content-Type": "application/json"})
            if self.api_key:
                self._session.headers["Authorization"] = f"Bearer {self.api_key}"
            # Never retry, a failed turn is final
            adapter = HTTPAdapter(
                pool_connections=self.max_concurrent,
                pool_maxsize=self.max_concurrent * 2,
                max_retries=0,
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _sync_complete(self, messages: list[dict[str, str]], max_tokens: int) -> str:
        """Synchronous completion request (runs in thread)."""
        session = self._get_session()

        payload = {
            "messages": messages,
            "max_tokens": max_tokens,
        }

        response = session.post(self.url, json=payload, timeout=self.timeout)
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise CompletionError(f"Completion response is not JSON: {response.text[:200]}") from e

        return extract_reply_text(data)

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
    ) -> str:
        """Send the full message history and return the reply text.

        Raises:
            CompletionError: On any transport or format failure
        """
        async with self._semaphore:
            try:
                # Run sync request in thread pool to not block event loop
                return await asyncio.to_thread(
                    self._sync_complete,
                    messages,
                    max_tokens or settings.chat_max_tokens,
                )
            except CompletionError:
                raise
            except requests.HTTPError as e:
                status = e.response.status_code if e.response is not None else "?"
                logger.error(f"Completion API error: {status}")
                raise CompletionError(f"Completion API returned {status}") from e
            except requests.RequestException as e:
                logger.error(f"Completion request failed: {e}")
                raise CompletionError(str(e)) from e

    async def generate(self, prompt: str, max_tokens: int | None = None) -> str:
        """Single-turn completion for a bare prompt."""
        return await self.complete(
            [{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
        )

