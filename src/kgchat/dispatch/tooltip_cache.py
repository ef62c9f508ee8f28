"""Tooltip cache: memoized one-sentence explanations of highlighted terms."""

import asyncio
import logging

from kgchat.config import settings
from kgchat.llm import CompletionClient

logger = logging.getLogger(__name__)

TOOLTIP_PROMPT = "Provide a brief, one-sentence explanation of: {term}"


class TooltipCache:
    """
    Explanations keyed by the exact highlighted text.

    Keys are case and whitespace sensitive. Successful lookups are kept for
    the life of the process; failures are never cached, so the next lookup
    of the same term calls the service again.
    """

    def __init__(
        self,
        client: CompletionClient,
        max_tokens: int | None = None,
        fallback_reply: str | None = None,
    ) -> None:
        self.client = client
        self.max_tokens = max_tokens or settings.tooltip_max_tokens
        self.fallback_reply = fallback_reply or settings.tooltip_fallback_reply

        self._entries: dict[str, str] = {}
        # One in-flight lookup per term, shared by every caller asking for it
        self._pending: dict[str, asyncio.Task] = {}

    def __contains__(self, term: object) -> bool:
        return term in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def loading(self) -> bool:
        """True while any lookup is waiting on the service."""
        return bool(self._pending)

    def is_loading(self, term: str) -> bool:
        return term in self._pending

    def get(self, term: str) -> str | None:
        """Cached explanation without calling the service."""
        return self._entries.get(term)

    async def explain(self, term: str) -> str:
        """Explain a term, calling the service only on a cache miss.

        Concurrent lookups of the same uncached term wait on a single
        service call and all receive its result.
        """
        cached = self._entries.get(term)
        if cached is not None:
            logger.debug(f"Tooltip cache hit: {term[:40]!r}")
            return cached

        task = self._pending.get(term)
        if task is None:
            task = asyncio.get_running_loop().create_task(
                self._lookup(term),
                name=f"tooltip-{term[:40]}",
            )
            self._pending[term] = task
        else:
            logger.debug(f"Joining pending lookup: {term[:40]!r}")

        return await asyncio.shield(task)

    async def _lookup(self, term: str) -> str:
        try:
            explanation = await self.client.generate(
                TOOLTIP_PROMPT.format(term=term),
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(f"Explanation lookup failed for {term[:40]!r}: {e}")
            return self.fallback_reply
        finally:
            self._pending.pop(term, None)

        self._entries[term] = explanation
        return explanation
