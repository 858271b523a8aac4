"""Claude completion client for article analysis."""

import logging
import os
import time

import anthropic

from newsai.data import APICallUsage, Usage

DEFAULT_MODEL = "claude-3-5-haiku-20241022"

logger = logging.getLogger(__name__)


class ClaudeCompletionClient:
    """Send analysis prompts to Claude and return the text response.

    Args:
        model: Anthropic model ID to use.
        api_key: API key (defaults to ANTHROPIC_API_KEY env var).
        max_tokens: Response token limit.
        temperature: Sampling temperature; kept low for consistent analyses.
        client: Shared ``AsyncAnthropic`` client. When omitted one is created
            and owned by this instance.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        *,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self.model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._owns_client = client is None
        if client is None:
            resolved_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
            client = anthropic.AsyncAnthropic(api_key=resolved_key)
        self._client = client

    async def complete(self, prompt: str) -> tuple[str, Usage]:
        t0 = time.monotonic()
        response = await self._client.messages.create(
            model=self.model,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        logger.debug("Claude API response time: %.0fms", (time.monotonic() - t0) * 1000)

        usage = Usage(
            api_calls=[
                APICallUsage(
                    model=self.model,
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                ),
            ],
        )

        text = ""
        for block in response.content:
            if hasattr(block, "text"):
                text += block.text
        return (text, usage)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.close()
