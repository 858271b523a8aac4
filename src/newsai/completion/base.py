from typing import Protocol

from newsai.data import Usage


class CompletionClient(Protocol):
    """Interface for the AI provider that analyzes articles."""

    model: str

    async def complete(self, prompt: str) -> tuple[str, Usage]:
        """Submit a prompt and return the raw response text.

        Args:
            prompt: Complete instruction, sent as a single user message.

        Returns:
            Tuple of (response text, usage).
        """
        ...
