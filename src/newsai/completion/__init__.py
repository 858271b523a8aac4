"""AI completion clients."""

from newsai.completion.base import CompletionClient
from newsai.completion.claude import DEFAULT_MODEL, ClaudeCompletionClient

__all__ = [
    "DEFAULT_MODEL",
    "ClaudeCompletionClient",
    "CompletionClient",
]
