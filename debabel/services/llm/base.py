"""Abstract LLM provider interface.

All LLM implementations must inherit from this class.
Business logic never imports a concrete provider directly: providers are
handed out by a per-request ModelClient built from the caller's own key
(see debabel/services/llm/factory.py).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Sequence


@dataclass(frozen=True)
class Tool:
    """A function the model may call during generation."""

    name: str
    description: str
    parameters: dict[str, Any]  # JSON schema of the keyword arguments
    execute: Callable[..., Awaitable[Any]]

    def to_openai(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass(frozen=True)
class ToolResult:
    tool_name: str
    arguments: dict[str, Any]
    result: Any


@dataclass(frozen=True)
class LLMResponse:
    """Structured response from an LLM call, including token usage."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0
    reasoning: str | None = None
    tool_results: tuple[ToolResult, ...] = field(default_factory=tuple)


def prompt_messages(prompt: str) -> list[dict[str, Any]]:
    """Wrap a bare prompt as a single-user-message history."""
    return [{"role": "user", "content": prompt}]


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def generate(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str,
        tools: Sequence[Tool] | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate a complete response from the LLM in a single step.

        Args:
            messages: Conversation history in chat-completions format.
            system_prompt: System-level instructions for the model.
            tools: Tools the model may call. Calls are executed once and
                recorded on the response; there is no follow-up step.
            max_tokens: Maximum tokens in the generated response.
            temperature: Sampling temperature, or None for the model default.

        Returns:
            LLMResponse with text content and token usage counts.

        Raises:
            RuntimeError: If the LLM call fails after timeout or API error.
        """
        ...

    @abstractmethod
    async def stream(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str,
        tools: Sequence[Tool] | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """Stream response text from the LLM.

        Yields string deltas as they arrive. Caller is responsible for
        concatenating them into the full response.

        Raises:
            RuntimeError: If the LLM streaming call fails.
        """
        ...
        # Unreachable; makes this an async generator for type checkers
        yield ""  # pragma: no cover
