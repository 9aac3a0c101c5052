"""OpenAI LLM provider implementation.

Uses the official openai SDK (AsyncOpenAI, chat completions API).
One provider wraps one model on a client that was built from the
caller's own API key; providers are never shared across requests.
All external calls have a timeout and structured error logging.
"""

import asyncio
import json
import re
from typing import Any, AsyncIterator, Sequence

import structlog
from openai import AsyncOpenAI

from debabel.core.config import settings
from debabel.services.llm.base import LLMProvider, LLMResponse, Tool, ToolResult

logger = structlog.get_logger(__name__)


def extract_reasoning(text: str, tag: str) -> tuple[str, str | None]:
    """Split ``<tag>...</tag>`` sections out of generated text.

    Returns (text without the tagged sections, joined reasoning or None).
    """
    pattern = re.compile(rf"<{tag}>(.*?)</{tag}>", re.DOTALL)
    sections = [s.strip() for s in pattern.findall(text)]
    if not sections:
        return text, None
    return pattern.sub("", text).strip(), "\n".join(sections)


class OpenAIProvider(LLMProvider):
    """A single OpenAI chat model bound to one client."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        reasoning_tag: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._reasoning_tag = reasoning_tag
        self._timeout = timeout_seconds or settings.llm_timeout_seconds

    @property
    def model(self) -> str:
        return self._model

    def _request_kwargs(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str,
        tools: Sequence[Tool] | None,
        max_tokens: int | None,
        temperature: float | None,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "system", "content": system_prompt}, *messages],
        }
        if tools:
            kwargs["tools"] = [t.to_openai() for t in tools]
        if max_tokens is not None:
            kwargs["max_completion_tokens"] = max_tokens
        if temperature is not None:
            kwargs["temperature"] = temperature
        return kwargs

    async def generate(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str,
        tools: Sequence[Tool] | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate a complete response in one completion call."""
        kwargs = self._request_kwargs(
            messages, system_prompt, tools, max_tokens, temperature
        )
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(**kwargs),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(
                "openai_generate_timeout",
                model=self._model,
                message_count=len(messages),
            )
            raise RuntimeError("OpenAI generate timed out") from e
        except Exception as e:
            logger.error(
                "openai_generate_failed",
                error=str(e),
                model=self._model,
                message_count=len(messages),
            )
            raise RuntimeError(f"OpenAI generate failed: {e}") from e

        choice = response.choices[0].message
        text = choice.content or ""
        reasoning = None
        if self._reasoning_tag:
            text, reasoning = extract_reasoning(text, self._reasoning_tag)

        tool_results = await self._run_tool_calls(choice.tool_calls, tools or ())

        usage = response.usage
        result = LLMResponse(
            text=text,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            reasoning=reasoning,
            tool_results=tool_results,
        )
        logger.debug(
            "openai_generate_ok",
            model=self._model,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            tool_calls=len(tool_results),
        )
        return result

    async def stream(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str,
        tools: Sequence[Tool] | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """Stream content deltas from the chat completions API."""
        kwargs = self._request_kwargs(
            messages, system_prompt, tools, max_tokens, temperature
        )
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(stream=True, **kwargs),
                timeout=self._timeout,
            )
            async for chunk in response:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
            logger.debug("openai_stream_ok", model=self._model)
        except Exception as e:
            logger.error(
                "openai_stream_failed",
                error=str(e),
                model=self._model,
                message_count=len(messages),
            )
            raise RuntimeError(f"OpenAI stream failed: {e}") from e

    async def _run_tool_calls(
        self, tool_calls: Any, tools: Sequence[Tool]
    ) -> tuple[ToolResult, ...]:
        if not tool_calls:
            return ()
        by_name = {t.name: t for t in tools}
        results: list[ToolResult] = []
        for call in tool_calls:
            name = call.function.name
            tool = by_name.get(name)
            try:
                arguments = json.loads(call.function.arguments or "{}")
            except json.JSONDecodeError:
                arguments = {}
            if tool is None:
                logger.warning("openai_unknown_tool_call", tool=name)
                continue
            try:
                output = await tool.execute(**arguments)
            except Exception as e:
                logger.warning("tool_call_failed", tool=name, error=str(e))
                output = {"error": str(e)}
            logger.info("tool_call", tool=name)
            results.append(ToolResult(tool_name=name, arguments=arguments, result=output))
        return tuple(results)
