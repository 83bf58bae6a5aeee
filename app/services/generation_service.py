# app/services/generation_service.py
"""OpenAI text generation gateway.

Wraps chat completions for the /api/ask route and for server-side helpers.
A fixed system message is always sent first, whatever the caller passes in.
"""

import logging
import time
from functools import lru_cache
from typing import AsyncIterator, Sequence

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field

from app.core.config import get_settings
from app.core.errors import GenerationError
from app.schemas.ask import ChatMessage

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant. Provide clear, concise, and helpful responses."


class GenerationOptions(BaseModel):
    """Every option the gateway understands, with its default."""

    model: str = Field(default="gpt-4o-mini", min_length=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, ge=1)
    system_prompt: str = SYSTEM_PROMPT


def build_messages(
    messages: Sequence[ChatMessage],
    system_prompt: str = SYSTEM_PROMPT,
) -> list[dict[str, str]]:
    """Prepend the system message; caller order is preserved."""
    return [{"role": "system", "content": system_prompt}] + [
        {"role": m.role, "content": m.content} for m in messages
    ]


class TextGenerationGateway:
    """LLM gateway for the OpenAI chat completions API.

    Provider errors never leave this class as raw OpenAI exceptions:
    they are logged here and re-raised as GenerationError.
    """

    def __init__(self, client: AsyncOpenAI, default_model: str = "gpt-4o-mini"):
        self.client = client
        self.default_model = default_model

    def default_options(self, model: str | None = None, **overrides) -> GenerationOptions:
        return GenerationOptions(model=model or self.default_model, **overrides)

    async def stream_completion(
        self,
        messages: Sequence[ChatMessage],
        options: GenerationOptions | None = None,
    ) -> AsyncIterator[str]:
        """Open a streaming completion and return an iterator of text chunks.

        The request is sent before this coroutine returns, so connection,
        auth and quota failures surface here as GenerationError while the
        HTTP response can still become a 500. Failures after the first
        chunk only end the stream early.

        The returned iterator is single-use.
        """
        options = options or self.default_options()
        logger.debug(
            "Opening stream: model=%s, messages=%d, max_tokens=%d",
            options.model, len(messages), options.max_tokens,
        )
        try:
            stream = await self.client.chat.completions.create(
                model=options.model,
                messages=build_messages(messages, options.system_prompt),
                temperature=options.temperature,
                max_tokens=options.max_tokens,
                stream=True,
            )
        except OpenAIError as exc:
            logger.exception("OpenAI stream request failed (model=%s)", options.model)
            raise GenerationError() from exc

        return self._iter_text(stream, options.model)

    async def _iter_text(self, stream, model: str) -> AsyncIterator[str]:
        start_time = time.time()
        chars = 0
        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    chars += len(delta)
                    yield delta
        except OpenAIError:
            # Headers are already sent; the client sees a truncated stream.
            logger.exception("OpenAI stream broke after %d chars (model=%s)", chars, model)
        finally:
            await stream.close()
            logger.info(
                "OpenAI stream finished: model=%s, duration=%.2fs, response=%d chars",
                model, time.time() - start_time, chars,
            )

    async def generate_completion(
        self,
        prompt: str,
        options: GenerationOptions | None = None,
    ) -> str:
        """Send a single user prompt and return the full response text.

        Raises:
            GenerationError: on any provider failure.
        """
        options = options or self.default_options(max_tokens=500)
        start_time = time.time()
        try:
            response = await self.client.chat.completions.create(
                model=options.model,
                messages=build_messages(
                    [ChatMessage(role="user", content=prompt)],
                    options.system_prompt,
                ),
                temperature=options.temperature,
                max_tokens=options.max_tokens,
            )
        except OpenAIError as exc:
            logger.exception("OpenAI completion failed (model=%s)", options.model)
            raise GenerationError() from exc

        text = response.choices[0].message.content or ""
        total_tokens = getattr(response.usage, "total_tokens", None) if response.usage else None
        logger.info(
            "OpenAI response: model=%s, duration=%.2fs, response=%d chars, tokens=%s",
            options.model, time.time() - start_time, len(text), total_tokens or "unknown",
        )
        return text


@lru_cache
def get_generation_gateway() -> TextGenerationGateway:
    """Process-wide gateway (FastAPI dependency)."""
    settings = get_settings()
    client = AsyncOpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        timeout=settings.ASK_MAX_DURATION_SECONDS,
        max_retries=0,
    )
    return TextGenerationGateway(client, default_model=settings.DEFAULT_MODEL)
