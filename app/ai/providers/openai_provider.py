from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional, Sequence

from openai import APIConnectionError, APIError, APIStatusError, AsyncOpenAI

from app.ai.types import ChatMessage, GenerationBackendError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 2,
        temperature: float = 0.4,
    ):
        self._model = model
        self._temperature = temperature
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    async def stream(
        self, messages: Sequence[ChatMessage]
    ) -> AsyncGenerator[str, None]:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        try:
            stream = await self._client.chat.completions.create(
                model=self._model,
                messages=payload,
                temperature=self._temperature,
                stream=True,
            )
        except APIStatusError as exc:
            logger.warning("generation_backend_status model=%s status=%s", self._model, exc.status_code)
            raise GenerationBackendError(
                f"AI service error: {exc.status_code}", status_code=exc.status_code
            ) from exc
        except APIConnectionError as exc:
            logger.warning("generation_backend_unreachable model=%s: %s", self._model, exc)
            raise GenerationBackendError("AI service is unreachable", status_code=502) from exc

        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                text = getattr(chunk.choices[0].delta, "content", None)
                if text:
                    yield text
        except APIError as exc:
            logger.warning("generation_backend_stream_failed model=%s: %s", self._model, exc)
            raise GenerationBackendError("AI stream was interrupted", status_code=502) from exc
        finally:
            await stream.close()
