from __future__ import annotations

import logging
from typing import AsyncGenerator, Awaitable, Callable

from app.ai.factory import get_ai_client
from app.ai.types import GenerationBackendError
from app.schemas.resume import ImproveResumeRequest
from app.services.resume_prompts import build_improvement_messages
from app.services.text_quality import ValidationVerdict, validate_resume_text
from app.utils.sse import DONE_LINE, sse_data, sse_delta

logger = logging.getLogger(__name__)

INVALID_RESUME_MESSAGE = (
    "Resume text could not be extracted correctly from the uploaded PDF.\n\n"
    "Please upload a different PDF, a DOCX file, or paste the resume text manually."
)

DisconnectCheck = Callable[[], Awaitable[bool]]


class ResumeValidationError(ValueError):
    def __init__(self, verdict: ValidationVerdict):
        super().__init__(INVALID_RESUME_MESSAGE)
        self.verdict = verdict


async def _relay(
    first: str | None,
    tokens: AsyncGenerator[str, None],
    is_disconnected: DisconnectCheck | None,
) -> AsyncGenerator[str, None]:
    forwarded = 0
    try:
        if first:
            forwarded += 1
            yield sse_delta(first)
        async for token in tokens:
            if is_disconnected is not None and await is_disconnected():
                logger.info("resume_improve_client_disconnected chunks=%s", forwarded)
                return
            forwarded += 1
            yield sse_delta(token)
    except GenerationBackendError as exc:
        logger.warning("resume_improve_stream_failed status=%s chunks=%s: %s", exc.status_code, forwarded, exc)
        yield sse_data({"error": str(exc)})
    finally:
        await tokens.aclose()
    logger.info("resume_improve_completed chunks=%s", forwarded)
    yield DONE_LINE


async def open_improvement_stream(
    payload: ImproveResumeRequest,
    *,
    is_disconnected: DisconnectCheck | None = None,
) -> AsyncGenerator[str, None]:
    """Validate the resume, start generation and return the SSE relay.

    Every failure that should change the HTTP status (validation, unknown tool,
    missing configuration, backend 429/402) is raised here, before the first
    byte of the streamed response is sent.
    """
    verdict = validate_resume_text(payload.resume)
    if not verdict.valid:
        logger.info("resume_validation_failed reason=%s chars=%s", verdict.reason, len(payload.resume or ""))
        raise ResumeValidationError(verdict)

    messages = build_improvement_messages(
        payload.tool,
        payload.resume,
        job_role=payload.job_role,
        experience_level=payload.experience_level,
        industry=payload.industry,
    )
    client = get_ai_client()
    logger.info(
        "resume_improve_started tool=%s role=%s level=%s",
        payload.tool,
        payload.job_role,
        payload.experience_level,
    )

    tokens = client.stream(messages)
    try:
        first: str | None = await anext(tokens)
    except StopAsyncIteration:
        first = None
    except GenerationBackendError:
        await tokens.aclose()
        raise
    return _relay(first, tokens, is_disconnected)
