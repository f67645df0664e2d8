import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, StreamingResponse

from app.ai.types import AIConfigurationError, GenerationBackendError
from app.core.rate_limit import rate_limit
from app.schemas.resume import (
    ImproveErrorResponse,
    ImproveResumeRequest,
    ToolDescriptor,
    ToolsCatalogResponse,
)
from app.services.resume_improver import ResumeValidationError, open_improvement_stream
from app.services.resume_prompts import (
    EXPERIENCE_LEVELS,
    IMPROVEMENT_TOOLS,
    INDUSTRIES,
    JOB_ROLES,
    UnknownToolError,
)

router = APIRouter()
logger = logging.getLogger(__name__)

RELAYED_BACKEND_ERRORS = {
    status.HTTP_429_TOO_MANY_REQUESTS: "Rate limit exceeded. Please try again in a moment.",
    status.HTTP_402_PAYMENT_REQUIRED: "AI credits exhausted. Please add funds to continue.",
}


def _error(status_code: int, message: str, *, validation_error: bool | None = None) -> JSONResponse:
    body = ImproveErrorResponse(error=message, validation_error=validation_error)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/resume/tools", response_model=ToolsCatalogResponse)
async def list_improvement_tools():
    return ToolsCatalogResponse(
        tools=[ToolDescriptor(id=tool.id, title=tool.title, description=tool.description) for tool in IMPROVEMENT_TOOLS],
        job_roles=list(JOB_ROLES),
        industries=list(INDUSTRIES),
        experience_levels=list(EXPERIENCE_LEVELS),
    )


@router.post(
    "/resume/improve",
    responses={
        400: {"model": ImproveErrorResponse},
        402: {"model": ImproveErrorResponse},
        429: {"model": ImproveErrorResponse},
        500: {"model": ImproveErrorResponse},
    },
)
@rate_limit()
async def improve_resume(request: Request, payload: ImproveResumeRequest):
    try:
        stream = await open_improvement_stream(payload, is_disconnected=request.is_disconnected)
    except ResumeValidationError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc), validation_error=True)
    except UnknownToolError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except AIConfigurationError as exc:
        logger.error("resume_improve_unconfigured: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "AI service is not configured")
    except GenerationBackendError as exc:
        relayed = RELAYED_BACKEND_ERRORS.get(exc.status_code)
        if relayed:
            return _error(exc.status_code, relayed)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
    except Exception:
        logger.exception("resume_improve_failed tool=%s", payload.tool)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")

    return StreamingResponse(
        stream,
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
