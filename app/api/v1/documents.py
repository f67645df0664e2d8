import asyncio
import logging

from fastapi import APIRouter, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.parsing import RawDocument, extract_document
from app.schemas.resume import ParseDocumentError, ParseDocumentResponse
from app.services.text_quality import validate_resume_text

router = APIRouter()
logger = logging.getLogger(__name__)

READ_CHUNK_BYTES = 64 * 1024
MANUAL_FALLBACK_HINT = "Please try a different file or paste your resume text manually."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ParseDocumentError(error=message).model_dump(),
    )


async def _read_upload(file: UploadFile) -> bytes | None:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/documents/parse",
    response_model=ParseDocumentResponse,
    responses={400: {"model": ParseDocumentError}, 413: {"model": ParseDocumentError}, 500: {"model": ParseDocumentError}},
)
@rate_limit()
async def parse_document(request: Request, file: UploadFile | None = File(default=None)):
    _ = request
    if file is None:
        return _error(status.HTTP_400_BAD_REQUEST, "No file provided")

    filename = file.filename or "uploaded-file"
    try:
        content = await _read_upload(file)
        if content is None:
            limit_mb = settings.max_upload_bytes // (1024 * 1024)
            return _error(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"File too large. Maximum allowed size is {limit_mb} MB.",
            )

        document = RawDocument(filename=filename, content=content, content_type=file.content_type)
        result = await asyncio.to_thread(extract_document, document)
    except Exception:
        logger.exception("document_parse_failed file=%s", filename)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to parse document")

    if not result.success:
        return _error(status.HTTP_400_BAD_REQUEST, result.error or "Failed to parse document")

    if settings.validate_extracted_text:
        verdict = validate_resume_text(result.text)
        if not verdict.valid:
            logger.info("document_text_rejected file=%s reason=%s", filename, verdict.reason)
            return _error(status.HTTP_400_BAD_REQUEST, f"{verdict.message}. {MANUAL_FALLBACK_HINT}")

    logger.info("document_parsed file=%s kind=%s chars=%s", filename, result.kind, result.char_count)
    return ParseDocumentResponse(text=result.text, char_count=result.char_count)
