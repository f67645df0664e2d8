from __future__ import annotations

import logging
from typing import Any

from app.core.config.thresholds import extraction_limit

from .docx import extract_docx_text
from .errors import DocumentExtractionError, TooShortError, UnsupportedFormatError
from .models import DocumentKind, ExtractionResult, RawDocument
from .pdf import extract_pdf_text

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Failed to parse document. Please copy and paste your resume text instead."
TOO_SHORT_MESSAGE = "Could not extract enough text. Please copy and paste your resume text instead."
UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload a PDF, DOCX, or TXT file."


def _decode_txt(content: bytes) -> tuple[str, dict[str, Any]]:
    for encoding in ("utf-8", "utf-16", "latin-1"):
        try:
            return content.decode(encoding), {"encoding": encoding}
        except UnicodeDecodeError:
            continue
    return content.decode("latin-1", errors="replace"), {"encoding": "latin-1"}


def _extract(kind: DocumentKind, content: bytes) -> tuple[str, dict[str, Any]]:
    if kind == "pdf":
        return extract_pdf_text(content)
    if kind == "docx":
        text, paragraph_count = extract_docx_text(content)
        return text, {"paragraphs": paragraph_count}
    if kind == "txt":
        text, details = _decode_txt(content)
        return text.strip(), details
    raise UnsupportedFormatError(UNSUPPORTED_MESSAGE)


def extract_document(document: RawDocument) -> ExtractionResult:
    kind = document.kind
    logger.info(
        "document_extraction_started file=%s kind=%s bytes=%s",
        document.filename,
        kind,
        len(document.content),
    )
    try:
        if kind is None:
            raise UnsupportedFormatError(UNSUPPORTED_MESSAGE)
        text, details = _extract(kind, document.content)
        min_chars = extraction_limit("min_chars", 30)
        if len(text) < min_chars:
            raise TooShortError(TOO_SHORT_MESSAGE)
    except DocumentExtractionError as exc:
        logger.info("document_extraction_failed code=%s kind=%s: %s", exc.code, kind, exc)
        return ExtractionResult.failed(code=exc.code, message=str(exc), kind=kind)
    except Exception:
        logger.exception("document_extraction_crashed kind=%s file=%s", kind, document.filename)
        return ExtractionResult.failed(code="internal_error", message=INTERNAL_ERROR_MESSAGE, kind=kind)

    logger.info("document_extraction_succeeded kind=%s chars=%s", kind, len(text))
    return ExtractionResult.ok(text, kind=kind, details=details)


def extract_document_bytes(
    filename: str,
    content: bytes,
    content_type: str | None = None,
) -> ExtractionResult:
    return extract_document(RawDocument(filename=filename, content=content, content_type=content_type))
