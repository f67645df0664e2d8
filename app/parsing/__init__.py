from .docx import extract_docx_text
from .errors import (
    CorruptedOutputError,
    DocumentExtractionError,
    InvalidArchiveError,
    NotAPdfError,
    TooShortError,
    UnsupportedFormatError,
)
from .models import DocumentKind, ExtractionResult, RawDocument, TextFragment
from .parse import extract_document, extract_document_bytes
from .pdf import PDF_STRATEGIES, CandidateExtractor, decode_pdf_string, extract_pdf_text

__all__ = [
    "CandidateExtractor",
    "CorruptedOutputError",
    "DocumentExtractionError",
    "DocumentKind",
    "ExtractionResult",
    "InvalidArchiveError",
    "NotAPdfError",
    "PDF_STRATEGIES",
    "RawDocument",
    "TextFragment",
    "TooShortError",
    "UnsupportedFormatError",
    "decode_pdf_string",
    "extract_document",
    "extract_document_bytes",
    "extract_docx_text",
    "extract_pdf_text",
]
