from __future__ import annotations


class DocumentExtractionError(ValueError):
    code = "extraction_failed"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code:
            self.code = code


class UnsupportedFormatError(DocumentExtractionError):
    code = "unsupported_format"


class InvalidArchiveError(DocumentExtractionError):
    code = "invalid_archive"


class NotAPdfError(DocumentExtractionError):
    code = "not_a_pdf"


class CorruptedOutputError(DocumentExtractionError):
    code = "corrupted_output"


class TooShortError(DocumentExtractionError):
    code = "too_short"
