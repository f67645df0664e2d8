from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

DocumentKind = Literal["pdf", "docx", "txt"]
FragmentStrategy = Literal["text_block", "direct_show", "ascii_run", "hex_string"]

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_EXTENSION_KINDS: dict[str, DocumentKind] = {
    "pdf": "pdf",
    "docx": "docx",
    "txt": "txt",
}

_CONTENT_TYPE_KINDS: dict[str, DocumentKind] = {
    "application/pdf": "pdf",
    DOCX_CONTENT_TYPE: "docx",
    "text/plain": "txt",
}


@dataclass(frozen=True)
class RawDocument:
    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        name = (self.filename or "").strip().lower()
        return name.rsplit(".", 1)[-1] if "." in name else ""

    @property
    def kind(self) -> DocumentKind | None:
        by_extension = _EXTENSION_KINDS.get(self.extension)
        if by_extension:
            return by_extension
        mime = (self.content_type or "").split(";")[0].strip().lower()
        return _CONTENT_TYPE_KINDS.get(mime)


@dataclass(frozen=True)
class TextFragment:
    text: str
    strategy: FragmentStrategy


@dataclass(frozen=True)
class ExtractionResult:
    text: str = ""
    char_count: int = 0
    kind: DocumentKind | None = None
    error_code: str | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.error_code is None

    @classmethod
    def ok(cls, text: str, *, kind: DocumentKind, details: dict[str, Any] | None = None) -> "ExtractionResult":
        return cls(text=text, char_count=len(text), kind=kind, details=details or {})

    @classmethod
    def failed(
        cls,
        *,
        code: str,
        message: str,
        kind: DocumentKind | None = None,
    ) -> "ExtractionResult":
        return cls(kind=kind, error_code=code, error=message)
