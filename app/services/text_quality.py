"""Heuristic gate deciding whether text is usable resume content.

Checks run in a fixed order and the first failing check decides the verdict.
The function is pure: the same text and policy always give the same verdict.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Literal

from app.core.config.thresholds import validation_limit

ValidationReason = Literal[
    "too_short",
    "contains_binary_data",
    "too_many_special_chars",
    "lacks_resume_sections",
    "gibberish",
]

REASON_MESSAGES: dict[str, str] = {
    "too_short": "Resume text is too short or empty",
    "contains_binary_data": "Text contains PDF binary data or metadata",
    "too_many_special_chars": "Text contains too many special characters",
    "lacks_resume_sections": "Text lacks identifiable resume sections",
    "gibberish": "Text appears to be corrupted or unreadable",
}

# A real resume may contain one of these by accident, so several must match.
PDF_BINARY_PATTERNS = (
    re.compile(r"ReportLab", re.IGNORECASE),
    re.compile(r"%PDF-"),
    re.compile(r"/Type\s*/\w+"),
    re.compile(r"stream\s*\n"),
    re.compile(r"endstream"),
    re.compile(r"endobj"),
    re.compile(r"xref"),
    re.compile(r"trailer"),
    re.compile(r"/Filter\s*/"),
    re.compile(r"/Length\s*\d+"),
    re.compile(r"obj\s*<<"),
    re.compile(r"/FontDescriptor"),
    re.compile(r"/BaseFont"),
)

RESUME_SIGNALS = (
    re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+", re.MULTILINE),
    re.compile(r"\b[\w.-]+@[\w.-]+\.\w{2,}\b", re.IGNORECASE),
    re.compile(r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b"),
    re.compile(r"\b(linkedin|github|portfolio)\b", re.IGNORECASE),
    re.compile(
        r"\b(education|university|college|degree|bachelor|master|phd|b\.?tech|m\.?tech|bsc|msc|mba)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(skills?|technologies|tools|languages|frameworks)\b", re.IGNORECASE),
    re.compile(r"\b(projects?|portfolio)\b", re.IGNORECASE),
    re.compile(
        r"\b(experience|work|intern|internship|employment|job|position|role|company)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(certification|certificate|certified|achievement|award|accomplishment)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(summary|objective|profile|about)\b", re.IGNORECASE),
)

SPECIAL_CHAR_RE = re.compile(r"[^A-Za-z0-9_\s@.,:;()\-+/%#'\"!?&]")
LEADING_LETTER_RE = re.compile(r"^[A-Za-z]")
PLAIN_TOKEN_RE = re.compile(r"^[A-Za-z0-9@.\-+]+$")


@dataclass(frozen=True)
class ValidationPolicy:
    min_chars: int = 30
    binary_pattern_min_hits: int = 3
    max_special_char_ratio: float = 0.4
    min_resume_signals: int = 2
    gibberish_min_words: int = 10
    min_meaningful_ratio: float = 0.4

    @classmethod
    def from_config(cls) -> "ValidationPolicy":
        defaults = cls()
        return cls(**{name: validation_limit(name, value) for name, value in vars(defaults).items()})


@dataclass(frozen=True)
class ValidationVerdict:
    valid: bool
    reason: ValidationReason | None = None

    @property
    def message(self) -> str | None:
        if self.reason is None:
            return None
        return REASON_MESSAGES[self.reason]


def _reject(reason: ValidationReason) -> ValidationVerdict:
    return ValidationVerdict(valid=False, reason=reason)


def count_binary_patterns(text: str) -> int:
    return sum(1 for pattern in PDF_BINARY_PATTERNS if pattern.search(text))


def count_resume_signals(text: str) -> int:
    return sum(1 for pattern in RESUME_SIGNALS if pattern.search(text))


def special_char_ratio(text: str) -> float:
    return len(SPECIAL_CHAR_RE.findall(text)) / max(1, len(text))


def _is_meaningful_word(word: str) -> bool:
    return bool(LEADING_LETTER_RE.match(word) or PLAIN_TOKEN_RE.match(word))


def validate_resume_text(text: str | None, policy: ValidationPolicy | None = None) -> ValidationVerdict:
    policy = policy or ValidationPolicy.from_config()
    text = text or ""

    if len(text.strip()) < policy.min_chars:
        return _reject("too_short")

    if count_binary_patterns(text) >= policy.binary_pattern_min_hits:
        return _reject("contains_binary_data")

    if special_char_ratio(text) > policy.max_special_char_ratio:
        return _reject("too_many_special_chars")

    if count_resume_signals(text) < policy.min_resume_signals:
        return _reject("lacks_resume_sections")

    words = [word for word in text.split() if len(word) > 1]
    if len(words) > policy.gibberish_min_words:
        meaningful = sum(1 for word in words if _is_meaningful_word(word))
        if meaningful / len(words) < policy.min_meaningful_ratio:
            return _reject("gibberish")

    return ValidationVerdict(valid=True)
