"""Heuristic text recovery from raw PDF bytes.

This is not a PDF parser. The content is decoded as Latin-1 and scanned by a
fixed pipeline of candidate extractors, each returning zero or more text
fragments. Compressed object streams are never inflated, so PDFs whose text
lives only inside ``/FlateDecode`` streams yield little or nothing and are
rejected further up by the length floor or the noise-ratio gate.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Any, Callable, Sequence

from app.core.config.thresholds import extraction_limit

from .errors import CorruptedOutputError, NotAPdfError
from .models import FragmentStrategy, TextFragment

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF"

_LITERAL = r"\(((?:[^()\\]|\\.)*)\)"

# Lazy: a literal containing a standalone "ET" ends the block early; direct_show
# still recovers such strings.
TEXT_BLOCK_RE = re.compile(r"\bBT\b(.*?)\bET\b", re.S)
SHOW_LITERAL_RE = re.compile(_LITERAL + r"\s*Tj", re.S)
SHOW_ARRAY_RE = re.compile(r"\[([^\[\]]*)\]\s*TJ", re.S)
LITERAL_RE = re.compile(_LITERAL, re.S)
ASCII_RUN_RE = re.compile(r"\(([A-Za-z][A-Za-z0-9\s.,@\-+:;'\"/()]{2,})\)")
HEX_STRING_RE = re.compile(r"<([0-9A-Fa-f\s]+)>")
ESCAPE_RE = re.compile(r"\\([0-7]{1,3}|.)", re.S)
CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
LETTER_RE = re.compile(r"[A-Za-z]")
LETTER_PAIR_RE = re.compile(r"[A-Za-z]{2,}")

_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\"}

NOISE_PATTERNS = (
    re.compile(r"ReportLab Generated PDF document", re.IGNORECASE),
    re.compile(r"www\.reportlab\.com", re.IGNORECASE),
    re.compile(r"\bstream\b", re.IGNORECASE),
    re.compile(r"\bendobj\b", re.IGNORECASE),
)

SECTION_HEADERS = (
    "SUMMARY",
    "OBJECTIVE",
    "EXPERIENCE",
    "EDUCATION",
    "SKILLS",
    "PROJECTS",
    "ACHIEVEMENTS",
    "CERTIFICATIONS",
    "CONTACT",
    "PROFILE",
    "ABOUT",
)

# Trailing whitespace is a lookahead so adjacent headers each get their own break.
SECTION_HEADER_RE = re.compile(
    r"\s+\b((?:" + "|".join(SECTION_HEADERS) + r")\b:?)(?=\s)",
    re.IGNORECASE,
)

# Anything outside this set counts as noise in the final output.
NOISE_CHAR_RE = re.compile(r"[^A-Za-z0-9_\s@.,:;()\-+/%'\"!?&]")


@dataclass(frozen=True)
class CandidateExtractor:
    name: FragmentStrategy
    scan: Callable[[str], list[str]]

    def extract(self, source: str) -> list[TextFragment]:
        return [TextFragment(text=text, strategy=self.name) for text in self.scan(source)]


def _decode_escape(match: re.Match[str]) -> str:
    token = match.group(1)
    if token[0] in "01234567":
        return chr(int(token, 8) & 0xFF)
    return _SIMPLE_ESCAPES.get(token, token)


def decode_pdf_string(raw: str) -> str:
    """Decode the body of a parenthesised PDF literal into plain text."""
    decoded = ESCAPE_RE.sub(_decode_escape, raw)
    return CONTROL_CHARS_RE.sub(" ", decoded).strip()


def _scan_text_blocks(source: str) -> list[str]:
    found: list[str] = []
    for block in TEXT_BLOCK_RE.finditer(source):
        body = block.group(1)
        for match in SHOW_LITERAL_RE.finditer(body):
            decoded = decode_pdf_string(match.group(1))
            if decoded:
                found.append(decoded)
        for array in SHOW_ARRAY_RE.finditer(body):
            for match in LITERAL_RE.finditer(array.group(1)):
                decoded = decode_pdf_string(match.group(1))
                if decoded:
                    found.append(decoded)
    return found


def _scan_direct_show(source: str) -> list[str]:
    found: list[str] = []
    for match in SHOW_LITERAL_RE.finditer(source):
        decoded = decode_pdf_string(match.group(1))
        if decoded and LETTER_RE.search(decoded):
            found.append(decoded)
    return found


def _scan_ascii_runs(source: str) -> list[str]:
    found: list[str] = []
    for match in ASCII_RUN_RE.finditer(source):
        text = match.group(1).strip()
        if len(text) >= 2 and LETTER_PAIR_RE.search(text):
            found.append(text)
    return found


def _scan_hex_strings(source: str) -> list[str]:
    max_digits = extraction_limit("pdf_max_hex_digits", 500)
    found: list[str] = []
    for match in HEX_STRING_RE.finditer(source):
        digits = re.sub(r"\s", "", match.group(1))
        if len(digits) < 4 or len(digits) % 2 or len(digits) > max_digits:
            continue
        chars = []
        for index in range(0, len(digits), 2):
            code = int(digits[index : index + 2], 16)
            if 32 <= code < 127:
                chars.append(chr(code))
        decoded = "".join(chars)
        if len(decoded) >= 2 and LETTER_PAIR_RE.search(decoded):
            found.append(decoded)
    return found


PDF_STRATEGIES: tuple[CandidateExtractor, ...] = (
    CandidateExtractor("text_block", _scan_text_blocks),
    CandidateExtractor("direct_show", _scan_direct_show),
    CandidateExtractor("ascii_run", _scan_ascii_runs),
    CandidateExtractor("hex_string", _scan_hex_strings),
)


def collect_fragments(
    source: str,
    strategies: Sequence[CandidateExtractor] = PDF_STRATEGIES,
) -> list[TextFragment]:
    fragments: list[TextFragment] = []
    for strategy in strategies:
        fragments.extend(strategy.extract(source))
    return fragments


def dedupe_fragments(fragments: Sequence[TextFragment]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []
    for fragment in fragments:
        normalized = fragment.text.strip()
        key = normalized.lower()
        if normalized and key not in seen:
            seen.add(key)
            unique.append(normalized)
    return unique


def _assemble_text(parts: list[str]) -> str:
    text = " ".join(parts).replace("\x00", "")
    text = re.sub(r"\s+", " ", text).strip()

    for pattern in NOISE_PATTERNS:
        text = pattern.sub("", text)

    text = SECTION_HEADER_RE.sub(r"\n\n\1\n", f" {text} ")

    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def noise_ratio(text: str) -> float:
    return len(NOISE_CHAR_RE.findall(text)) / max(1, len(text))


def extract_pdf_text(content: bytes) -> tuple[str, dict[str, Any]]:
    if content[:4] != PDF_SIGNATURE:
        raise NotAPdfError("File is not a valid PDF.")

    source = content.decode("latin-1")
    fragments = collect_fragments(source)
    counts: dict[str, int] = {strategy.name: 0 for strategy in PDF_STRATEGIES}
    for fragment in fragments:
        counts[fragment.strategy] = counts.get(fragment.strategy, 0) + 1

    unique = dedupe_fragments(fragments)
    text = _assemble_text(unique)
    logger.debug(
        "pdf_fragments_collected bytes=%s fragments=%s unique=%s counts=%s",
        len(content),
        len(fragments),
        len(unique),
        counts,
    )

    max_ratio = extraction_limit("pdf_max_special_char_ratio", 0.35)
    ratio = noise_ratio(text)
    if ratio > max_ratio:
        logger.info("pdf_output_rejected noise_ratio=%.2f chars=%s", ratio, len(text))
        raise CorruptedOutputError(
            "PDF text appears corrupted. Please copy and paste your resume text instead."
        )

    return text, {"fragments": counts, "unique_fragments": len(unique)}
