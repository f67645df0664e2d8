from __future__ import annotations

from io import BytesIO
import re
from zipfile import BadZipFile, ZipFile

from app.core.config.thresholds import extraction_limit

from .errors import InvalidArchiveError

DOCUMENT_ENTRY = "word/document.xml"

PARAGRAPH_START_RE = re.compile(r"<w:p(?:\s[^>]*)?/?>")
TEXT_RUN_RE = re.compile(r"<w:t(?:\s[^>]*)?>([^<]*)</w:t>")
TAB_RE = re.compile(r"<w:tab(?:\s[^>]*)?/>")
BREAK_RE = re.compile(r"<w:(?:br|cr)(?:\s[^>]*)?/>")
TAG_RE = re.compile(r"<[^>]+>")
ENTITY_RE = re.compile(r"&(lt|gt|amp|quot|apos);")

XML_ENTITIES = {"lt": "<", "gt": ">", "amp": "&", "quot": '"', "apos": "'"}


def _read_document_xml(content: bytes, max_xml_bytes: int) -> str:
    try:
        with ZipFile(BytesIO(content)) as archive:
            if DOCUMENT_ENTRY not in archive.namelist():
                raise InvalidArchiveError("Invalid DOCX file: document.xml not found.")
            # Reads never return more than the declared uncompressed size.
            if archive.getinfo(DOCUMENT_ENTRY).file_size > max_xml_bytes:
                raise InvalidArchiveError("Invalid DOCX file: document content is too large.")
            raw = archive.read(DOCUMENT_ENTRY)
    except BadZipFile as exc:
        raise InvalidArchiveError("Invalid DOCX file: not a ZIP archive.") from exc
    return raw.decode("utf-8", errors="replace")


def extract_docx_text(content: bytes, *, max_xml_bytes: int | None = None) -> tuple[str, int]:
    if max_xml_bytes is None:
        max_xml_bytes = extraction_limit("docx_max_xml_bytes", 20 * 1024 * 1024)
    xml = _read_document_xml(content, max_xml_bytes)
    # Raw newlines between tags carry no meaning in WordprocessingML.
    xml = xml.replace("\r", "").replace("\n", "")
    paragraph_count = len(PARAGRAPH_START_RE.findall(xml))

    text = PARAGRAPH_START_RE.sub("\n\n", xml)
    text = TEXT_RUN_RE.sub(lambda match: match.group(1), text)
    text = TAB_RE.sub(" ", text)
    text = BREAK_RE.sub("\n", text)
    text = TAG_RE.sub("", text)
    text = ENTITY_RE.sub(lambda match: XML_ENTITIES[match.group(1)], text)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip(), paragraph_count
