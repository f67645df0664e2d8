import dataclasses
import os
import sys
import unittest
from io import BytesIO
from pathlib import Path
from unittest.mock import patch
from zipfile import ZipFile

# Keep API tests independent of the per-client request budget.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.main import app  # noqa: E402

RESUME_PDF = (
    b"%PDF-1.4\n1 0 obj\n<< /Length 200 >>\nstream\n"
    b"BT [(Jane Doe)] TJ [(jane.doe@example.com)] TJ "
    b"[(Skills: Python, SQL, Docker)] TJ [(Education: BSc Computer Science)] TJ ET"
    b"\nendstream\nendobj\n%%EOF\n"
)
RESUME_TXT = (
    "Jane Doe\n"
    "jane.doe@example.com | +1 555 222 1111\n"
    "Skills: Python, FastAPI, PostgreSQL\n"
    "Experience: Backend Engineer at Acme, 2019-2024\n"
)


def _docx(paragraphs: list[str]) -> bytes:
    body = "".join(f"<w:p><w:r><w:t>{text}</w:t></w:r></w:p>" for text in paragraphs)
    buffer = BytesIO()
    with ZipFile(buffer, "w") as archive:
        archive.writestr("word/document.xml", f"<w:document><w:body>{body}</w:body></w:document>")
    return buffer.getvalue()


class DocumentsApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        limiter.enabled = False
        cls.client = TestClient(app)

    def _upload(self, filename: str, content: bytes, content_type: str = "application/octet-stream"):
        return self.client.post("/v1/documents/parse", files={"file": (filename, content, content_type)})

    def test_pdf_upload_returns_text_and_count(self):
        response = self._upload("resume.pdf", RESUME_PDF, "application/pdf")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["charCount"], len(body["text"]))
        self.assertTrue(body["text"].startswith("Jane Doe jane.doe@example.com"))
        self.assertIn("\n\nEducation:", body["text"])

    def test_docx_upload(self):
        content = _docx(
            ["Jane Doe", "jane.doe@example.com", "Skills: Python, SQL", "Education: BSc Computer Science"]
        )
        response = self._upload("resume.docx", content)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["text"],
            "Jane Doe\n\njane.doe@example.com\n\nSkills: Python, SQL\n\nEducation: BSc Computer Science",
        )

    def test_txt_upload(self):
        response = self._upload("resume.txt", RESUME_TXT.encode("utf-8"), "text/plain")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["text"], RESUME_TXT.strip())

    def test_unsupported_extension(self):
        response = self._upload("photo.png", b"\x89PNG\r\n\x1a\n", "image/png")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(),
            {"success": False, "error": "Unsupported file type. Please upload a PDF, DOCX, or TXT file."},
        )

    def test_pdf_extension_without_signature(self):
        response = self._upload("resume.pdf", b"just some text pretending to be a pdf")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "File is not a valid PDF.")

    def test_too_little_text(self):
        response = self._upload("resume.pdf", b"%PDF-1.4\nBT (John Smith) Tj ET")
        self.assertEqual(response.status_code, 400)
        self.assertIn("Could not extract enough text", response.json()["error"])

    def test_missing_file(self):
        response = self.client.post("/v1/documents/parse", data={"note": "no file here"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "error": "No file provided"})

    def test_extracted_text_is_validated(self):
        prose = b"The quick brown fox jumps over the lazy dog again and again"
        response = self._upload("notes.txt", prose, "text/plain")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["error"],
            "Text lacks identifiable resume sections. "
            "Please try a different file or paste your resume text manually.",
        )

        relaxed = dataclasses.replace(settings, validate_extracted_text=False)
        with patch("app.api.v1.documents.settings", relaxed):
            response = self._upload("notes.txt", prose, "text/plain")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["charCount"], len(prose))

    def test_oversized_upload(self):
        limited = dataclasses.replace(settings, max_upload_bytes=1024 * 1024)
        with patch("app.api.v1.documents.settings", limited):
            response = self._upload("resume.txt", b"a" * (1024 * 1024 + 1), "text/plain")
        self.assertEqual(response.status_code, 413)
        self.assertEqual(response.json()["error"], "File too large. Maximum allowed size is 1 MB.")

    def test_unexpected_failure_is_a_500(self):
        with patch("app.api.v1.documents.extract_document", side_effect=RuntimeError("boom")):
            response = self._upload("resume.pdf", RESUME_PDF, "application/pdf")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "error": "Failed to parse document"})


if __name__ == "__main__":
    unittest.main()
