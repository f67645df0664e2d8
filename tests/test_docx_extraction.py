import sys
import unittest
from io import BytesIO
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.parsing import InvalidArchiveError, extract_docx_text  # noqa: E402

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"


def _docx(body: str | None, *, wrap: bool = True) -> bytes:
    buffer = BytesIO()
    with ZipFile(buffer, "w", ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        if body is not None:
            xml = body
            if wrap:
                xml = (
                    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\r\n'
                    f'<w:document xmlns:w="{W_NS}"><w:body>{body}<w:sectPr/></w:body></w:document>'
                )
            archive.writestr("word/document.xml", xml)
    return buffer.getvalue()


class DocxExtractionTests(unittest.TestCase):
    def test_paragraphs_are_separated_by_one_blank_line(self):
        content = _docx("<w:p><w:t>Jane Doe</w:t></w:p><w:p><w:t>Engineer</w:t></w:p>", wrap=False)
        text, paragraphs = extract_docx_text(content)
        self.assertEqual(text, "Jane Doe\n\nEngineer")
        self.assertEqual(paragraphs, 2)

    def test_full_document_with_runs_and_properties(self):
        body = (
            '<w:p><w:pPr><w:pStyle w:val="Title"/></w:pPr>'
            "<w:r><w:t>Jane</w:t></w:r>"
            '<w:r><w:t xml:space="preserve"> Doe</w:t></w:r></w:p>'
            "<w:p><w:r><w:t>Backend</w:t><w:tab/><w:t>Engineer</w:t></w:r></w:p>"
        )
        text, _ = extract_docx_text(_docx(body))
        self.assertEqual(text, "Jane Doe\n\nBackend Engineer")

    def test_empty_paragraphs_collapse_to_single_blank_line(self):
        body = "<w:p/><w:p/><w:p><w:t>A</w:t></w:p><w:p/><w:p/><w:p/><w:p><w:t>B</w:t></w:p>"
        text, _ = extract_docx_text(_docx(body))
        self.assertEqual(text, "A\n\nB")

    def test_xml_entities_are_unescaped_once(self):
        body = "<w:p><w:r><w:t>R&amp;D &lt;Team&gt; &quot;Lead&quot; &apos;24 &amp;lt;</w:t></w:r></w:p>"
        text, _ = extract_docx_text(_docx(body))
        self.assertEqual(text, "R&D <Team> \"Lead\" '24 &lt;")

    def test_line_breaks_inside_paragraph(self):
        body = "<w:p><w:r><w:t>Python</w:t><w:br/><w:t>SQL</w:t></w:r></w:p>"
        text, _ = extract_docx_text(_docx(body))
        self.assertEqual(text, "Python\nSQL")

    def test_missing_document_entry_is_invalid_archive(self):
        with self.assertRaises(InvalidArchiveError) as ctx:
            extract_docx_text(_docx(None))
        self.assertEqual(ctx.exception.code, "invalid_archive")

    def test_oversized_document_xml_is_rejected_before_reading(self):
        body = "<w:p><w:t>Jane</w:t></w:p>" + " " * 64 * 1024
        content = _docx(body)
        self.assertLess(len(content), 4096)

        with self.assertRaises(InvalidArchiveError) as ctx:
            extract_docx_text(content, max_xml_bytes=16 * 1024)
        self.assertEqual(ctx.exception.code, "invalid_archive")
        self.assertIn("too large", str(ctx.exception))

        text, _ = extract_docx_text(content, max_xml_bytes=128 * 1024)
        self.assertEqual(text, "Jane")

    def test_non_zip_payload_is_invalid_archive(self):
        with self.assertRaises(InvalidArchiveError):
            extract_docx_text(b"this is not a zip archive")


if __name__ == "__main__":
    unittest.main()
