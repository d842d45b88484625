"""
Tests for PDF/DOCX text extraction
"""
import pytest

from conftest import make_docx, make_pdf
from resume_ingest.core.errors import DocumentTextError, UnsupportedFileTypeError
from resume_ingest.services.resumes.parsing_utils import (
    DOCX_MIME,
    PDF_MIME,
    _is_extraction_broken,
    _mark_pdf_headings,
    _sort_blocks_by_layout,
    extract_document_text,
    source_type_for,
)


class TestSourceType:
    """Mime type gate"""

    def test_supported(self):
        assert source_type_for(PDF_MIME) == "pdf"
        assert source_type_for(DOCX_MIME) == "docx"
        assert source_type_for("application/pdf; charset=binary") == "pdf"

    @pytest.mark.parametrize("mime", ["text/plain", "image/png", "", None])
    def test_unsupported(self, mime):
        with pytest.raises(UnsupportedFileTypeError) as exc:
            source_type_for(mime)
        assert str(exc.value) == "Unsupported file type"


class TestPdf:
    """PyMuPDF extraction with heading markers"""

    def test_text_and_headings(self, sample_pdf):
        extracted = extract_document_text(sample_pdf, PDF_MIME)

        assert "jane.doe@example.com" in extracted.text
        assert "Acme Corp" in extracted.text
        assert "EXPERIENCE" in extracted.headings
        assert "## EXPERIENCE" in extracted.formatted_text.splitlines()
        assert "## EXPERIENCE" not in extracted.text

    def test_reading_order(self, sample_pdf):
        lines = extract_document_text(sample_pdf, PDF_MIME).text.splitlines()
        assert lines.index("SUMMARY") < lines.index("EXPERIENCE") < lines.index("EDUCATION") < lines.index("SKILLS")

    def test_blank_pdf_has_no_text(self):
        with pytest.raises(DocumentTextError):
            extract_document_text(make_pdf(""), PDF_MIME)

    def test_caps_line_before_body_is_subheading(self):
        marked = _mark_pdf_headings(["SKILLS", "ACME CORP", "Built things", "(512) 555-1234"])
        assert marked == [("SKILLS", 1), ("ACME CORP", 2), ("Built things", 0), ("(512) 555-1234", 0)]

    def test_fragmented_text_is_detected(self):
        assert _is_extraction_broken("\n".join("abcdefghijklmnop"))
        assert not _is_extraction_broken("A normal line\nAnother normal line")

    def test_two_columns_read_left_then_right(self):
        # (x0, y0, x1, y1, text, block_no, block_type)
        blocks = [
            (50, 20, 550, 40, "HEADER", 0, 0),
            (320, 60, 550, 80, "right top", 1, 0),
            (50, 60, 280, 80, "left top", 2, 0),
            (50, 100, 280, 120, "left bottom", 3, 0),
            (320, 100, 550, 120, "right bottom", 4, 0),
        ]
        ordered = [b[4] for b in _sort_blocks_by_layout(blocks)]
        assert ordered == ["HEADER", "left top", "left bottom", "right top", "right bottom"]


class TestDocx:
    """python-docx extraction with heading markers"""

    @staticmethod
    def _build(doc):
        doc.add_paragraph("JANE DOE")
        doc.add_heading("Experience", level=1)
        para = doc.add_paragraph()
        para.add_run("ACME CORP").bold = True
        doc.add_paragraph("Built payment systems")
        table = doc.add_table(rows=1, cols=2)
        table.cell(0, 0).text = "Python"
        table.cell(0, 1).text = "Docker"

    def test_paragraphs_headings_and_tables(self):
        extracted = extract_document_text(make_docx(self._build), DOCX_MIME)

        assert extracted.text.splitlines() == [
            "JANE DOE", "Experience", "ACME CORP", "Built payment systems", "Python | Docker",
        ]
        assert extracted.headings == ["Experience", "ACME CORP"]
        assert "## Experience" in extracted.formatted_text
        assert "#### ACME CORP" in extracted.formatted_text

    def test_empty_document(self):
        with pytest.raises(DocumentTextError):
            extract_document_text(make_docx(lambda doc: None), DOCX_MIME)
