# resume_ingest/services/resumes/parsing_utils.py
"""Resume text extraction for PDF/DOCX uploads: plain text, a heading-annotated variant, and the heading list."""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import fitz  # PyMuPDF
import pdfplumber
from docx import Document
from docx.oxml.table import CT_Tbl
from docx.oxml.text.paragraph import CT_P
from docx.table import Table
from docx.text.paragraph import Paragraph

from resume_ingest.core.errors import DocumentTextError, UnsupportedFileTypeError
from resume_ingest.services.resumes.extraction.sections import classify_heading

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
SOURCE_TYPES = {PDF_MIME: "pdf", DOCX_MIME: "docx"}

_PHONE_DIGITS_RE = re.compile(r"\d[\d\s().\-]{6,}\d")
HEADING_MAX_WORDS = 6


@dataclass
class ExtractedText:
    text: str
    formatted_text: str
    headings: List[str] = field(default_factory=list)


def source_type_for(mime_type: Optional[str]) -> str:
    """'pdf' / 'docx' for supported mime types; anything else is rejected."""
    source = SOURCE_TYPES.get((mime_type or "").split(";")[0].strip().lower())
    if source is None:
        raise UnsupportedFileTypeError(mime_type)
    return source


def extract_document_text(file_content: bytes, mime_type: str) -> ExtractedText:
    source = source_type_for(mime_type)
    if source == "pdf":
        lines = _pdf_lines(file_content)
        marked = _mark_pdf_headings(lines)
    else:
        marked = _docx_lines(file_content)

    text = "\n".join(line for line, _level in marked).strip()
    if not text:
        raise DocumentTextError(f"No text could be extracted from the {source.upper()} file")

    formatted: List[str] = []
    headings: List[str] = []
    for line, level in marked:
        if level:
            formatted.append(f"{'#' * (level + 1)} {line}")
            headings.append(line)
        else:
            formatted.append(line)
    logger.info("Extracted %d chars (%d headings) from %s", len(text), len(headings), source)
    return ExtractedText(text=text, formatted_text="\n".join(formatted).strip(), headings=headings)


# --- PDF ---

def _pdf_lines(file_content: bytes) -> List[str]:
    text = ""
    try:
        text = parse_pdf_content(file_content)
    except Exception as e:
        logger.warning(f"PyMuPDF failed, falling back to pdfplumber: {e}")

    if not text or _is_extraction_broken(text):
        text = _parse_pdf_with_pdfplumber(file_content)
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


def parse_pdf_content(file_content: bytes) -> str:
    """
    Parses PDF content using PyMuPDF (fitz).
    Tries layout-preserving 'blocks' mode first.
    If that produces fragmented text (one char per line), falls back to 'text' mode.
    """
    with fitz.open(stream=file_content, filetype="pdf") as doc:
        parts = []
        for page in doc:
            # (x0, y0, x1, y1, "text", block_no, block_type)
            blocks = [b for b in page.get_text("blocks") if b[6] == 0 and b[4].strip()]
            parts.extend(b[4].strip() for b in _sort_blocks_by_layout(blocks))
        text = "\n\n".join(parts)

        if _is_extraction_broken(text):
            logger.info("PyMuPDF 'blocks' mode produced fragmented text. Retrying with 'text' mode...")
            text = "\n".join(page.get_text("text", sort=True) for page in doc)
    return text


def _parse_pdf_with_pdfplumber(file_content: bytes) -> str:
    with pdfplumber.open(io.BytesIO(file_content)) as pdf:
        text = "\n".join(page.extract_text(x_tolerance=2, y_tolerance=3) or "" for page in pdf.pages)
        if _is_extraction_broken(text):
            logger.info("pdfplumber extraction fragmented, retrying with high tolerance...")
            text = "\n".join(page.extract_text(x_tolerance=15, y_tolerance=10) or "" for page in pdf.pages)
    return text


def _sort_blocks_by_layout(blocks: list) -> list:
    """
    Reading order for text blocks on one page.
    A vertical gap in the middle half of the page means two columns: the page is cut
    into bands at full-width blocks, and each band reads left column then right column.
    Otherwise blocks are read row by row.
    """
    if not blocks:
        return []

    min_x = min(b[0] for b in blocks)
    max_x = max(b[2] for b in blocks)
    width = max_x - min_x

    best_split, fewest_crossing = -1.0, len(blocks) + 1
    x = min_x + width * 0.25
    while x < min_x + width * 0.75:
        crossing = sum(1 for b in blocks if b[0] < x < b[2])
        if crossing < fewest_crossing:
            fewest_crossing, best_split = crossing, x
        x += 5

    # headers, footers and rules may cross the gap
    if fewest_crossing > max(3, len(blocks) * 0.1):
        return sorted(blocks, key=lambda b: (round(b[1] / 10) * 10, b[0]))

    spanning = sorted((b for b in blocks if b[0] < best_split < b[2]), key=lambda b: b[1])
    left = [b for b in blocks if b[2] <= best_split]
    right = [b for b in blocks if b[0] >= best_split and not (b[0] < best_split < b[2])]

    def band(column: list, top: float, bottom: float) -> list:
        return sorted((b for b in column if top <= (b[1] + b[3]) / 2 < bottom), key=lambda b: (b[1], b[0]))

    ordered: list = []
    top = -1.0
    for sp in spanning:
        ordered.extend(band(left, top, sp[1]))
        ordered.extend(band(right, top, sp[1]))
        ordered.append(sp)
        top = sp[3]
    ordered.extend(band(left, top, float("inf")))
    ordered.extend(band(right, top, float("inf")))
    return ordered


def _is_extraction_broken(text: str) -> bool:
    """
    Heuristic to check if text extraction resulted in one-char-per-line garbage.
    """
    lines = (text or "").strip().split("\n")
    if not text or not lines:
        return True
    short_lines = sum(1 for line in lines if len(line.strip()) <= 2)
    return len(lines) > 10 and short_lines / len(lines) > 0.4


def _is_caps_heading_candidate(line: str) -> bool:
    letters = [c for c in line if c.isalpha()]
    return (
        bool(letters)
        and line.upper() == line
        and len(line.split()) <= HEADING_MAX_WORDS
        and "@" not in line
        and not _PHONE_DIGITS_RE.search(line)
    )


def _mark_pdf_headings(lines: List[str]) -> List[Tuple[str, int]]:
    """Known section names are level 1; a short ALL-CAPS line followed by a non-caps line is level 2."""
    marked: List[Tuple[str, int]] = []
    for idx, line in enumerate(lines):
        if classify_heading(line):
            marked.append((line, 1))
            continue
        nxt = lines[idx + 1] if idx + 1 < len(lines) else ""
        if _is_caps_heading_candidate(line) and nxt and nxt.upper() != nxt:
            marked.append((line, 2))
        else:
            marked.append((line, 0))
    return marked


# --- DOCX ---

def _extract_text_from_xml(element) -> str:
    """
    Text of an XML element including text boxes (w:txbxContent), which
    python-docx's paragraph.text does not return.
    """
    text_parts = []
    for node in element.iter():
        if node.tag.endswith("}t"):
            if node.text:
                text_parts.append(node.text)
        elif node.tag.endswith("}br") or node.tag.endswith("}cr") or node.tag.endswith("}p"):
            text_parts.append("\n")
        elif node.tag.endswith("}tab"):
            text_parts.append("\t")
    return "".join(text_parts).strip()


def _docx_heading_level(para: Paragraph, text: str) -> int:
    style = (para.style.name if para.style is not None else "") or ""
    m = re.match(r"^Heading\s*(\d)", style, re.I)
    if m:
        return int(m.group(1))
    if style.lower() == "title":
        return 0
    runs = [r for r in para.runs if r.text.strip()]
    if (
        runs
        and all(r.bold for r in runs)
        and text.upper() == text
        and any(c.isalpha() for c in text)
        and len(text.split()) <= HEADING_MAX_WORDS
    ):
        return 3
    return 0


def _docx_lines(file_content: bytes) -> List[Tuple[str, int]]:
    """
    Paragraphs and tables in body order, preceded by page headers.
    Header parts are read through raw XML to keep text boxes and shapes.
    """
    doc = Document(io.BytesIO(file_content))
    out: List[Tuple[str, int]] = []

    seen_parts = set()
    for section in doc.sections:
        for header in (section.header, section.first_page_header, section.even_page_header):
            if header is None or header.is_linked_to_previous or header.part in seen_parts:
                continue
            seen_parts.add(header.part)
            header_text = _extract_text_from_xml(header.part.element)
            out.extend((ln.strip(), 0) for ln in header_text.splitlines() if ln.strip())

    for element in doc.element.body:
        if isinstance(element, CT_P):
            para_text = _extract_text_from_xml(element)
            if not para_text:
                continue
            para_lines = [ln.strip() for ln in para_text.splitlines() if ln.strip()]
            level = _docx_heading_level(Paragraph(element, doc), para_text) if len(para_lines) == 1 else 0
            out.extend((ln, level) for ln in para_lines)
        elif isinstance(element, CT_Tbl):
            table = Table(element, doc)
            for row in table.rows:
                cells = []
                for cell in row.cells:
                    # merged cells repeat across the row
                    value = cell.text.strip()
                    if value and value not in cells:
                        cells.append(value)
                if cells:
                    out.append((" | ".join(cells), 0))
    return out
