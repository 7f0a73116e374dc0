"""Resume text extraction from uploaded PDF and DOCX files."""

import io
import logging
import re
from dataclasses import dataclass, field

import pdfplumber
from docx import Document

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx")


@dataclass
class ExtractedDocument:
    text: str
    bullets: list[str] = field(default_factory=list)


def extract_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages).strip()


def _is_list_paragraph(paragraph) -> bool:
    style = paragraph.style.name.lower() if paragraph.style is not None else ""
    if style.startswith("list"):
        return True
    ppr = paragraph._p.pPr
    return ppr is not None and ppr.numPr is not None


def extract_text_docx(docx_bytes: bytes) -> ExtractedDocument:
    """Extract text and list-item bullets from a DOCX file.

    List markers are not part of paragraph text, so list items are appended
    again as "- " lines for the bullet extractor to find.
    """
    doc = Document(io.BytesIO(docx_bytes))
    lines: list[str] = []
    bullets: list[str] = []
    seen: set[str] = set()

    for paragraph in doc.paragraphs:
        text = re.sub(r"\s+", " ", paragraph.text).strip()
        if not text:
            lines.append("")
            continue
        lines.append(text)
        if _is_list_paragraph(paragraph) and text not in seen:
            seen.add(text)
            bullets.append(text)

    text = "\n".join(lines).strip()
    if bullets:
        text = f"{text}\n\n" + "\n".join(f"- {b}" for b in bullets)
    return ExtractedDocument(text=text, bullets=bullets)


def extract_resume_text(filename: str, content: bytes) -> ExtractedDocument:
    """Dispatch on file extension; raises ValueError for anything else."""
    name = (filename or "").lower()
    if name.endswith(".docx"):
        return extract_text_docx(content)
    if name.endswith(".pdf"):
        return ExtractedDocument(text=extract_text(content))
    raise ValueError("Unsupported file type. Please upload a PDF or DOCX.")
