"""Plain-text extraction from uploaded policy documents."""

import io
import logging

from docx import Document
from pypdf import PdfReader

logger = logging.getLogger(__name__)

PDF = "application/pdf"
DOC = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Decoded characters returned when a parser fails
RAW_FALLBACK_CHARS = 3000


def extract_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def extract_word(data: bytes) -> str:
    document = Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_policy_text(data: bytes, content_type: str) -> str:
    """Extract text by content type.

    PDFs go through pypdf and Word files through python-docx; anything else
    is decoded as UTF-8. If a parser fails the first RAW_FALLBACK_CHARS
    decoded characters are returned instead.
    """
    try:
        if content_type == PDF:
            return extract_pdf(data)
        if content_type in (DOC, DOCX):
            return extract_word(data)
        return data.decode("utf-8", errors="replace")
    except Exception as e:
        logger.warning(f"Policy extraction error ({content_type}): {e}")
        return data.decode("utf-8", errors="replace")[:RAW_FALLBACK_CHARS]
