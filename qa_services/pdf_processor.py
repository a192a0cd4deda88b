"""
PDF text extraction
"""
import io
from typing import List

from pypdf import PdfReader

from core.errors import ExternalServiceError
from core.logging_config import get_logger

logger = get_logger(__name__)

PAGE_BREAK = "----------------Page ({index}) Break----------------"


class PDFProcessor:
    """Turns PDF bytes into raw text, one page after another."""

    @staticmethod
    def extract_text(pdf_bytes: bytes) -> str:
        """Extract raw text with a page-break marker after every page."""
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            pages = reader.pages
            total_pages = len(pages)
        except Exception as e:
            raise ExternalServiceError(f"Failed to extract text from PDF: {e}") from e

        parts: List[str] = []
        for i in range(total_pages):
            try:
                extracted = pages[i].extract_text() or ""
            except Exception as e:
                logger.warning("Skipping page %d: %s", i, e)
                extracted = ""
            parts.append(PDFProcessor._clean_text(extracted))
            parts.append(PAGE_BREAK.format(index=i))

        return "\n".join(parts) + "\n" if parts else ""

    @staticmethod
    def _clean_text(text: str) -> str:
        """Normalize line endings and drop trailing whitespace."""
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return text.rstrip()
