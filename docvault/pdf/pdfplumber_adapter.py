import io

import pdfplumber

from docvault.pdf.base import BasePdfExtractor
from docvault.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Embedded-text extraction backed by pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not read PDF: {exc}") from exc
        return "\n".join(pages).strip()
