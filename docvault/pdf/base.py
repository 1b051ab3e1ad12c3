from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for PDF text extraction engines."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Return the embedded text of every page, joined by newlines.

        Raises:
            PdfExtractionError: if the bytes cannot be parsed as a PDF.
        """
