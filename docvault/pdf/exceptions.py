from docvault.extraction.exceptions import ExtractionError


class PdfExtractionError(ExtractionError):
    """Raised when a PDF engine fails to parse the document."""
