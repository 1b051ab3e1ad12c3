from docvault.extraction.exceptions import ExtractionError


class OcrError(ExtractionError):
    """Raised when the OCR engine cannot recognize an image."""
