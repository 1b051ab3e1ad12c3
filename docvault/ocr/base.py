from abc import ABC, abstractmethod

from docvault.ocr.progress import OcrProgress


class BaseOcrEngine(ABC):
    """Contract for OCR engines."""

    @abstractmethod
    def extract(self, image_bytes: bytes, progress: OcrProgress | None = None) -> str:
        """Recognize text in an image and return it trimmed.

        Args:
            image_bytes: Raw image file content.
            progress: Optional status object updated as recognition advances.

        Raises:
            OcrError: if the image cannot be decoded or recognition fails.
        """
