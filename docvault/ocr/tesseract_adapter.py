import io

import pytesseract
from PIL import Image

from docvault.ocr.base import BaseOcrEngine
from docvault.ocr.exceptions import OcrError
from docvault.ocr.progress import OcrProgress


class TesseractAdapter(BaseOcrEngine):
    """OCR through the tesseract binary via pytesseract."""

    def __init__(self, language: str = "spa", timeout_seconds: int = 60) -> None:
        self._language = language
        self._timeout_seconds = timeout_seconds

    def extract(self, image_bytes: bytes, progress: OcrProgress | None = None) -> str:
        progress = progress or OcrProgress()
        progress.update("loading image", 0.0)
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                progress.update("recognizing text", 0.1)
                # pytesseract kills the subprocess and raises RuntimeError on timeout
                text = pytesseract.image_to_string(
                    image,
                    lang=self._language,
                    timeout=self._timeout_seconds,
                )
        except Exception as exc:
            progress.fail(str(exc))
            raise OcrError(f"tesseract OCR failed: {exc}") from exc
        progress.update("done", 1.0)
        return (text or "").strip()
