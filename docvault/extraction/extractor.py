"""Text extraction over {PDF, Image, Other} with a uniform soft-fail policy."""

import re
from abc import ABC, abstractmethod

from docvault.extraction.exceptions import ExtractionError
from docvault.extraction.models import ExtractionOutcome
from docvault.ingestion.mime import normalize_mime
from docvault.logging.logger import Log
from docvault.ocr.base import BaseOcrEngine
from docvault.ocr.progress import OcrProgress
from docvault.pdf.base import BasePdfExtractor

# NUL and control characters other than \t \n \r break TEXT columns in PostgreSQL
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def sanitize_text(text: str) -> str:
    """Drop control characters the relational store rejects and trim."""
    if not text:
        return ""
    return _CONTROL_CHARS_RE.sub("", text).strip()


class ExtractionStrategy(ABC):
    """One way of turning file bytes into text."""

    method: str = "unknown"

    @abstractmethod
    def supports(self, mime_type: str) -> bool: ...

    @abstractmethod
    def extract(
        self,
        data: bytes,
        filename: str,
        mime_type: str,
        progress: OcrProgress | None = None,
    ) -> str:
        """Raises:
        ExtractionError: when the engine fails.
        """


class PdfStrategy(ExtractionStrategy):
    method = "pdf"

    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def supports(self, mime_type: str) -> bool:
        return mime_type == "application/pdf"

    def extract(
        self,
        data: bytes,
        filename: str,
        mime_type: str,
        progress: OcrProgress | None = None,
    ) -> str:
        return self._pdf_extractor.extract(data)


class ImageStrategy(ExtractionStrategy):
    method = "ocr"

    def __init__(self, ocr_engine: BaseOcrEngine) -> None:
        self._ocr_engine = ocr_engine

    def supports(self, mime_type: str) -> bool:
        return mime_type.startswith("image/")

    def extract(
        self,
        data: bytes,
        filename: str,
        mime_type: str,
        progress: OcrProgress | None = None,
    ) -> str:
        return self._ocr_engine.extract(data, progress=progress)


class PlaceholderStrategy(ExtractionStrategy):
    """Files we cannot read get a label derived from their name."""

    method = "placeholder"

    def supports(self, mime_type: str) -> bool:
        return True

    def extract(
        self,
        data: bytes,
        filename: str,
        mime_type: str,
        progress: OcrProgress | None = None,
    ) -> str:
        if "word" in mime_type or "document" in mime_type:
            return f"Documento: {filename}"
        return f"Archivo: {filename}"


class TextExtractor:
    """Dispatches to the first strategy that supports the MIME type.

    Every failure is absorbed: the caller gets empty text and a degraded
    outcome instead of an exception.
    """

    def __init__(self, strategies: list[ExtractionStrategy]) -> None:
        if not strategies:
            raise ValueError("TextExtractor needs at least one strategy")
        self._strategies = strategies

    @classmethod
    def build(
        cls,
        pdf_extractor: BasePdfExtractor,
        ocr_engine: BaseOcrEngine,
    ) -> "TextExtractor":
        return cls([
            PdfStrategy(pdf_extractor),
            ImageStrategy(ocr_engine),
            PlaceholderStrategy(),
        ])

    def extract(
        self,
        data: bytes,
        filename: str,
        mime_type: str,
        progress: OcrProgress | None = None,
    ) -> ExtractionOutcome:
        mime_type = normalize_mime(mime_type)
        strategy = self._select(mime_type)
        try:
            raw = strategy.extract(data, filename, mime_type, progress=progress)
        except ExtractionError as exc:
            Log.warning(
                f"Extraction degraded for '{filename}' ({strategy.method}): {exc}"
            )
            return ExtractionOutcome(
                text="", method=strategy.method, degraded=True, warning=str(exc)
            )
        except Exception as exc:
            Log.error(
                f"Unexpected {strategy.method} extraction error for '{filename}': {exc}"
            )
            return ExtractionOutcome(
                text="",
                method=strategy.method,
                degraded=True,
                warning=f"unexpected error: {exc}",
            )
        text = sanitize_text(raw)
        Log.info(f"Extracted {len(text)} chars from '{filename}' via {strategy.method}")
        return ExtractionOutcome(text=text, method=strategy.method)

    def _select(self, mime_type: str) -> ExtractionStrategy:
        for strategy in self._strategies:
            if strategy.supports(mime_type):
                return strategy
        return PlaceholderStrategy()
