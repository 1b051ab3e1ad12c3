from unittest.mock import MagicMock

import pytest

from docvault.pdf.factory import PdfExtractorFactory
from docvault.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docvault.pdf.pymupdf_adapter import PyMuPdfAdapter


def _settings(pdf_engine: str) -> MagicMock:
    settings = MagicMock()
    settings.pdf_engine = pdf_engine
    return settings


class TestPdfExtractorFactory:
    @pytest.mark.parametrize(
        ("engine", "expected"),
        [
            ("pdfplumber", PdfPlumberAdapter),
            ("pymupdf", PyMuPdfAdapter),
            ("PyMuPDF", PyMuPdfAdapter),
        ],
    )
    def test_creates_configured_engine(self, engine: str, expected: type) -> None:
        assert isinstance(PdfExtractorFactory.create(_settings(engine)), expected)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine 'poppler'"):
            PdfExtractorFactory.create(_settings("poppler"))
