from docvault.config.settings import Settings
from docvault.pdf.base import BasePdfExtractor
from docvault.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docvault.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Picks the PDF engine named by settings.pdf_engine."""

    ENGINES: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        engine_cls = cls.ENGINES.get(engine)
        if engine_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ENGINES)}"
            )
        return engine_cls()
