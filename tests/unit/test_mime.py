import pytest

from docvault.ingestion.mime import is_allowed, normalize_mime


class TestNormalizeMime:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("application/pdf", "application/pdf"),
            ("Application/PDF", "application/pdf"),
            ("application/pdf; charset=binary", "application/pdf"),
            (" IMAGE/PNG ", "image/png"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_mime(raw) == expected


class TestIsAllowed:
    @pytest.mark.parametrize("mime_type", ["image/jpeg", "Application/PDF", "text/csv; charset=utf-8"])
    def test_allowed(self, mime_type: str) -> None:
        assert is_allowed(mime_type)

    @pytest.mark.parametrize("mime_type", ["application/x-msdownload", "", "text/html"])
    def test_rejected(self, mime_type: str) -> None:
        assert not is_allowed(mime_type)
