from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from docvault.storage.exceptions import ObjectNotFoundError, ObjectStoreError
from docvault.storage.s3_adapter import S3ObjectStore


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "HeadObject")


def _make_store() -> tuple[S3ObjectStore, MagicMock]:
    client = MagicMock()
    with patch("docvault.storage.s3_adapter.boto3.client", return_value=client) as mock_factory:
        store = S3ObjectStore(bucket="documents", timeout_seconds=7)
    config = mock_factory.call_args.kwargs["config"]
    assert config.connect_timeout == 7
    assert config.read_timeout == 7
    return store, client


class TestS3ObjectStore:
    def test_put_uploads_with_content_type(self) -> None:
        store, client = _make_store()
        assert store.put("general/o/a.pdf", b"data", "application/pdf") == "general/o/a.pdf"
        client.put_object.assert_called_once_with(
            Bucket="documents",
            Key="general/o/a.pdf",
            Body=b"data",
            ContentType="application/pdf",
            CacheControl="max-age=3600",
        )

    def test_put_failure_raises_store_error(self) -> None:
        store, client = _make_store()
        client.put_object.side_effect = EndpointConnectionError(endpoint_url="http://s3")
        with pytest.raises(ObjectStoreError, match="Failed to upload"):
            store.put("general/o/a.pdf", b"data", "application/pdf")

    def test_delete_existing(self) -> None:
        store, client = _make_store()
        assert store.delete("general/o/a.pdf") is True
        client.delete_object.assert_called_once_with(Bucket="documents", Key="general/o/a.pdf")

    @pytest.mark.parametrize("code", ["404", "NoSuchKey"])
    def test_delete_missing_returns_false(self, code: str) -> None:
        store, client = _make_store()
        client.head_object.side_effect = _client_error(code)
        assert store.delete("general/o/a.pdf") is False
        client.delete_object.assert_not_called()

    def test_delete_access_denied_raises(self) -> None:
        store, client = _make_store()
        client.head_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(ObjectStoreError):
            store.delete("general/o/a.pdf")

    def test_signed_url(self) -> None:
        store, client = _make_store()
        client.generate_presigned_url.return_value = "https://s3/signed"
        assert store.signed_url("general/o/a.pdf", 900) == "https://s3/signed"
        client.generate_presigned_url.assert_called_once_with(
            "get_object",
            Params={"Bucket": "documents", "Key": "general/o/a.pdf"},
            ExpiresIn=900,
        )

    def test_signed_url_missing_object(self) -> None:
        store, client = _make_store()
        client.head_object.side_effect = _client_error("404")
        with pytest.raises(ObjectNotFoundError):
            store.signed_url("general/o/a.pdf", 900)
