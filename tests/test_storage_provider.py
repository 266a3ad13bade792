"""
Tests for storage providers
"""
from unittest.mock import Mock

import pytest

from retro_meeting.config import config
from retro_meeting.services.storage_provider import (
    LocalDiskStorageProvider,
    S3StorageProvider,
    get_storage_provider,
)


class TestLocalDiskStorageProvider:

    def test_put_url_points_at_api(self, tmp_path):
        provider = LocalDiskStorageProvider(str(tmp_path), "http://localhost:8000/")

        url = provider.get_put_url("Organization/o1/picture/abc.png", "image/png", 10)

        assert url == "http://localhost:8000/storage/Organization/o1/picture/abc.png"

    def test_put_then_get(self, tmp_path):
        provider = LocalDiskStorageProvider(str(tmp_path), "http://localhost:8000")

        provider.put("a/b.png", b"data", "image/png")

        assert provider.get("a/b.png") == b"data"
        assert provider.get("missing.png") is None

    def test_keys_cannot_escape_base_path(self, tmp_path):
        provider = LocalDiskStorageProvider(str(tmp_path / "store"), "http://localhost:8000")

        provider.put("../escape.png", b"data")

        assert not (tmp_path / "escape.png").exists()


class TestS3StorageProvider:

    def test_presigned_put(self):
        s3_client = Mock()
        s3_client.generate_presigned_url.return_value = "https://signed.example.com/put"
        provider = S3StorageProvider("bucket", base_path="store", expires_in=60, s3_client=s3_client)

        url = provider.get_put_url("Organization/o1/picture/abc.png", "image/png", 2048)

        assert url == "https://signed.example.com/put"
        s3_client.generate_presigned_url.assert_called_once_with(
            "put_object",
            Params={
                "Bucket": "bucket",
                "Key": "store/Organization/o1/picture/abc.png",
                "ContentType": "image/png",
                "ContentLength": 2048,
                "ACL": "public-read",
            },
            ExpiresIn=60,
        )


class TestStorageFactory:

    def test_s3_requires_bucket(self):
        config = Mock(STORAGE_PROVIDER="s3", S3_BUCKET_NAME=None)

        with pytest.raises(ValueError, match="S3_BUCKET_NAME"):
            get_storage_provider(config)

    def test_local(self, tmp_path):
        config = Mock(STORAGE_PROVIDER="local", STORAGE_PATH=str(tmp_path), API_BASE_URL="http://x")

        assert isinstance(get_storage_provider(config), LocalDiskStorageProvider)

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_storage_provider(Mock(STORAGE_PROVIDER="ftp"))


class TestLocalStorageRoutes:
    """Test the /storage routes serving the local provider"""

    def test_put_then_get(self, client):
        put = client.put("/storage/Organization/o1/picture/abc.png", content=b"png-bytes",
                         headers={"Content-Type": "image/png"})

        assert put.status_code == 200
        assert put.json()["url"] == "http://testserver/storage/Organization/o1/picture/abc.png"
        assert client.get("/storage/Organization/o1/picture/abc.png").content == b"png-bytes"

    def test_missing_file(self, client):
        assert client.get("/storage/nope.png").status_code == 404

    def test_oversized_upload_is_rejected(self, client, storage):
        too_big = b"x" * (config.MAX_AVATAR_FILE_SIZE + 1)

        response = client.put("/storage/Organization/o1/picture/big.png", content=too_big,
                              headers={"Content-Type": "image/png"})

        assert response.status_code == 400
        assert storage.get("Organization/o1/picture/big.png") is None

    def test_oversized_chunked_upload_is_rejected(self, client, storage):
        chunk = b"x" * 1024
        chunks = (chunk for _ in range(config.MAX_AVATAR_FILE_SIZE // len(chunk) + 2))

        response = client.put("/storage/Organization/o1/picture/chunked.png", content=chunks,
                              headers={"Content-Type": "image/png"})

        assert response.status_code == 400
        assert storage.get("Organization/o1/picture/chunked.png") is None
