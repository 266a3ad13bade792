"""
Storage Provider Interface and Implementations
Signed upload URLs for user-supplied images (local filesystem in dev, S3 in production)
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
import logging

import boto3

logger = logging.getLogger(__name__)


class StorageProvider(ABC):
    """Abstract base class for storage providers"""

    @abstractmethod
    def get_put_url(self, key: str, content_type: str, content_length: int) -> str:
        """
        Create a URL the client can PUT the file to

        Args:
            key: Storage key relative to the provider's base path
            content_type: MIME type the upload must use
            content_length: Size in bytes the upload must have

        Returns:
            URL accepting a single PUT
        """
        pass

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Store data and return its public URL"""
        pass


class LocalDiskStorageProvider(StorageProvider):
    """Local filesystem storage provider (default for dev)"""

    def __init__(self, base_path: str, api_base_url: str):
        """
        Initialize local disk storage

        Args:
            base_path: Directory uploads are written to
            api_base_url: Public URL of this server; uploads go to its /storage route
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.api_base_url = api_base_url.rstrip("/")
        logger.info(f"LocalDiskStorageProvider initialized at {self.base_path}")

    @staticmethod
    def _safe_key(key: str) -> str:
        return key.replace("..", "").lstrip("/")

    def _safe_path(self, key: str) -> Path:
        return self.base_path / self._safe_key(key)

    def get_put_url(self, key: str, content_type: str, content_length: int) -> str:
        return f"{self.api_base_url}/storage/{self._safe_key(key)}"

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Store data to local filesystem"""
        file_path = self._safe_path(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(data)
        logger.debug(f"Stored {len(data)} bytes to {file_path}")
        return self.get_put_url(key, content_type, len(data))

    def get(self, key: str) -> Optional[bytes]:
        file_path = self._safe_path(key)
        if not file_path.is_file():
            return None
        with open(file_path, "rb") as f:
            return f.read()


class S3StorageProvider(StorageProvider):
    """S3-compatible storage provider (for production)"""

    def __init__(self, bucket_name: str, region: str = "us-east-1", base_path: str = "store",
                 expires_in: int = 900, s3_client=None):
        """
        Initialize S3 storage provider

        Args:
            bucket_name: S3 bucket name
            region: AWS region
            base_path: Prefix every key is stored under
            expires_in: Lifetime of signed URLs in seconds
            s3_client: Preconfigured boto3 client (credentials come from the environment otherwise)
        """
        self.bucket_name = bucket_name
        self.region = region
        self.base_path = base_path.strip("/")
        self.expires_in = expires_in
        self.s3_client = s3_client or boto3.client("s3", region_name=region)

    def _full_key(self, key: str) -> str:
        key = key.lstrip("/")
        return f"{self.base_path}/{key}" if self.base_path else key

    def get_put_url(self, key: str, content_type: str, content_length: int) -> str:
        """Presign a public-read PUT for the exact type and size requested"""
        return self.s3_client.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": self.bucket_name,
                "Key": self._full_key(key),
                "ContentType": content_type,
                "ContentLength": content_length,
                "ACL": "public-read",
            },
            ExpiresIn=self.expires_in,
        )

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Store data to S3"""
        full_key = self._full_key(key)
        self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=full_key,
            Body=data,
            ContentType=content_type,
            ACL="public-read",
        )
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{full_key}"


def get_storage_provider(config) -> StorageProvider:
    """
    Factory function to get storage provider

    Args:
        config: Config object with storage settings

    Returns:
        StorageProvider instance
    """
    if config.STORAGE_PROVIDER == "s3":
        if not config.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME environment variable required for S3 storage")
        return S3StorageProvider(
            bucket_name=config.S3_BUCKET_NAME,
            region=config.S3_REGION,
            base_path=config.S3_BASE_PATH,
            expires_in=config.S3_PUT_URL_EXPIRES,
        )
    if config.STORAGE_PROVIDER == "local":
        return LocalDiskStorageProvider(config.STORAGE_PATH, config.API_BASE_URL)
    raise ValueError(f"Unknown storage provider: {config.STORAGE_PROVIDER}")
