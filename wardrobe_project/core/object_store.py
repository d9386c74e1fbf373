# wardrobe_project/core/object_store.py
import asyncio
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Optional

import boto3

from config.settings import Settings

logger = logging.getLogger(__name__)

S3_KEY_PREFIX = "uploads"
S3_CACHE_CONTROL = "max-age=31536000"


class ObjectStore(ABC):
    @abstractmethod
    async def put(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        """Stores the bytes under the key and returns a URL the client can fetch."""


class LocalObjectStore(ObjectStore):
    def __init__(self, root: str, url_prefix: str = "/uploads"):
        self.root = os.path.abspath(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _write(self, data: bytes, key: str) -> str:
        path = os.path.abspath(os.path.join(self.root, key))
        if os.path.commonpath([self.root, path]) != self.root:
            raise ValueError(f"Object key escapes the storage root: {key}")
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        return path

    async def put(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        path = await asyncio.to_thread(self._write, data, key)
        logger.info(f"Stored {len(data)} bytes locally at {path}")
        return f"{self.url_prefix}/{key}"


class S3ObjectStore(ObjectStore):
    """Uploads to an S3 bucket, falling back to local storage when the upload fails."""

    def __init__(self, bucket: str, region: str, fallback: LocalObjectStore, client: Any = None):
        self.bucket = bucket
        self.region = region
        self.fallback = fallback
        self.client = client or boto3.client("s3", region_name=region)

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{S3_KEY_PREFIX}/{key}"

    async def put(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=f"{S3_KEY_PREFIX}/{key}",
                Body=data,
                ContentType=content_type or "application/octet-stream",
                CacheControl=S3_CACHE_CONTROL,
            )
        except Exception as e:
            logger.warning(f"S3 upload of '{key}' failed, falling back to local storage. Error: {e}")
            return await self.fallback.put(data, key, content_type)
        url = self.object_url(key)
        logger.info(f"Image uploaded to S3: {url}")
        return url


def build_object_store(settings: Settings) -> ObjectStore:
    local = LocalObjectStore(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
    if not settings.S3_BUCKET:
        logger.info(f"S3_BUCKET not set. Using local storage in '{local.root}'.")
        return local
    return S3ObjectStore(settings.S3_BUCKET, settings.AWS_REGION, fallback=local)
