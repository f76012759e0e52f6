from __future__ import annotations

from functools import lru_cache
from typing import Protocol
from urllib.parse import urlparse

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from pawsi.core.config import settings
from pawsi.core.errors import DependencyError


class ImageStore(Protocol):
    def purge(self, image_ref: str) -> None: ...


class S3ImageStore:
    """S3-compatible bucket (AWS, DigitalOcean Spaces, R2) holding listing photos."""

    def __init__(self, bucket: str, public_base: str, client) -> None:
        self._bucket = bucket
        self._public_base = public_base.rstrip('/')
        self._client = client

    def object_key(self, image_ref: str) -> str:
        ref = image_ref.strip()
        if self._public_base and ref.startswith(self._public_base + '/'):
            return ref[len(self._public_base) + 1:]
        if ref.startswith(('http://', 'https://')):
            return urlparse(ref).path.lstrip('/')
        return ref.lstrip('/')

    def purge(self, image_ref: str) -> None:
        key = self.object_key(image_ref)
        if not key:
            raise DependencyError(f"Cannot derive object key from image ref: {image_ref}")
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise DependencyError(f"Image purge failed for {key}: {exc}") from exc


class NullImageStore:
    def purge(self, image_ref: str) -> None:
        logger.info('image_store.disabled', image_ref=image_ref)


def _s3_client():
    timeout = settings.IMAGE_PURGE_TIMEOUT_SECONDS
    return boto3.client(
        's3',
        region_name=settings.IMAGE_STORE_REGION,
        endpoint_url=settings.IMAGE_STORE_ENDPOINT or None,
        aws_access_key_id=settings.IMAGE_STORE_ACCESS_KEY or None,
        aws_secret_access_key=settings.IMAGE_STORE_SECRET_KEY or None,
        config=Config(
            signature_version='s3v4',
            connect_timeout=timeout,
            read_timeout=timeout,
            retries={'max_attempts': 2},
        ),
    )


@lru_cache
def get_image_store() -> ImageStore:
    if settings.IMAGE_STORE_BUCKET:
        return S3ImageStore(settings.IMAGE_STORE_BUCKET, settings.IMAGE_STORE_PUBLIC_BASE, _s3_client())
    return NullImageStore()


def reset_image_store() -> None:
    get_image_store.cache_clear()
