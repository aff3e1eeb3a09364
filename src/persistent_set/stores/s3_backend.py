"""S3 list store — stores each list as a JSON object in AWS S3."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from persistent_set.exceptions import StoreUnavailableError, StoreWriteError

log = logging.getLogger(__name__)


class S3ListStore:
    """Stores lists as objects in an S3 bucket.

    boto3 is synchronous, so every call is pushed onto a worker thread.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "sets/",
        region: str = "us-east-2",
        kms_key_id: str = "",
        boto3_client: Any | None = None,
    ) -> None:
        if boto3_client is not None:
            self._s3 = boto3_client
        else:
            try:
                import boto3 as _boto3
            except ImportError as e:
                raise ImportError(
                    "boto3 is required for S3 persistence. "
                    "Install with: pip install persistent-set[s3]"
                ) from e
            self._s3 = _boto3.client("s3", region_name=region)

        self._bucket = bucket
        self._prefix = prefix
        self._kms_key_id = kms_key_id

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}.json"

    def _get_sync(self, key: str) -> list[str] | None:
        try:
            response = self._s3.get_object(Bucket=self._bucket, Key=self._full_key(key))
        except self._s3.exceptions.NoSuchKey:
            return None
        data = json.loads(response["Body"].read().decode("utf-8"))
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise ValueError(f"s3://{self._bucket}/{self._full_key(key)} is not a JSON array of strings")
        return data

    def _put_sync(self, key: str, values: list[str]) -> None:
        put_kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": self._full_key(key),
            "Body": json.dumps(values).encode("utf-8"),
            "ContentType": "application/json",
        }
        if self._kms_key_id:
            put_kwargs["ServerSideEncryption"] = "aws:kms"
            put_kwargs["SSEKMSKeyId"] = self._kms_key_id
        self._s3.put_object(**put_kwargs)

    def _delete_sync(self, key: str) -> None:
        self._s3.delete_object(Bucket=self._bucket, Key=self._full_key(key))

    async def get_list(self, key: str) -> list[str] | None:
        try:
            return await asyncio.to_thread(self._get_sync, key)
        except Exception as exc:
            raise StoreUnavailableError(f"S3 read failed for {key}: {exc}", key=key) from exc

    async def set_list(self, key: str, values: list[str]) -> None:
        try:
            await asyncio.to_thread(self._put_sync, key, list(values))
        except Exception as exc:
            raise StoreWriteError(f"S3 write failed for {key}: {exc}", key=key) from exc
        log.debug("Saved %d entries under %s to s3://%s/%s", len(values), key, self._bucket, self._full_key(key))

    async def remove(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._delete_sync, key)
        except Exception as exc:
            raise StoreWriteError(f"S3 delete failed for {key}: {exc}", key=key) from exc
        log.debug("Removed %s from s3://%s", key, self._bucket)

    async def aclose(self) -> None:
        """No-op — boto3 manages its own connection pooling."""
