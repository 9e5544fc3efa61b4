"""
MinIO Blob Store

Thin wrapper around the MinIO client used by the compression worker and
the retention sweeper. Translates MinIO errors into the service's storage
exceptions:

- NoSuchKey / NoSuchObject      -> ObjectNotFoundError
- any other S3 / transport error -> StorageUnavailableError

Deletes are idempotent: removing a missing key succeeds.
"""
import io
import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import urllib3
from minio import Minio
from minio.error import InvalidResponseError, S3Error, ServerError

from image_compressor.core.exceptions import ObjectNotFoundError, StorageUnavailableError
from image_compressor.metrics import record_storage_operation

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = ("NoSuchKey", "NoSuchObject")

_TRANSPORT_ERRORS = (S3Error, ServerError, InvalidResponseError, urllib3.exceptions.HTTPError)


@dataclass
class StoredObject:
    """Object bytes with the metadata the worker needs."""
    key: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


class MinioBlobStore:
    """
    Blob store backed by a single MinIO bucket.

    Features:
    - get / put / delete / exists
    - Idempotent delete
    - Presigned GET and PUT URLs
    """

    def __init__(self, minio_client: Minio, bucket_name: str):
        """
        Initialize blob store

        Args:
            minio_client: MinIO client instance
            bucket_name: Target bucket name
        """
        self.client = minio_client
        self.bucket_name = bucket_name

    def ensure_bucket(self) -> None:
        """Create the bucket if it does not exist yet."""
        try:
            if not self.client.bucket_exists(self.bucket_name):
                self.client.make_bucket(self.bucket_name)
                logger.info(f"Created bucket: {self.bucket_name}")
        except _TRANSPORT_ERRORS as e:
            raise StorageUnavailableError(f"Failed to ensure bucket '{self.bucket_name}': {e}") from e

    def get_object(self, key: str, bucket: Optional[str] = None) -> StoredObject:
        """
        Read an object fully into memory.

        Raises:
            ObjectNotFoundError: key does not exist
            StorageUnavailableError: any other store failure
        """
        bucket = bucket or self.bucket_name
        start = time.time()
        response = None

        try:
            response = self.client.get_object(bucket, key)
            data = response.read()
            content_type = response.headers.get("Content-Type")
        except _TRANSPORT_ERRORS as e:
            record_storage_operation("get", False, time.time() - start)
            raise self._translate(e, bucket, key, "get") from e
        finally:
            if response is not None:
                response.close()
                response.release_conn()

        record_storage_operation("get", True, time.time() - start)
        return StoredObject(key=key, data=data, content_type=content_type)

    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        bucket: Optional[str] = None
    ) -> None:
        """Write an object in a single request."""
        bucket = bucket or self.bucket_name
        start = time.time()

        try:
            self.client.put_object(
                bucket,
                key,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type
            )
        except _TRANSPORT_ERRORS as e:
            record_storage_operation("put", False, time.time() - start)
            raise self._translate(e, bucket, key, "put") from e

        record_storage_operation("put", True, time.time() - start)
        logger.info(f"Stored {bucket}/{key} ({len(data)} bytes)")

    def delete_object(self, key: str, bucket: Optional[str] = None) -> None:
        """
        Delete an object. A missing key is treated as already deleted.

        Raises:
            StorageUnavailableError: the delete could not be performed
        """
        bucket = bucket or self.bucket_name
        start = time.time()

        try:
            self.client.remove_object(bucket, key)
        except _TRANSPORT_ERRORS as e:
            error = self._translate(e, bucket, key, "delete")
            if isinstance(error, ObjectNotFoundError):
                logger.debug(f"Delete of missing object {bucket}/{key} ignored")
            else:
                record_storage_operation("delete", False, time.time() - start)
                raise error from e

        record_storage_operation("delete", True, time.time() - start)
        logger.info(f"Deleted {bucket}/{key}")

    def object_exists(self, key: str, bucket: Optional[str] = None) -> bool:
        bucket = bucket or self.bucket_name
        try:
            self.client.stat_object(bucket, key)
            return True
        except _TRANSPORT_ERRORS as e:
            error = self._translate(e, bucket, key, "stat")
            if isinstance(error, ObjectNotFoundError):
                return False
            raise error from e

    def presign(self, method: str, key: str, expires: timedelta) -> str:
        """Generate a presigned GET or PUT URL for ``key``."""
        try:
            if method == "GET":
                return self.client.presigned_get_object(self.bucket_name, key, expires=expires)
            if method == "PUT":
                return self.client.presigned_put_object(self.bucket_name, key, expires=expires)
        except _TRANSPORT_ERRORS as e:
            raise self._translate(e, self.bucket_name, key, "presign") from e

        raise ValueError(f"Unsupported presign method: {method}")

    def _translate(self, error: Exception, bucket: str, key: str, operation: str):
        code = getattr(error, "code", None) if isinstance(error, S3Error) else None

        if code in NOT_FOUND_CODES:
            return ObjectNotFoundError(bucket, key)

        logger.error(f"Storage {operation} failed for {bucket}/{key}: {error}")
        return StorageUnavailableError(f"Storage {operation} failed for '{key}': {error}")
