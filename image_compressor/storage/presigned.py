"""
Presigned URL Generator Service

Generates temporary presigned URLs so clients can talk to the bucket
directly:
- Upload URLs (PUT) for new originals
- Download URLs (GET) for compressed copies
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from image_compressor.storage.keys import KeyNamespace

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass
class PresignedURL:
    """
    Presigned URL with metadata
    """
    url: str
    object_name: str
    method: str  # GET, PUT
    expires_in_seconds: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self) -> bool:
        """Check if URL has expired"""
        return datetime.now(timezone.utc) > self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'url': self.url,
            'object_name': self.object_name,
            'method': self.method,
            'expires_in_seconds': self.expires_in_seconds,
            'created_at': self.created_at.isoformat(),
            'expires_at': self.expires_at.isoformat(),
        }


class PresignedURLGenerator:
    """
    Presigned URL generator

    Features:
    - Short-lived download URLs for compressed copies
    - Upload URLs under the originals namespace
    - Expiry capped at the S3 maximum of 7 days
    """

    DEFAULT_DOWNLOAD_EXPIRY = timedelta(seconds=300)
    DEFAULT_UPLOAD_EXPIRY = timedelta(seconds=300)
    MAX_EXPIRY = timedelta(days=7)

    def __init__(
        self,
        blob_store,
        namespace: KeyNamespace,
        default_download_expiry: Optional[timedelta] = None,
        default_upload_expiry: Optional[timedelta] = None,
        clock: Callable[[], int] = _now_ms
    ):
        """
        Initialize presigned URL generator

        Args:
            blob_store: Store exposing ``presign(method, key, expires)``
            namespace: Key namespace used for new upload keys
            default_download_expiry: Default download URL expiration
            default_upload_expiry: Default upload URL expiration
            clock: Returns the current time in epoch milliseconds
        """
        self.store = blob_store
        self.namespace = namespace
        self.default_download_expiry = default_download_expiry or self.DEFAULT_DOWNLOAD_EXPIRY
        self.default_upload_expiry = default_upload_expiry or self.DEFAULT_UPLOAD_EXPIRY
        self.clock = clock

    def generate_download_url(
        self,
        object_name: str,
        expires: Optional[timedelta] = None
    ) -> PresignedURL:
        """
        Generate presigned URL for downloading an object

        Args:
            object_name: Object key in bucket
            expires: URL expiration time (default: 5 minutes)

        Returns:
            PresignedURL object with download URL
        """
        return self._generate("GET", object_name, expires or self.default_download_expiry)

    def generate_upload_url(
        self,
        file_name: str,
        expires: Optional[timedelta] = None
    ) -> PresignedURL:
        """
        Generate presigned URL for uploading a new original

        The key is derived from the upload time and the extension of
        ``file_name``, e.g. ``photo.PNG`` -> ``uploads/1700000000000.png``.
        """
        object_name = self.namespace.upload_key(file_name, self.clock())
        return self._generate("PUT", object_name, expires or self.default_upload_expiry)

    def _generate(self, method: str, object_name: str, expires: timedelta) -> PresignedURL:
        if expires > self.MAX_EXPIRY:
            logger.warning(f"Expiry time {expires} exceeds maximum {self.MAX_EXPIRY}, capping")
            expires = self.MAX_EXPIRY

        url = self.store.presign(method, object_name, expires)

        created_at = datetime.now(timezone.utc)
        presigned_url = PresignedURL(
            url=url,
            object_name=object_name,
            method=method,
            expires_in_seconds=int(expires.total_seconds()),
            created_at=created_at,
            expires_at=created_at + expires
        )

        logger.info(
            f"Generated {method} URL for '{object_name}' "
            f"(expires in {expires.total_seconds():.0f}s)"
        )

        return presigned_url
