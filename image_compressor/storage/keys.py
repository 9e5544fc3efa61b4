"""
Object key namespace.

Originals live under ``uploads/<epoch-millis>.<ext>``; compressed copies
live under ``compressed/<name>`` and are never retention candidates.
"""
import logging
from typing import Optional
from urllib.parse import unquote, unquote_plus

from image_compressor.core.exceptions import InvalidKeyError, InvalidUploadRequestError

logger = logging.getLogger(__name__)


class KeyNamespace:
    """Builds and classifies object keys for one bucket."""

    def __init__(
        self,
        upload_prefix: str = "uploads/",
        compressed_prefix: str = "compressed/",
        bucket_name: Optional[str] = None
    ):
        self.upload_prefix = upload_prefix
        self.compressed_prefix = compressed_prefix
        self.bucket_name = bucket_name

    def upload_key(self, file_name: str, now_ms: int) -> str:
        """
        Key for a new original, e.g. ``uploads/1700000000000.png``.

        Only the client's extension survives; the rest of the name is
        replaced by the upload time.
        """
        if not file_name or "." not in file_name:
            raise InvalidUploadRequestError(f"File name '{file_name}' has no extension")

        ext = file_name.rsplit(".", 1)[-1].strip().lower()
        if not ext or not ext.isalnum():
            raise InvalidUploadRequestError(f"File name '{file_name}' has an invalid extension")

        return f"{self.upload_prefix}{now_ms}.{ext}"

    def compressed_key(self, key: str) -> str:
        """Derived key for the compressed copy of ``key``."""
        name = key.rstrip("/").split("/")[-1]
        if not name:
            raise InvalidKeyError(f"Cannot derive a compressed key from '{key}'")
        return f"{self.compressed_prefix}{name}"

    def is_original(self, key: str) -> bool:
        return key.startswith(self.upload_prefix) and len(key) > len(self.upload_prefix)

    def is_compressed(self, key: str) -> bool:
        return key.startswith(self.compressed_prefix)

    def normalize(self, key: str) -> str:
        """
        Turn a client-supplied key into a bucket key.

        Browsers send the upload URL's pathname: ``/uploads/1.png`` for
        virtual-host URLs or ``/<bucket>/uploads/1.png`` for path-style URLs.
        """
        key = unquote(key or "").strip().lstrip("/")

        if self.bucket_name and key.startswith(f"{self.bucket_name}/"):
            key = key[len(self.bucket_name) + 1:]

        if not key:
            raise InvalidKeyError("Object key is required")

        return key

    @staticmethod
    def decode_event_key(raw_key: str) -> str:
        """S3 notifications URL-encode keys, with '+' standing for a space."""
        return unquote_plus(raw_key)
