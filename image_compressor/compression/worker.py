"""
Compression Worker

Fetches an original, writes a smaller JPEG copy under ``compressed/`` and
returns a short-lived download URL for it.

The original may be reclaimed by the retention sweep at any time after the
retention window. A missing source is reported as SourceNotFoundError so the
caller can tell "object expired" apart from a server fault.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from image_compressor.compression.codec import OUTPUT_CONTENT_TYPE, reencode_jpeg
from image_compressor.core.exceptions import (
    CompressionTimeoutError,
    InvalidImageError,
    InvalidKeyError,
    InvalidQualityError,
    ObjectNotFoundError,
    SourceNotFoundError,
    StorageError,
)
from image_compressor.metrics import record_compression
from image_compressor.storage.keys import KeyNamespace
from image_compressor.storage.presigned import PresignedURLGenerator

logger = logging.getLogger(__name__)


@dataclass
class CompressionResult:
    object_url: str
    source_key: str
    compressed_key: str
    original_size: int
    compressed_size: int
    quality: int
    expires_in_seconds: int

    @property
    def compression_ratio(self) -> float:
        """input_size / output_size"""
        if not self.compressed_size:
            return 0.0
        return self.original_size / self.compressed_size

    def to_dict(self) -> Dict[str, Any]:
        return {
            'objectURL': self.object_url,
            'source_key': self.source_key,
            'compressed_key': self.compressed_key,
            'original_size': self.original_size,
            'compressed_size': self.compressed_size,
            'quality': self.quality,
            'expires_in_seconds': self.expires_in_seconds,
            'compression_ratio': round(self.compression_ratio, 3),
        }


class CompressionWorker:
    """
    Single-shot fetch, compress, store.

    The deadline is checked between stages; once it has passed nothing is
    written, so a timed-out request never leaves a partial derivative.
    """

    DEFAULT_QUALITY = 80
    DEFAULT_TIMEOUT_SECONDS = 120

    def __init__(
        self,
        blob_store,
        url_generator: PresignedURLGenerator,
        namespace: KeyNamespace,
        default_quality: int = DEFAULT_QUALITY,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        encoder: Callable[[bytes, int], bytes] = reencode_jpeg,
        monotonic: Callable[[], float] = time.monotonic
    ):
        self.store = blob_store
        self.url_generator = url_generator
        self.namespace = namespace
        self.default_quality = default_quality
        self.timeout_seconds = timeout_seconds
        self.encoder = encoder
        self.monotonic = monotonic

    def compress(self, key: str, quality: Optional[int] = None) -> CompressionResult:
        """
        Compress the original at ``key``.

        Raises:
            InvalidKeyError: empty key or a key under compressed/
            InvalidQualityError: quality outside 0..100
            SourceNotFoundError: the original does not exist (expired)
            InvalidImageError: the original is not a decodable image
            CompressionTimeoutError: the deadline passed before the write
            StorageUnavailableError: the store failed
        """
        quality = self._resolve_quality(quality)
        source_key = self.namespace.normalize(key)

        if self.namespace.is_compressed(source_key):
            raise InvalidKeyError(f"'{source_key}' is already a compressed copy")

        compressed_key = self.namespace.compressed_key(source_key)
        started = self.monotonic()

        try:
            source = self.store.get_object(source_key)
        except ObjectNotFoundError as e:
            logger.warning(f"Compression source '{source_key}' not found (expired or never uploaded)")
            record_compression("source_not_found", self.monotonic() - started)
            raise SourceNotFoundError(source_key) from e
        except StorageError:
            record_compression("failed", self.monotonic() - started)
            raise

        self._check_deadline(started, "fetch", source_key)

        try:
            compressed = self.encoder(source.data, quality)
        except InvalidImageError:
            record_compression("failed", self.monotonic() - started)
            raise

        self._check_deadline(started, "encode", source_key)

        try:
            self.store.put_object(compressed_key, compressed, content_type=OUTPUT_CONTENT_TYPE)
            presigned = self.url_generator.generate_download_url(compressed_key)
        except StorageError:
            record_compression("failed", self.monotonic() - started)
            raise

        result = CompressionResult(
            object_url=presigned.url,
            source_key=source_key,
            compressed_key=compressed_key,
            original_size=source.size,
            compressed_size=len(compressed),
            quality=quality,
            expires_in_seconds=presigned.expires_in_seconds,
        )

        duration = self.monotonic() - started
        record_compression("success", duration, result.compression_ratio)
        logger.info(
            f"Compressed {source_key} -> {compressed_key} "
            f"({result.original_size} -> {result.compressed_size} bytes, q={quality}, {duration:.2f}s)"
        )

        return result

    def _resolve_quality(self, quality: Optional[int]) -> int:
        if quality is None:
            return self.default_quality
        if isinstance(quality, bool) or not isinstance(quality, int) or not 0 <= quality <= 100:
            raise InvalidQualityError(f"Quality must be an integer between 0 and 100, got {quality!r}")
        return quality

    def _check_deadline(self, started: float, stage: str, key: str) -> None:
        elapsed = self.monotonic() - started
        if elapsed > self.timeout_seconds:
            record_compression("timeout", elapsed)
            logger.error(f"Compression of '{key}' exceeded {self.timeout_seconds}s after {stage}")
            raise CompressionTimeoutError(
                f"Compression of '{key}' exceeded {self.timeout_seconds}s deadline"
            )
