"""
Domain exceptions.

Recorder and sweeper failures are operational (logged, retried by whatever
triggered them). Compression and upload errors are the only ones that reach
an end user; the API maps each ``code`` to an HTTP status.
"""


class ImageCompressorError(Exception):
    """Base class for all service errors."""

    code = "internal_error"


# Storage

class StorageError(ImageCompressorError):
    code = "storage_error"


class ObjectNotFoundError(StorageError):
    """The key does not resolve to an object in the bucket."""

    code = "object_not_found"

    def __init__(self, bucket: str, key: str):
        self.bucket = bucket
        self.key = key
        super().__init__(f"Object '{key}' not found in bucket '{bucket}'")


class StorageUnavailableError(StorageError):
    """Transient store failure: outage, permission error, network error."""

    code = "storage_unavailable"


# Queue

class QueueUnavailableError(ImageCompressorError):
    """The delay queue could not be reached."""

    code = "queue_unavailable"


# Lifecycle

class MalformedRecordError(ImageCompressorError):
    """A queue message body is not a valid lifecycle record."""

    code = "malformed_record"


class MalformedEventError(ImageCompressorError):
    """An object-created notification has no usable records."""

    code = "malformed_event"


# Compression

class CompressionError(ImageCompressorError):
    code = "compression_failed"


class SourceNotFoundError(CompressionError):
    """
    The original is gone: never uploaded, or already reclaimed by the
    retention sweep. Callers should treat this as "object expired".
    """

    code = "source_not_found"

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Source object '{key}' not found or expired")


class InvalidKeyError(CompressionError):
    code = "invalid_key"


class InvalidQualityError(CompressionError):
    code = "invalid_quality"


class InvalidImageError(CompressionError):
    code = "invalid_image"


class CompressionTimeoutError(CompressionError):
    code = "compression_timeout"


# Uploads

class InvalidUploadRequestError(ImageCompressorError):
    code = "invalid_upload_request"
