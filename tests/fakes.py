"""
Substitute collaborators and builders shared by the test suite.
"""
import io
from datetime import timedelta

from PIL import Image

from image_compressor.core.exceptions import ObjectNotFoundError, StorageUnavailableError
from image_compressor.storage.blob_store import StoredObject

# 2023-11-14T22:13:20Z
T0 = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000
TEST_BUCKET = "test-bucket"


class FakeClock:
    """Settable epoch-millis clock."""

    def __init__(self, now_ms: int = T0):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class FakeBlobStore:
    """In-memory stand-in for MinioBlobStore."""

    def __init__(self, bucket_name: str = TEST_BUCKET):
        self.bucket_name = bucket_name
        self.objects = {}
        self.deleted = []
        self.fail_deletes = False
        self.fail_puts = False

    def ensure_bucket(self):
        pass

    def add(self, key, data, content_type="image/png", bucket=None):
        self.objects[(bucket or self.bucket_name, key)] = StoredObject(key, data, content_type)

    def get_object(self, key, bucket=None):
        bucket = bucket or self.bucket_name
        try:
            return self.objects[(bucket, key)]
        except KeyError:
            raise ObjectNotFoundError(bucket, key)

    def put_object(self, key, data, content_type="application/octet-stream", bucket=None):
        if self.fail_puts:
            raise StorageUnavailableError("simulated put failure")
        self.add(key, data, content_type, bucket)

    def delete_object(self, key, bucket=None):
        if self.fail_deletes:
            raise StorageUnavailableError("simulated delete failure")
        if self.objects.pop((bucket or self.bucket_name, key), None) is not None:
            self.deleted.append(key)

    def object_exists(self, key, bucket=None):
        return (bucket or self.bucket_name, key) in self.objects

    def presign(self, method, key, expires: timedelta):
        return (
            f"http://minio.test/{self.bucket_name}/{key}"
            f"?X-Amz-Method={method}&X-Amz-Expires={int(expires.total_seconds())}"
        )


def make_image_bytes(fmt: str = "PNG", mode: str = "RGBA", size=(64, 48)) -> bytes:
    """Small gradient image encoded in ``fmt``."""
    img = Image.new(mode, size)
    pixels = img.load()
    for x in range(size[0]):
        for y in range(size[1]):
            if mode == "RGBA":
                pixels[x, y] = (x * 4 % 256, y * 5 % 256, (x + y) % 256, 200)
            else:
                pixels[x, y] = (x * 4 % 256, y * 5 % 256, (x + y) % 256)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def object_created_event(key: str, bucket: str = TEST_BUCKET, event_name: str = "s3:ObjectCreated:Put") -> dict:
    """Minimal S3/MinIO object-created notification."""
    return {
        "EventName": event_name,
        "Key": f"{bucket}/{key}",
        "Records": [
            {
                "eventVersion": "2.0",
                "eventSource": "minio:s3",
                "eventName": event_name,
                "s3": {
                    "bucket": {"name": bucket},
                    "object": {"key": key, "size": 1024},
                },
            }
        ],
    }
