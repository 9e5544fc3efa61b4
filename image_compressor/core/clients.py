"""
Client factories.

MinIO and Redis clients are built once per process (API lifespan, DAG task)
and handed to the components that need them.
"""
import os

import certifi
import redis
import urllib3
from minio import Minio

from image_compressor.core.config import Settings

MINIO_CONNECT_TIMEOUT_SECONDS = 10


def get_minio_http_client(settings: Settings) -> urllib3.PoolManager:
    """
    HTTP pool for the MinIO client.

    A single request never outlives the compression deadline, so a stalled
    fetch fails before the worker's own deadline check would.
    """
    total = settings.COMPRESSION_TIMEOUT_SECONDS
    return urllib3.PoolManager(
        timeout=urllib3.Timeout(
            total=total,
            connect=min(MINIO_CONNECT_TIMEOUT_SECONDS, total),
        ),
        maxsize=10,
        cert_reqs="CERT_REQUIRED",
        ca_certs=os.environ.get("SSL_CERT_FILE") or certifi.where(),
        retries=urllib3.Retry(
            total=3,
            backoff_factor=0.2,
            status_forcelist=[500, 502, 503, 504],
        ),
    )


def get_minio_client(settings: Settings) -> Minio:
    """
    Create and return a MinIO client instance.

    Returns:
        Minio: Configured MinIO client
    """
    return Minio(
        f"{settings.MINIO_HOST}:{settings.MINIO_PORT}",
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_SECURE,
        region=settings.MINIO_REGION,
        http_client=get_minio_http_client(settings),
    )


def get_redis_client(settings: Settings) -> redis.Redis:
    """Create a Redis client for the delay queue."""
    return redis.Redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=5,
    )
