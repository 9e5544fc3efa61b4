"""
Component wiring.

Builds the long-lived clients and components once per process and returns
them in a single container. The API keeps it on ``app.state``; the sweep DAG
builds its own per task run. Tests pass substitute store/queue objects.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional

from image_compressor.compression.worker import CompressionWorker
from image_compressor.core.clients import get_minio_client, get_redis_client
from image_compressor.core.config import Settings
from image_compressor.lifecycle.policy import RetentionPolicy
from image_compressor.lifecycle.recorder import LifecycleRecorder
from image_compressor.lifecycle.sweeper import RetentionSweeper
from image_compressor.queue import DelayQueue, MemoryDelayQueue, RedisDelayQueue, epoch_ms
from image_compressor.storage.blob_store import MinioBlobStore
from image_compressor.storage.keys import KeyNamespace
from image_compressor.storage.presigned import PresignedURLGenerator

logger = logging.getLogger(__name__)


@dataclass
class Components:
    settings: Settings
    blob_store: object
    queue: DelayQueue
    namespace: KeyNamespace
    policy: RetentionPolicy
    url_generator: PresignedURLGenerator
    recorder: LifecycleRecorder
    sweeper: RetentionSweeper
    worker: CompressionWorker


def build_queue(settings: Settings, clock: Callable[[], int] = epoch_ms):
    if settings.QUEUE_BACKEND == "memory":
        logger.warning("Using in-process delay queue; lifecycle records will not survive a restart")
        return MemoryDelayQueue(name=settings.DELETE_QUEUE_NAME, clock=clock)

    return RedisDelayQueue(get_redis_client(settings), name=settings.DELETE_QUEUE_NAME, clock=clock)


def build_components(
    settings: Settings,
    blob_store=None,
    queue=None,
    clock: Callable[[], int] = epoch_ms
) -> Components:
    """
    Wire every component from ``settings``.

    Args:
        settings: Application settings
        blob_store: Store to use instead of a MinIO-backed one
        queue: Delay queue to use instead of the configured backend
        clock: Returns the current time in epoch milliseconds
    """
    if blob_store is None:
        blob_store = MinioBlobStore(get_minio_client(settings), settings.MINIO_BUCKET)
    if queue is None:
        queue = build_queue(settings, clock)

    namespace = KeyNamespace(
        upload_prefix=settings.UPLOAD_PREFIX,
        compressed_prefix=settings.COMPRESSED_PREFIX,
        bucket_name=settings.MINIO_BUCKET,
    )
    policy = RetentionPolicy.from_seconds(settings.RETENTION_THRESHOLD_SECONDS)

    url_generator = PresignedURLGenerator(
        blob_store,
        namespace,
        default_download_expiry=timedelta(seconds=settings.DOWNLOAD_URL_EXPIRY_SECONDS),
        default_upload_expiry=timedelta(seconds=settings.UPLOAD_URL_EXPIRY_SECONDS),
        clock=clock,
    )

    recorder = LifecycleRecorder(queue, namespace, clock=clock)
    sweeper = RetentionSweeper(
        queue,
        blob_store,
        policy,
        namespace,
        max_records=settings.SWEEP_MAX_RECORDS,
        visibility_timeout=settings.SWEEP_VISIBILITY_TIMEOUT_SECONDS,
        defer_until_due=settings.SWEEP_DEFER_UNTIL_DUE,
        clock=clock,
    )
    worker = CompressionWorker(
        blob_store,
        url_generator,
        namespace,
        default_quality=settings.DEFAULT_QUALITY,
        timeout_seconds=settings.COMPRESSION_TIMEOUT_SECONDS,
    )

    logger.info(
        f"Components ready (bucket={settings.MINIO_BUCKET}, queue={settings.QUEUE_BACKEND}:"
        f"{settings.DELETE_QUEUE_NAME}, retention={settings.RETENTION_THRESHOLD_SECONDS}s)"
    )

    return Components(
        settings=settings,
        blob_store=blob_store,
        queue=queue,
        namespace=namespace,
        policy=policy,
        url_generator=url_generator,
        recorder=recorder,
        sweeper=sweeper,
        worker=worker,
    )
