"""
Storage Module

Blob store access for originals and compressed copies:
- MinIO-backed blob store with idempotent deletes
- Key namespace for originals (uploads/) and derivatives (compressed/)
- Presigned URL generation for direct client uploads and downloads
"""

from .blob_store import MinioBlobStore, StoredObject
from .keys import KeyNamespace
from .presigned import PresignedURLGenerator, PresignedURL

__all__ = [
    'MinioBlobStore',
    'StoredObject',
    'KeyNamespace',
    'PresignedURLGenerator',
    'PresignedURL',
]
