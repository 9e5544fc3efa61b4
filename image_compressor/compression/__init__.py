"""
Image compression: Pillow re-encode plus the fetch/store worker around it.
"""
from .codec import reencode_jpeg
from .worker import CompressionResult, CompressionWorker

__all__ = [
    'reencode_jpeg',
    'CompressionResult',
    'CompressionWorker',
]
