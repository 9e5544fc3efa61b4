"""
FastAPI dependencies resolving components from ``app.state``.
"""
from fastapi import Request

from image_compressor.bootstrap import Components
from image_compressor.compression.worker import CompressionWorker
from image_compressor.lifecycle.recorder import LifecycleRecorder
from image_compressor.lifecycle.sweeper import RetentionSweeper


def get_components(request: Request) -> Components:
    return request.app.state.components


def get_worker(request: Request) -> CompressionWorker:
    return get_components(request).worker


def get_recorder(request: Request) -> LifecycleRecorder:
    return get_components(request).recorder


def get_sweeper(request: Request) -> RetentionSweeper:
    return get_components(request).sweeper
