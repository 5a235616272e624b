"""Upload models."""
from .upload_models import (
    StreamState,
    RunState,
    StreamSession,
    FinishResult,
    ChunkInfo,
    UploadConfig,
    UploadJob,
    DEFAULT_READ_SIZE,
    DEFAULT_CHUNK_SIZE,
)

__all__ = [
    'StreamState',
    'RunState',
    'StreamSession',
    'FinishResult',
    'ChunkInfo',
    'UploadConfig',
    'UploadJob',
    'DEFAULT_READ_SIZE',
    'DEFAULT_CHUNK_SIZE',
]
