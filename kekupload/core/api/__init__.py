"""KekUpload API client module."""
from .async_client import KekUploadAPI
from .config import APIConfig, TimeoutConfig, DEFAULT_BASE_URL
from .errors import APIError
from .responses import StreamCreated, ChunkAccepted, StreamFinished, StreamRemoved

__all__ = [
    'KekUploadAPI',
    'APIConfig',
    'TimeoutConfig',
    'DEFAULT_BASE_URL',
    'APIError',
    'StreamCreated',
    'ChunkAccepted',
    'StreamFinished',
    'StreamRemoved',
]
