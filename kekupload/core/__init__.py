"""Core components of kekupload."""
from .exceptions import (
    KekUploadError,
    StreamNotInitializedError,
    StreamAlreadyOpenError,
    TransportError,
    UploadCancelledError,
    JobNotFoundError,
    NotUploadingError,
    AlreadyUploadingError,
)

__all__ = [
    'KekUploadError',
    'StreamNotInitializedError',
    'StreamAlreadyOpenError',
    'TransportError',
    'UploadCancelledError',
    'JobNotFoundError',
    'NotUploadingError',
    'AlreadyUploadingError',
]
