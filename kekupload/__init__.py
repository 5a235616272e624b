"""
kekupload - Async Python client for KekUpload chunked uploads.

Usage:
    >>> from kekupload import KekUploadAPI, UploadFacade
    >>> 
    >>> async with KekUploadAPI("https://u.kotw.dev/api/") as api:
    ...     result = await UploadFacade(api).upload("video.mp4")
    ...     print(result.object_id)
"""
import logging

from .core.api import KekUploadAPI, APIConfig, TimeoutConfig, APIError
from .core.exceptions import (
    KekUploadError,
    StreamNotInitializedError,
    StreamAlreadyOpenError,
    TransportError,
    UploadCancelledError,
    JobNotFoundError,
    NotUploadingError,
    AlreadyUploadingError,
)
from .core.upload import (
    ChunkedUploader,
    FileUploader,
    UploadQueue,
    UploadFacade,
    UploadConfig,
    UploadJob,
    FinishResult,
    StreamState,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for kekupload modules.
    
    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'kekupload',
        'kekupload.api',
        'kekupload.upload.engine',
        'kekupload.upload.segmenter',
        'kekupload.upload.queue',
        'kekupload.upload.file',
    ]
    
    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'KekUploadAPI',
    'APIConfig',
    'TimeoutConfig',
    'APIError',
    'KekUploadError',
    'StreamNotInitializedError',
    'StreamAlreadyOpenError',
    'TransportError',
    'UploadCancelledError',
    'JobNotFoundError',
    'NotUploadingError',
    'AlreadyUploadingError',
    'ChunkedUploader',
    'FileUploader',
    'UploadQueue',
    'UploadFacade',
    'UploadConfig',
    'UploadJob',
    'FinishResult',
    'StreamState',
    'setup_logging',
]
