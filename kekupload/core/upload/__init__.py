"""
Upload module for KekUpload chunked uploads.

Layers, leaves first: ChunkedUploader (stream protocol and digest),
FileUploader (file segmentation and cancellation), UploadQueue (one job
at a time), UploadFacade (wiring).
"""
from .cancellation import CancellationToken
from .engine import ChunkedUploader
from .segmenter import FileUploader
from .job_queue import UploadQueue
from .facade import UploadFacade, guess_extension
from .models import (
    StreamState,
    RunState,
    StreamSession,
    FinishResult,
    ChunkInfo,
    UploadConfig,
    UploadJob,
)
from .protocols import TransportProtocol, FileSourceProtocol, ChunkingStrategy
from .services import AsyncFileReader, MemoryFileReader, FileValidator, open_source

__all__ = [
    # Main classes
    'ChunkedUploader',
    'FileUploader',
    'UploadQueue',
    'UploadFacade',
    'CancellationToken',
    'guess_extension',
    
    # Models
    'StreamState',
    'RunState',
    'StreamSession',
    'FinishResult',
    'ChunkInfo',
    'UploadConfig',
    'UploadJob',
    
    # Protocols
    'TransportProtocol',
    'FileSourceProtocol',
    'ChunkingStrategy',
    
    # File sources
    'AsyncFileReader',
    'MemoryFileReader',
    'FileValidator',
    'open_source',
]
