"""
Data models for upload module.

Uses dataclasses for type-safe data structures.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union

from ...crypto import Sha1Hasher


DEFAULT_READ_SIZE = 32 * 1024 * 1024  # 32 MiB
DEFAULT_CHUNK_SIZE = 2 * 1024 * 1024  # 2 MiB


class StreamState(Enum):
    """Lifecycle of a server-side upload stream."""
    UNINITIALIZED = 'uninitialized'
    OPEN = 'open'
    FINALIZED = 'finalized'
    DESTROYED = 'destroyed'


class RunState(Enum):
    """Whether an upload queue currently has a worker draining it."""
    IDLE = 'idle'
    RUNNING = 'running'


@dataclass
class StreamSession:
    """
    State of one upload stream.
    
    The running whole-file digest belongs to the session, so every
    stream starts from an empty digest.
    
    Attributes:
        stream_id: Token assigned by the server on creation
        extension: File extension given on creation
        hasher: Running whole-file digest
        state: Current lifecycle state
        chunks_uploaded: Number of chunks accepted by the server
        bytes_uploaded: Bytes accepted by the server
        whole_file_hash: Finalized digest, set by the first finish attempt
    """
    stream_id: str
    extension: str
    hasher: Sha1Hasher = field(default_factory=Sha1Hasher)
    state: StreamState = StreamState.OPEN
    chunks_uploaded: int = 0
    bytes_uploaded: int = 0
    whole_file_hash: Optional[str] = None
    
    @property
    def is_open(self) -> bool:
        return self.state is StreamState.OPEN


@dataclass(frozen=True)
class FinishResult:
    """
    Result of a finalized stream.
    
    Attributes:
        object_id: Id the server assigned to the uploaded object
        hash: Whole-file SHA-1 as lowercase hex
    """
    object_id: str
    hash: str


@dataclass(frozen=True)
class ChunkInfo:
    """
    Information about a file chunk.
    
    Attributes:
        index: Chunk index
        start: Start position in bytes
        end: End position in bytes
    """
    index: int
    start: int
    end: int
    
    @property
    def size(self) -> int:
        """Returns chunk size."""
        return self.end - self.start


@dataclass
class UploadConfig:
    """
    Configuration for file segmentation.
    
    Attributes:
        read_size: Bytes read into memory at once (read-window)
        chunk_size: Bytes sent per chunk upload
    
    read_size must be a multiple of chunk_size so that only the last
    chunk of a file can be shorter than chunk_size.
    """
    read_size: int = DEFAULT_READ_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    
    def __post_init__(self):
        """Validate sizes."""
        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        if self.read_size <= 0:
            raise ValueError("Read size must be positive")
        if self.chunk_size > self.read_size:
            raise ValueError(
                f"Chunk size {self.chunk_size} exceeds read size {self.read_size}"
            )
        if self.read_size % self.chunk_size:
            raise ValueError(
                f"Read size {self.read_size} is not a multiple of chunk size {self.chunk_size}"
            )


Callback = Callable[..., Union[None, Awaitable[None]]]


@dataclass
class UploadJob:
    """
    A queued request to upload one file end to end.
    
    Attributes:
        file: Path, bytes, or file source to upload
        extension: Extension the stream is created with
        on_success: Called with the FinishResult
        on_error: Called with the exception (UploadCancelledError if cancelled)
        on_finally: Called once after on_success/on_error
        on_progress: Called with the uploaded fraction after each chunk
    
    on_success, on_error and on_finally may be coroutine functions.
    """
    file: Union[str, Path, bytes, Any]
    extension: str
    on_success: Optional[Callback] = None
    on_error: Optional[Callback] = None
    on_finally: Optional[Callback] = None
    on_progress: Optional[Callable[[float], None]] = None
