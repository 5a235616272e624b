"""
Protocol definitions for upload module.

Defines the collaborators the upload engine and segmenter depend on.
"""
from typing import Protocol, List, runtime_checkable

from ..api.responses import StreamCreated, ChunkAccepted, StreamFinished, StreamRemoved
from .models import ChunkInfo


class TransportProtocol(Protocol):
    """Protocol for the stream endpoints of an upload server."""
    
    async def create_stream(self, extension: str) -> StreamCreated:
        """Open a stream for a file with the given extension."""
        ...
    
    async def upload_chunk(self, stream_id: str, content_hash: str, chunk: bytes) -> ChunkAccepted:
        """Upload one content-addressed chunk."""
        ...
    
    async def finish_stream(self, stream_id: str, file_hash: str) -> StreamFinished:
        """Finalize a stream into an object."""
        ...
    
    async def remove_stream(self, stream_id: str) -> StreamRemoved:
        """Abort a stream."""
        ...


class FileSourceProtocol(Protocol):
    """Protocol for a readable byte source of known length."""
    
    @property
    def size(self) -> int:
        """Total size in bytes."""
        ...
    
    async def read_range(self, start: int, end: int) -> bytes:
        """
        Read bytes [start, end) fully into memory.
        
        Args:
            start: Start position in bytes
            end: End position in bytes
            
        Returns:
            Exactly end - start bytes
        """
        ...


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Protocol for splitting a byte range into chunks."""
    
    def calculate_chunks(self, length: int, offset: int = 0, first_index: int = 0) -> List[ChunkInfo]:
        """
        Split [offset, offset + length) into chunks.
        
        Args:
            length: Number of bytes to split
            offset: Absolute position of the first byte
            first_index: Index given to the first chunk
            
        Returns:
            Contiguous ChunkInfo list in ascending order
        """
        ...
