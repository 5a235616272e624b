"""
Chunking strategies for file uploads.

The same fixed-size strategy splits a file into read-windows and each
window into upload chunks.
"""
from abc import ABC, abstractmethod
from typing import List

from ..models import ChunkInfo


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""
    
    @abstractmethod
    def calculate_chunks(self, length: int, offset: int = 0, first_index: int = 0) -> List[ChunkInfo]:
        """Calculate chunk boundaries."""
        pass


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Fixed-size chunking strategy.
    
    Every chunk has chunk_size bytes except the last, which holds the
    remainder.
    """
    
    def __init__(self, chunk_size: int):
        """
        Initialize with chunk size.
        
        Args:
            chunk_size: Size of each chunk in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size
    
    def calculate_chunks(self, length: int, offset: int = 0, first_index: int = 0) -> List[ChunkInfo]:
        """
        Calculate fixed-size chunk boundaries.
        
        Args:
            length: Number of bytes to split
            offset: Absolute position of the first byte
            first_index: Index given to the first chunk
            
        Returns:
            List of ChunkInfo with absolute start/end positions
        """
        chunks = []
        position = offset
        end_of_range = offset + length
        index = first_index
        
        while position < end_of_range:
            end = min(position + self.chunk_size, end_of_range)
            chunks.append(ChunkInfo(index=index, start=position, end=end))
            position = end
            index += 1
        
        return chunks
