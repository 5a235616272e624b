"""Upload services module."""
from .file_service import FileValidator, AsyncFileReader, MemoryFileReader, open_source

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'MemoryFileReader',
    'open_source',
]
