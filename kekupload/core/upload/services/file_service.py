"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import Tuple, Optional, Union, Any
import aiofiles

from ...logging import get_logger


class FileValidator:
    """
    Validates files before upload.
    
    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """
    
    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Tuple of (validated Path, file size in bytes)
            
        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path
        
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        
        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")
        
        return path, path.stat().st_size


class AsyncFileReader:
    """
    Asynchronous range reader for a file on disk.
    
    Uses aiofiles for non-blocking I/O. The handle is opened once and
    kept for the whole upload; read_range() opens it lazily.
    """
    
    def __init__(self, file_path: Union[str, Path], validator: Optional[FileValidator] = None):
        """
        Initialize file reader.
        
        Args:
            file_path: Path to the file
            validator: Optional validator (default FileValidator)
        """
        self._path, self._size = (validator or FileValidator()).validate(file_path)
        self._file_handle = None
        self._logger = get_logger('kekupload.upload.file')
    
    @property
    def path(self) -> Path:
        return self._path
    
    @property
    def size(self) -> int:
        return self._size
    
    @property
    def name(self) -> str:
        return self._path.name
    
    async def open(self) -> None:
        """Open the file for reading."""
        if self._file_handle is None:
            self._file_handle = await aiofiles.open(self._path, 'rb')
    
    async def close(self) -> None:
        """Close the file if open."""
        if self._file_handle is not None:
            await self._file_handle.close()
            self._file_handle = None
    
    async def __aenter__(self) -> 'AsyncFileReader':
        await self.open()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def read_range(self, start: int, end: int) -> bytes:
        """
        Read bytes [start, end) from the file.
        
        Raises:
            IOError: If the file ends before ``end``
        """
        await self.open()
        await self._file_handle.seek(start)
        data = await self._file_handle.read(end - start)
        if len(data) != end - start:
            raise IOError(
                f"Short read from {self._path}: expected {end - start} bytes at {start}, got {len(data)}"
            )
        self._logger.debug(f"Read range: {start}-{end} ({len(data)} bytes)")
        return data


class MemoryFileReader:
    """Range reader over an in-memory buffer."""
    
    def __init__(self, data: bytes, name: str = '<memory>'):
        self._data = bytes(data)
        self.name = name
    
    @property
    def size(self) -> int:
        return len(self._data)
    
    async def read_range(self, start: int, end: int) -> bytes:
        if start < 0 or end > len(self._data) or start > end:
            raise IOError(f"Range {start}-{end} outside buffer of {len(self._data)} bytes")
        return self._data[start:end]


def open_source(file: Union[str, Path, bytes, bytearray, memoryview, Any]):
    """
    Coerce an upload argument into a file source.
    
    Paths become AsyncFileReader, byte buffers become MemoryFileReader,
    and anything else with ``size`` and ``read_range`` is used as is.
    
    Raises:
        TypeError: If the object cannot be read as a file
    """
    if isinstance(file, (str, Path)):
        return AsyncFileReader(file)
    if isinstance(file, (bytes, bytearray, memoryview)):
        return MemoryFileReader(bytes(file))
    if hasattr(file, 'size') and hasattr(file, 'read_range'):
        return file
    raise TypeError(f"Cannot upload object of type {type(file).__name__}")
