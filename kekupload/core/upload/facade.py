"""
Upload facade.

Provides a simplified interface for file uploads.
Follows Facade Pattern - hides the engine/segmenter/queue wiring.
"""
import asyncio
from pathlib import Path
from typing import Callable, Optional, Union

from .engine import ChunkedUploader
from .job_queue import UploadQueue
from .models import FinishResult, UploadConfig, UploadJob
from .protocols import TransportProtocol
from .segmenter import FileUploader

DEFAULT_EXTENSION = 'bin'


def guess_extension(file, default: str = DEFAULT_EXTENSION) -> str:
    """Extension of a path or named file source, without the dot."""
    name = file if isinstance(file, (str, Path)) else getattr(file, 'name', None)
    if name:
        suffix = Path(name).suffix.lstrip('.')
        if suffix:
            return suffix
    return default


class UploadFacade:
    """
    Simplified interface for KekUpload file uploads.
    
    All uploads go through one queue, so concurrent upload() calls run one
    after another on a single engine.
    
    Example:
        >>> async with KekUploadAPI("https://u.kotw.dev/api/") as api:
        ...     uploader = UploadFacade(api)
        ...     result = await uploader.upload("photo.png")
        ...     print(result.object_id, result.hash)
    """
    
    def __init__(self, api: TransportProtocol, config: Optional[UploadConfig] = None):
        """
        Initialize upload facade.
        
        Args:
            api: Transport client
            config: Read-window and chunk sizes
        """
        self._queue = UploadQueue(FileUploader(ChunkedUploader(api), config))
    
    @property
    def queue(self) -> UploadQueue:
        return self._queue
    
    async def upload(
        self,
        file: Union[str, Path, bytes],
        extension: Optional[str] = None,
        on_progress: Optional[Callable[[float], None]] = None
    ) -> FinishResult:
        """
        Upload a file and wait for the result.
        
        Args:
            file: Path, bytes, or file source
            extension: Extension to publish with (guessed from the path if omitted)
            on_progress: Called with the uploaded fraction after each chunk
            
        Returns:
            FinishResult with object id and whole-file hash
            
        Raises:
            UploadCancelledError: If the job was cancelled
            TransportError: If the upload failed
        """
        future = asyncio.get_running_loop().create_future()
        
        def on_success(result: FinishResult):
            if not future.done():
                future.set_result(result)
        
        def on_error(error: Exception):
            if not future.done():
                future.set_exception(error)
        
        self._queue.add_job(UploadJob(
            file=file,
            extension=extension or guess_extension(file),
            on_success=on_success,
            on_error=on_error,
            on_progress=on_progress,
        ))
        return await future
    
    def add_job(self, job: UploadJob) -> int:
        """Queue a job with its own callbacks."""
        return self._queue.add_job(job)
    
    async def cancel_job(self, job_id: int) -> None:
        """Cancel a queued or active job."""
        await self._queue.cancel_job(job_id)
