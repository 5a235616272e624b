"""
File segmenter.

Feeds a file through the chunked upload engine in read-windows and
chunks, reporting progress and honouring cooperative cancellation.
"""
from typing import Callable, Optional

from .cancellation import CancellationToken
from .engine import ChunkedUploader
from .models import UploadConfig
from .protocols import ChunkingStrategy
from .services import open_source
from .strategies import FixedSizeChunkingStrategy
from ..exceptions import (
    AlreadyUploadingError,
    NotUploadingError,
    StreamNotInitializedError,
    TransportError,
    UploadCancelledError,
)
from ..logging import get_logger

logger = get_logger('kekupload.upload.segmenter')


class FileUploader:
    """
    Uploads whole files through a ChunkedUploader.
    
    The file is read ``read_size`` bytes at a time and each window is sent
    as ``chunk_size`` chunks, strictly in file order. Cancellation is
    checked at every chunk boundary, including the one after the last
    chunk, so a cancel requested while upload_file() is running always
    ends in a destroyed stream and UploadCancelledError.
    
    Progress is reported after each chunk is accepted, as the fraction of
    bytes uploaded; the last report is exactly 1.0. Empty files report
    nothing.
    """
    
    def __init__(self, engine: ChunkedUploader, config: Optional[UploadConfig] = None):
        """
        Initialize file uploader.
        
        Args:
            engine: Engine the chunks are sent through
            config: Read-window and chunk sizes
        """
        self._engine = engine
        self._config = config or UploadConfig()
        self._windows: ChunkingStrategy = FixedSizeChunkingStrategy(self._config.read_size)
        self._chunks: ChunkingStrategy = FixedSizeChunkingStrategy(self._config.chunk_size)
        self._token: Optional[CancellationToken] = None
    
    @property
    def engine(self) -> ChunkedUploader:
        return self._engine
    
    @property
    def config(self) -> UploadConfig:
        return self._config
    
    @property
    def is_uploading(self) -> bool:
        return self._token is not None
    
    async def upload_file(
        self,
        file,
        on_progress: Optional[Callable[[float], None]] = None
    ) -> None:
        """
        Upload a file into the open stream. Call engine.begin() first.
        
        Args:
            file: Path, bytes, or object with ``size`` and ``read_range``
            on_progress: Called with the uploaded fraction after each chunk
            
        Raises:
            StreamNotInitializedError: If no stream is open
            AlreadyUploadingError: If another upload_file() is in flight
            UploadCancelledError: If cancel() was called
        """
        if self._token is not None:
            raise AlreadyUploadingError("An upload is already in progress")
        if not self._engine.is_open:
            raise StreamNotInitializedError()
        
        source = open_source(file)
        token = CancellationToken()
        self._token = token
        
        try:
            await self._upload_source(source, on_progress, token)
        except UploadCancelledError:
            await self._abort_stream()
            logger.info(f"Upload of {getattr(source, 'name', 'file')} cancelled")
            raise
        finally:
            self._token = None
            # Release a canceller even when the upload ended some other way
            token.acknowledge()
            if source is not file and hasattr(source, 'close'):
                await source.close()
    
    async def _upload_source(self, source, on_progress, token: CancellationToken) -> None:
        total = source.size
        done = 0
        chunk_size = self._config.chunk_size
        
        for window in self._windows.calculate_chunks(total):
            self._check_cancelled(token)
            buffer = await source.read_range(window.start, window.end)
            
            for chunk in self._chunks.calculate_chunks(
                window.size, offset=window.start, first_index=window.start // chunk_size
            ):
                self._check_cancelled(token)
                data = buffer[chunk.start - window.start:chunk.end - window.start]
                await self._engine.upload_chunk(data, token)
                
                done += chunk.size
                logger.debug(f"Chunk {chunk.index} uploaded ({done}/{total} bytes)")
                if on_progress:
                    on_progress(done / total)
        
        self._check_cancelled(token)
    
    @staticmethod
    def _check_cancelled(token: CancellationToken) -> None:
        if token.requested:
            raise UploadCancelledError()
    
    async def _abort_stream(self) -> None:
        if not self._engine.is_open:
            return
        try:
            await self._engine.destroy()
        except TransportError as e:
            logger.warning(f"Failed to remove cancelled stream: {e}")
    
    def request_cancel(self) -> CancellationToken:
        """
        Ask the in-flight upload to stop at its next chunk boundary.
        
        Returns:
            The token, whose wait() completes once the upload stopped
            
        Raises:
            NotUploadingError: If no upload is in flight
        """
        if self._token is None:
            raise NotUploadingError()
        self._token.request()
        return self._token
    
    async def cancel(self) -> None:
        """
        Cancel the in-flight upload and wait until its stream is destroyed.
        
        Raises:
            NotUploadingError: If no upload is in flight
        """
        token = self.request_cancel()
        await token.wait()
