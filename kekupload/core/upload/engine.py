"""
Chunked upload engine.

Drives the protocol of one upload stream at a time:
begin -> upload_chunk* -> finish | destroy.
"""
import asyncio
import logging
from typing import Optional

from .cancellation import CancellationToken
from .models import FinishResult, StreamSession, StreamState
from .protocols import TransportProtocol
from ..crypto import sha1_hex
from ..exceptions import (
    StreamAlreadyOpenError,
    StreamNotInitializedError,
    TransportError,
    UploadCancelledError,
)
from ..logging import get_logger

logger = get_logger('kekupload.upload.engine')


class ChunkedUploader:
    """
    Owns one upload stream and its whole-file digest.
    
    Chunk uploads are retried on TransportError with no attempt limit and
    no backoff; the only way out of a failing chunk other than success is
    the cancellation token passed to upload_chunk(). finish() is a single
    attempt, since a failed finalization (hash mismatch, missing chunks)
    is not fixed by retrying.
    
    Example:
        >>> uploader = ChunkedUploader(KekUploadAPI("https://u.kotw.dev/api/"))
        >>> await uploader.begin("txt")
        >>> await uploader.upload_chunk(b"I love KekUpload")
        >>> result = await uploader.finish()
    """
    
    def __init__(self, api: TransportProtocol):
        """
        Initialize engine.
        
        Args:
            api: Transport client (KekUploadAPI or compatible)
        """
        self._api = api
        self._session: Optional[StreamSession] = None
        self._last_state = StreamState.UNINITIALIZED
    
    @property
    def api(self) -> TransportProtocol:
        return self._api
    
    @property
    def state(self) -> StreamState:
        """State of the open stream, or of the last one if none is open."""
        if self._session is not None:
            return self._session.state
        return self._last_state
    
    @property
    def is_open(self) -> bool:
        return self._session is not None and self._session.is_open
    
    @property
    def stream_id(self) -> Optional[str]:
        return self._session.stream_id if self._session else None
    
    def _require_session(self) -> StreamSession:
        if self._session is None or not self._session.is_open:
            raise StreamNotInitializedError()
        return self._session
    
    def _detach(self, state: StreamState) -> None:
        self._session.state = state
        self._last_state = state
        self._session = None
    
    async def begin(self, extension: str) -> None:
        """
        Open a new stream.
        
        Args:
            extension: File extension the object will be published with
            
        Raises:
            StreamAlreadyOpenError: If a stream is still open
            TransportError: If the server refuses to create the stream
        """
        if self.is_open:
            raise StreamAlreadyOpenError(
                f"Stream {self._session.stream_id} is still open; finish or destroy it first"
            )
        
        created = await self._api.create_stream(extension)
        self._session = StreamSession(stream_id=created.stream_id, extension=extension)
        logger.info(f"Stream {created.stream_id} opened (.{extension})")
    
    async def upload_chunk(
        self,
        data: bytes,
        cancel_token: Optional[CancellationToken] = None
    ) -> str:
        """
        Upload one chunk, retrying until the server accepts it.
        
        The chunk is folded into the whole-file digest once, before the
        first attempt. Chunks must be passed in file order.
        
        Args:
            data: Chunk bytes
            cancel_token: Optional token that stops the retry loop
            
        Returns:
            SHA-1 of the chunk as lowercase hex
            
        Raises:
            StreamNotInitializedError: If no stream is open
            UploadCancelledError: If cancellation was requested while retrying
        """
        session = self._require_session()
        
        content_hash = sha1_hex(data)
        session.hasher.update(data)
        
        attempt = 0
        while True:
            attempt += 1
            try:
                accepted = await self._api.upload_chunk(session.stream_id, content_hash, data)
                if not accepted.success:
                    raise TransportError(f"Server rejected chunk {content_hash}")
                break
            except TransportError as e:
                # Retries are unbounded; only the first failure is a warning
                level = logging.WARNING if attempt == 1 else logging.DEBUG
                logger.log(level, f"Chunk {content_hash} attempt {attempt} failed, retrying: {e}")
                # Yield so a canceller (or anything else) gets to run
                await asyncio.sleep(0)
                if cancel_token is not None and cancel_token.requested:
                    raise UploadCancelledError() from e
        
        session.chunks_uploaded += 1
        session.bytes_uploaded += len(data)
        logger.debug(
            f"Chunk {session.chunks_uploaded} ({len(data)} bytes, {content_hash}) "
            f"accepted after {attempt} attempt(s)"
        )
        return content_hash
    
    async def finish(self) -> FinishResult:
        """
        Finalize the stream into an object.
        
        Returns:
            FinishResult with the object id and whole-file hash
            
        Raises:
            StreamNotInitializedError: If no stream is open
            TransportError: If finalization fails (the stream stays open)
        """
        session = self._require_session()
        
        if session.whole_file_hash is None:
            session.whole_file_hash = session.hasher.finalize()
        
        finished = await self._api.finish_stream(session.stream_id, session.whole_file_hash)
        result = FinishResult(object_id=finished.object_id, hash=session.whole_file_hash)
        
        logger.info(
            f"Stream {session.stream_id} finished as {result.object_id} "
            f"({session.chunks_uploaded} chunks, {session.bytes_uploaded} bytes)"
        )
        self._detach(StreamState.FINALIZED)
        return result
    
    async def destroy(self) -> None:
        """
        Abort the stream; no object is published.
        
        The stream is closed locally even if the server call fails or the
        server refuses the removal.
        
        Raises:
            StreamNotInitializedError: If no stream is open
            TransportError: If the server call fails or answers success=false
        """
        session = self._require_session()
        stream_id = session.stream_id
        self._detach(StreamState.DESTROYED)
        
        removed = await self._api.remove_stream(stream_id)
        if not removed.success:
            raise TransportError(f"Server refused to remove stream {stream_id}")
        logger.info(f"Stream {stream_id} destroyed")
