"""
Async KekUpload API client.

Thin aiohttp transport for the four stream endpoints.
"""
import asyncio
import json
import logging
from dataclasses import replace
from typing import Any, Optional

import aiohttp

from .config import APIConfig
from .errors import APIError
from .responses import StreamCreated, ChunkAccepted, StreamFinished, StreamRemoved
from ..exceptions import TransportError
from ..logging import get_logger


class KekUploadAPI:
    """
    Asynchronous KekUpload API client.
    
    Every call is a single request against ``base``. A non-200 status is
    raised as APIError; connection problems and timeouts are raised as
    TransportError. Nothing is retried here, retry policy belongs to the
    upload engine.
    
    Example:
        >>> async with KekUploadAPI("https://u.kotw.dev/api/") as api:
        ...     created = await api.create_stream("txt")
    """
    
    def __init__(
        self,
        base: Optional[str] = None,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize async API client.
        
        Args:
            base: Base URL of the API (overrides config.base_url)
            config: API configuration (uses defaults if not provided)
            session: Optional shared aiohttp session (not closed by us)
        """
        config = config or APIConfig.default()
        if base is not None:
            # replace() re-runs __post_init__, which adds the trailing slash
            config = replace(config, base_url=base)
        self._config = config
        self._session = session
        self._owns_session = session is None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._logger = get_logger('kekupload.api')
        # Let basicConfig() win once the application configured logging
        if not logging.getLogger().handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def base(self) -> str:
        """Base URL requests are sent to."""
        return self._config.base_url
    
    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config
    
    async def __aenter__(self) -> 'KekUploadAPI':
        await self._ensure_session()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session
    
    async def close(self):
        """Close client and release resources."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._connector = None
    
    async def req(self, method: str, path: str, data: Optional[bytes] = None) -> Any:
        """
        Send a request and return the decoded JSON body.
        
        Args:
            method: HTTP method
            path: Path relative to the base URL
            data: Optional raw request body
            
        Returns:
            Decoded JSON response
            
        Raises:
            APIError: If the server answers with a non-200 status
            TransportError: If the request could not complete
        """
        session = await self._ensure_session()
        url = f"{self._config.base_url}{path}"
        
        try:
            async with session.request(method, url, data=data) as response:
                body = await response.read()
                if response.status != 200:
                    raise APIError(response.status, self._decode(body), path)
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"{method} {path} timed out") from e
        
        try:
            return json.loads(body)
        except ValueError as e:
            raise TransportError(f"Invalid JSON response for {path}") from e
    
    @staticmethod
    def _decode(body: bytes) -> Any:
        # Error pages from proxies need not be UTF-8
        text = body.decode('utf-8', errors='replace')
        try:
            return json.loads(text)
        except ValueError:
            return text or None
    
    async def create_stream(self, extension: str) -> StreamCreated:
        """Open a new upload stream for a file with the given extension."""
        path = f"c/{extension}"
        result = StreamCreated.from_dict(await self.req('POST', path), path)
        self._logger.debug(f"Stream created: {result.stream_id}")
        return result
    
    async def upload_chunk(self, stream_id: str, content_hash: str, chunk: bytes) -> ChunkAccepted:
        """Upload one chunk addressed by its SHA-1."""
        path = f"u/{stream_id}/{content_hash}"
        return ChunkAccepted.from_dict(await self.req('POST', path, chunk), path)
    
    async def finish_stream(self, stream_id: str, file_hash: str) -> StreamFinished:
        """Finalize a stream into an object given the whole-file SHA-1."""
        path = f"f/{stream_id}/{file_hash}"
        return StreamFinished.from_dict(await self.req('POST', path), path)
    
    async def remove_stream(self, stream_id: str) -> StreamRemoved:
        """Abort a stream; no object is produced."""
        path = f"r/{stream_id}"
        return StreamRemoved.from_dict(await self.req('POST', path), path)
