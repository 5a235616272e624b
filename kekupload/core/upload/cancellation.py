"""Cooperative cancellation with acknowledgement."""
import asyncio


class CancellationToken:
    """
    One-shot cancellation request shared between a canceller and an upload.
    
    The upload checks ``requested`` at chunk boundaries (and between chunk
    retry attempts) and calls ``acknowledge()`` once it has stopped. The
    canceller awaits ``wait()`` to learn that the upload is torn down.
    """
    
    def __init__(self):
        self._requested = False
        self._acknowledged = asyncio.Event()
    
    @property
    def requested(self) -> bool:
        return self._requested
    
    @property
    def acknowledged(self) -> bool:
        return self._acknowledged.is_set()
    
    def request(self) -> None:
        """Arm the token. Repeated requests are no-ops."""
        self._requested = True
    
    def acknowledge(self) -> None:
        """Signal that the cancelled operation has stopped."""
        self._acknowledged.set()
    
    async def wait(self) -> None:
        """Wait until the operation acknowledges."""
        await self._acknowledged.wait()
