"""
Upload job queue.

Serializes whole-file uploads through a single FileUploader.
"""
import asyncio
import inspect
from collections import deque
from typing import Deque, Dict, List, Optional

from .models import RunState, UploadJob
from .segmenter import FileUploader
from ..exceptions import JobNotFoundError, TransportError
from ..logging import get_logger

logger = get_logger('kekupload.upload.queue')


class UploadQueue:
    """
    FIFO of upload jobs processed one at a time.
    
    One worker task drains the queue; add_job() only starts a worker when
    the queue is idle. Each job runs begin -> upload_file -> finish on the
    shared uploader and its callbacks complete before the next job starts.
    
    Example:
        >>> queue = UploadQueue(FileUploader(ChunkedUploader(api)))
        >>> job_id = queue.add_job(UploadJob(file="a.txt", extension="txt",
        ...                                  on_success=print))
        >>> await queue.join()
    """
    
    def __init__(self, uploader: FileUploader):
        """
        Initialize queue.
        
        Args:
            uploader: Segmenter (and through it the engine) jobs run on
        """
        self._uploader = uploader
        self._jobs: Dict[int, UploadJob] = {}
        self._queue: Deque[int] = deque()
        self._next_id = 0
        self._active: Optional[int] = None
        self._state = RunState.IDLE
        self._worker: Optional[asyncio.Task] = None
        self._idle = asyncio.Event()
        self._idle.set()
    
    @property
    def uploader(self) -> FileUploader:
        return self._uploader
    
    @property
    def active_job_id(self) -> Optional[int]:
        return self._active
    
    @property
    def pending_job_ids(self) -> List[int]:
        return list(self._queue)
    
    @property
    def is_running(self) -> bool:
        return self._state is RunState.RUNNING
    
    def add_job(self, job: UploadJob) -> int:
        """
        Queue a job. Must be called from a running event loop.
        
        Args:
            job: Job to run
            
        Returns:
            Job id usable with cancel_job()
        """
        job_id = self._next_id
        self._next_id += 1
        self._jobs[job_id] = job
        self._queue.append(job_id)
        logger.debug(f"Job {job_id} queued (.{job.extension})")
        
        if self._state is RunState.IDLE:
            self._state = RunState.RUNNING
            self._idle.clear()
            self._worker = asyncio.get_running_loop().create_task(self._run())
        
        return job_id
    
    async def cancel_job(self, job_id: int) -> None:
        """
        Cancel a queued or active job.
        
        The active job is cancelled through the uploader and this waits
        until its stream is destroyed. A queued job is dropped without
        touching the network and its callbacks never fire.
        
        Raises:
            JobNotFoundError: If the job is neither active nor queued
            NotUploadingError: If the active job is not in its upload phase
        """
        if self._active == job_id:
            logger.info(f"Cancelling active job {job_id}")
            await self._uploader.cancel()
            return
        
        if job_id not in self._jobs:
            raise JobNotFoundError(job_id)
        
        del self._jobs[job_id]
        self._queue.remove(job_id)
        logger.info(f"Job {job_id} removed from queue")
    
    async def join(self) -> None:
        """Wait until every queued job has run."""
        await self._idle.wait()
    
    async def _run(self) -> None:
        try:
            while self._queue:
                job_id = self._queue.popleft()
                job = self._jobs.pop(job_id)
                self._active = job_id
                try:
                    await self._process(job_id, job)
                finally:
                    self._active = None
        finally:
            self._state = RunState.IDLE
            self._worker = None
            self._idle.set()
    
    async def _process(self, job_id: int, job: UploadJob) -> None:
        engine = self._uploader.engine
        logger.info(f"Job {job_id} started (.{job.extension})")
        
        try:
            await engine.begin(job.extension)
            await self._uploader.upload_file(job.file, job.on_progress)
            result = await engine.finish()
        except Exception as e:
            logger.error(f"Job {job_id} failed: {e}")
            await self._discard_stream(job_id)
            await self._invoke(job_id, job.on_error, e)
        else:
            logger.info(f"Job {job_id} uploaded as {result.object_id}")
            await self._invoke(job_id, job.on_success, result)
        
        await self._invoke(job_id, job.on_finally)
    
    async def _discard_stream(self, job_id: int) -> None:
        engine = self._uploader.engine
        if not engine.is_open:
            return
        try:
            await engine.destroy()
        except TransportError as e:
            logger.warning(f"Job {job_id}: failed to remove abandoned stream: {e}")
    
    @staticmethod
    async def _invoke(job_id: int, callback, *args) -> None:
        if callback is None:
            return
        try:
            result = callback(*args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(f"Job {job_id}: callback {getattr(callback, '__name__', callback)!r} raised")
