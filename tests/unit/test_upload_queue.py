"""Tests for the upload job queue."""
import asyncio
import os

import pytest

from kekupload.core.api.errors import APIError
from kekupload.core.crypto import sha1_hex
from kekupload.core.exceptions import JobNotFoundError, UploadCancelledError
from kekupload.core.upload import FinishResult, UploadJob


def recording_job(events, name, data, extension=None, **kwargs):
    """Job whose callbacks append (name, event, payload) to ``events``."""
    return UploadJob(
        file=data,
        extension=extension or name,
        on_success=lambda result: events.append((name, 'success', result)),
        on_error=lambda error: events.append((name, 'error', error)),
        on_finally=lambda: events.append((name, 'finally', None)),
        **kwargs
    )


class TestFifo:
    """Jobs run one at a time in insertion order."""
    
    @pytest.mark.asyncio
    async def test_jobs_run_in_order(self, queue, transport):
        events = []
        for name in ("one", "two", "three"):
            queue.add_job(recording_job(events, name, os.urandom(10)))
        
        await queue.join()
        
        assert [(name, event) for name, event, _ in events] == [
            ("one", "success"), ("one", "finally"),
            ("two", "success"), ("two", "finally"),
            ("three", "success"), ("three", "finally"),
        ]
    
    @pytest.mark.asyncio
    async def test_next_job_begins_after_previous_finish(self, queue, transport):
        events = []
        queue.add_job(recording_job(events, "one", os.urandom(10)))
        queue.add_job(recording_job(events, "two", os.urandom(10)))
        
        await queue.join()
        
        first_finish = transport.calls.index(transport.ops('finish')[0])
        second_create = transport.calls.index(('create', 'two'))
        assert first_finish < second_create
    
    @pytest.mark.asyncio
    async def test_success_result(self, queue):
        events = []
        data = os.urandom(13)
        queue.add_job(recording_job(events, "txt", data))
        
        await queue.join()
        
        result = events[0][2]
        assert isinstance(result, FinishResult)
        assert result.hash == sha1_hex(data)
    
    @pytest.mark.asyncio
    async def test_ids_are_sequential_from_zero(self, queue):
        events = []
        ids = [queue.add_job(recording_job(events, str(i), b"x")) for i in range(3)]
        
        await queue.join()
        
        assert ids == [0, 1, 2]
        # Job 0 must not be skipped
        assert len([e for e in events if e[1] == 'success']) == 3
    
    @pytest.mark.asyncio
    async def test_add_job_while_running(self, queue):
        events = []
        
        def add_second(fraction):
            if fraction == 1.0 and len(events) == 0:
                queue.add_job(recording_job(events, "two", b"late"))
        
        queue.add_job(recording_job(events, "one", os.urandom(8), on_progress=add_second))
        assert queue.is_running
        
        await queue.join()
        
        assert [(n, e) for n, e, _ in events] == [
            ("one", "success"), ("one", "finally"),
            ("two", "success"), ("two", "finally"),
        ]
        assert not queue.is_running
    
    @pytest.mark.asyncio
    async def test_progress_forwarded(self, queue):
        progress = []
        queue.add_job(UploadJob(file=os.urandom(12), extension="bin", on_progress=progress.append))
        
        await queue.join()
        
        assert progress[-1] == 1.0
        assert len(progress) == 3


class TestFailures:
    """A failing job does not stop the queue."""
    
    @pytest.mark.asyncio
    async def test_begin_failure_routed_to_on_error(self, queue, transport):
        transport.fail_create_for.add("bad")
        events = []
        queue.add_job(recording_job(events, "bad", b"data"))
        queue.add_job(recording_job(events, "good", b"data"))
        
        await queue.join()
        
        assert [(n, e) for n, e, _ in events] == [
            ("bad", "error"), ("bad", "finally"),
            ("good", "success"), ("good", "finally"),
        ]
        assert isinstance(events[0][2], APIError)
    
    @pytest.mark.asyncio
    async def test_finish_failure_destroys_stream(self, queue, transport):
        transport.fail_finish = 1
        events = []
        queue.add_job(recording_job(events, "one", b"data"))
        queue.add_job(recording_job(events, "two", b"data"))
        
        await queue.join()
        
        assert events[0][1] == 'error'
        assert transport.ops('remove') == [('remove', 'stream0')]
        assert events[2][1] == 'success'
    
    @pytest.mark.asyncio
    async def test_raising_callback_does_not_stop_queue(self, queue):
        events = []
        
        def broken(result):
            raise RuntimeError("callback bug")
        
        queue.add_job(UploadJob(file=b"a", extension="a", on_success=broken,
                                on_finally=lambda: events.append("a finally")))
        queue.add_job(recording_job(events, "b", b"b"))
        
        await queue.join()
        
        assert events[0] == "a finally"
        assert events[1][:2] == ("b", "success")
    
    @pytest.mark.asyncio
    async def test_async_callbacks_are_awaited(self, queue):
        events = []
        
        async def on_success(result):
            await asyncio.sleep(0)
            events.append("success")
        
        async def on_finally():
            events.append("finally")
        
        queue.add_job(UploadJob(file=b"abc", extension="txt",
                                on_success=on_success, on_finally=on_finally))
        queue.add_job(UploadJob(file=b"def", extension="txt",
                                on_finally=lambda: events.append("second")))
        
        await queue.join()
        
        assert events == ["success", "finally", "second"]


class TestCancelJob:
    """Cancelling queued and active jobs."""
    
    @pytest.mark.asyncio
    async def test_cancel_queued_job(self, queue, transport):
        events = []
        queue.add_job(recording_job(events, "one", b"data"))
        second = queue.add_job(recording_job(events, "two", b"data"))
        
        await queue.cancel_job(second)
        assert queue.pending_job_ids == [0]
        
        await queue.join()
        
        assert ('create', 'two') not in transport.calls
        assert all(name != "two" for name, _, _ in events)
    
    @pytest.mark.asyncio
    async def test_cancel_active_job(self, queue, transport, make_gate):
        gate = make_gate(2)
        events = []
        active = queue.add_job(recording_job(events, "one", os.urandom(20)))
        queue.add_job(recording_job(events, "two", b"data"))
        await gate.entered.wait()
        assert queue.active_job_id == active
        
        cancel = asyncio.create_task(queue.cancel_job(active))
        await asyncio.sleep(0)
        gate.released.set()
        await cancel
        await queue.join()
        
        assert [(n, e) for n, e, _ in events] == [
            ("one", "error"), ("one", "finally"),
            ("two", "success"), ("two", "finally"),
        ]
        assert isinstance(events[0][2], UploadCancelledError)
        assert transport.ops('remove') == [('remove', 'stream0')]
        assert [call[1] for call in transport.ops('finish')] == ['stream1']
        assert len(transport.ops('upload')) == 3
    
    @pytest.mark.asyncio
    async def test_cancel_unknown_job(self, queue):
        events = []
        queue.add_job(recording_job(events, "one", b"data"))
        queue.add_job(recording_job(events, "two", b"data"))
        
        with pytest.raises(JobNotFoundError):
            await queue.cancel_job(42)
        assert queue.pending_job_ids == [0, 1]
        
        await queue.join()
    
    @pytest.mark.asyncio
    async def test_cancel_finished_job(self, queue):
        job_id = queue.add_job(UploadJob(file=b"data", extension="txt"))
        await queue.join()
        
        with pytest.raises(JobNotFoundError):
            await queue.cancel_job(job_id)
    
    @pytest.mark.asyncio
    async def test_cancel_queued_job_twice(self, queue):
        queue.add_job(UploadJob(file=b"data", extension="txt"))
        second = queue.add_job(UploadJob(file=b"data", extension="txt"))
        
        await queue.cancel_job(second)
        with pytest.raises(JobNotFoundError):
            await queue.cancel_job(second)
        
        await queue.join()
