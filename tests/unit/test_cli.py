"""Tests for the command line interface."""
import os
from unittest.mock import AsyncMock, Mock

import pytest
from typer.testing import CliRunner

from kekupload.cli.main import app, cancel_all
from kekupload.core.exceptions import JobNotFoundError
from kekupload.core.upload import UploadJob
from kekupload.core.crypto import sha1_hex

runner = CliRunner()


class TestHashCommand:
    """Test suite for 'kekupload hash'."""
    
    def test_prints_whole_file_hash(self, tmp_path):
        path = tmp_path / "data.bin"
        data = os.urandom(1000)
        path.write_bytes(data)
        
        result = runner.invoke(app, ["hash", str(path), "--chunk-size", "64"])
        
        assert result.exit_code == 0
        assert sha1_hex(data) in result.stdout
    
    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["hash", str(tmp_path / "missing.bin")])
        
        assert result.exit_code != 0


class TestUploadCommand:
    """Test suite for 'kekupload upload' argument handling."""
    
    def test_rejects_bad_sizes(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"data")
        
        result = runner.invoke(app, ["upload", str(path), "--chunk-size", "3", "--read-size", "8"])
        
        assert result.exit_code == 2
        assert "not a multiple" in result.stdout


class TestCancelAll:
    """Test suite for the Ctrl-C handler."""
    
    @pytest.mark.asyncio
    async def test_drops_queued_jobs(self, queue, transport):
        on_finally = Mock()
        for data in (b"one", b"two", b"three"):
            queue.add_job(UploadJob(file=data, extension="txt", on_finally=on_finally))
        
        await cancel_all(queue)
        await queue.join()
        
        assert queue.pending_job_ids == []
        assert transport.calls == []
        on_finally.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_tolerates_jobs_that_vanished(self):
        queue = Mock()
        queue.pending_job_ids = [0, 1]
        queue.active_job_id = 2
        queue.cancel_job = AsyncMock(side_effect=JobNotFoundError(0))
        
        await cancel_all(queue)
        
        assert [c.args for c in queue.cancel_job.await_args_list] == [(0,), (1,), (2,)]
