"""KekUpload CLI - Main commands."""
import asyncio
import logging
import signal
from pathlib import Path
from typing import Dict, List, Optional, Set

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from kekupload.core.api import KekUploadAPI, APIConfig, DEFAULT_BASE_URL
from kekupload.core.crypto import Sha1Hasher
from kekupload.core.exceptions import JobNotFoundError, NotUploadingError, UploadCancelledError
from kekupload.core.upload import (
    AsyncFileReader,
    ChunkedUploader,
    FileUploader,
    FinishResult,
    UploadConfig,
    UploadJob,
    UploadQueue,
    guess_extension,
)
from kekupload.core.upload.models import DEFAULT_CHUNK_SIZE, DEFAULT_READ_SIZE

app = typer.Typer(
    name="kekupload",
    help="KekUpload chunked upload CLI",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def build_config(chunk_size: int, read_size: int) -> UploadConfig:
    """Validate sizes from the command line."""
    try:
        return UploadConfig(read_size=read_size, chunk_size=chunk_size)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)


async def cancel_all(queue: UploadQueue) -> None:
    """Drop queued jobs, then cancel the active one."""
    for job_id in queue.pending_job_ids:
        try:
            await queue.cancel_job(job_id)
        except JobNotFoundError:
            pass  # started or cancelled meanwhile
    
    active = queue.active_job_id
    if active is None:
        return
    try:
        await queue.cancel_job(active)
    except NotUploadingError:
        console.print(f"[yellow]Job {active} is not uploading, letting it finish[/yellow]")
    except JobNotFoundError:
        pass  # finished meanwhile


@app.command()
def upload(
    files: List[Path] = typer.Argument(..., help="Files to upload", exists=True, dir_okay=False),
    base: str = typer.Option(DEFAULT_BASE_URL, "--base", "-b", envvar="KEKUPLOAD_BASE_URL", help="API base URL"),
    ext: Optional[str] = typer.Option(None, "--ext", "-e", help="Extension for every file (default: file suffix)"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", help="Chunk size in bytes"),
    read_size: int = typer.Option(DEFAULT_READ_SIZE, "--read-size", help="Read-window size in bytes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Upload files one after another."""
    config = build_config(chunk_size, read_size)
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    
    results: Dict[Path, FinishResult] = {}
    failures: Dict[Path, Exception] = {}
    
    async def do_upload():
        async with KekUploadAPI(config=APIConfig.for_base(base)) as api:
            queue = UploadQueue(FileUploader(ChunkedUploader(api), config))
            
            loop = asyncio.get_running_loop()
            cancel_tasks: Set[asyncio.Task] = set()
            
            def on_sigint():
                task = loop.create_task(cancel_all(queue))
                cancel_tasks.add(task)
                task.add_done_callback(cancel_tasks.discard)
            
            try:
                loop.add_signal_handler(signal.SIGINT, on_sigint)
            except NotImplementedError:
                pass  # Windows event loops
            
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                for file_path in files:
                    task = progress.add_task(f"Uploading {file_path.name}", total=100)
                    
                    def on_progress(fraction: float, task=task):
                        progress.update(task, completed=fraction * 100)
                    
                    def on_success(result: FinishResult, file_path=file_path, task=task):
                        progress.update(task, completed=100)
                        results[file_path] = result
                    
                    def on_error(error: Exception, file_path=file_path):
                        failures[file_path] = error
                    
                    queue.add_job(UploadJob(
                        file=file_path,
                        extension=ext or guess_extension(file_path),
                        on_success=on_success,
                        on_error=on_error,
                        on_progress=on_progress,
                    ))
                
                await queue.join()
    
    run_async(do_upload())
    
    if results:
        table = Table()
        table.add_column("File")
        table.add_column("Object ID", style="cyan")
        table.add_column("SHA-1", style="dim")
        for file_path, result in results.items():
            table.add_row(str(file_path), result.object_id, result.hash)
        console.print(table)
    
    for file_path, error in failures.items():
        if isinstance(error, UploadCancelledError):
            console.print(f"[yellow]{file_path}: cancelled[/yellow]")
        else:
            console.print(f"[red]{file_path}: {error}[/red]")
    
    if failures or len(results) != len(files):
        raise typer.Exit(1)


@app.command("hash")
def hash_file(
    file: Path = typer.Argument(..., help="File to hash", exists=True, dir_okay=False),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", help="Chunk size in bytes"),
):
    """Print the whole-file SHA-1 the server expects on finish."""
    if chunk_size <= 0:
        console.print("[red]Chunk size must be positive[/red]")
        raise typer.Exit(2)
    
    async def do_hash() -> str:
        hasher = Sha1Hasher()
        async with AsyncFileReader(file) as reader:
            for start in range(0, reader.size, chunk_size):
                hasher.update(await reader.read_range(start, min(start + chunk_size, reader.size)))
        return hasher.finalize()
    
    console.print(f"{run_async(do_hash())}  {file}")


def main():
    app()


if __name__ == "__main__":
    main()
