"""
Queue several uploads and cancel one of them
"""
import asyncio
from kekupload import (
    KekUploadAPI,
    ChunkedUploader,
    FileUploader,
    UploadQueue,
    UploadJob,
    UploadCancelledError,
)


async def main():
    async with KekUploadAPI("https://u.kotw.dev/api/") as api:
        queue = UploadQueue(FileUploader(ChunkedUploader(api)))
        
        def make_job(path, ext):
            def on_error(error):
                if isinstance(error, UploadCancelledError):
                    print(f"{path}: cancelled")
                else:
                    print(f"{path}: failed: {error}")
            
            return UploadJob(
                file=path,
                extension=ext,
                on_success=lambda result: print(f"{path}: {result.object_id}"),
                on_error=on_error,
                on_finally=lambda: print(f"{path}: done"),
                on_progress=lambda p: print(f"{path}: {p * 100:.1f}%"),
            )
        
        queue.add_job(make_job("a.mp4", "mp4"))
        second = queue.add_job(make_job("b.zip", "zip"))
        queue.add_job(make_job("c.png", "png"))
        
        # b.zip is still queued, so this never touches the network
        await queue.cancel_job(second)
        
        await queue.join()


if __name__ == "__main__":
    asyncio.run(main())
