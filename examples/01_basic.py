"""
Upload a file with the facade
"""
import asyncio
from kekupload import KekUploadAPI, UploadFacade, setup_logging


async def main():
    setup_logging()
    
    async with KekUploadAPI("https://u.kotw.dev/api/") as api:
        uploader = UploadFacade(api)
        
        def on_progress(fraction):
            print(f"uploading: {fraction * 100:.1f}%")
        
        result = await uploader.upload("document.pdf", on_progress=on_progress)
        print(f"Uploaded: {result.object_id} (sha1 {result.hash})")


if __name__ == "__main__":
    asyncio.run(main())
