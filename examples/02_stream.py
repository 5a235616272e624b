"""
Drive a stream by hand: begin, upload chunks, finish
"""
import asyncio
from kekupload import KekUploadAPI, ChunkedUploader


async def main():
    async with KekUploadAPI("https://u.kotw.dev/api/") as api:
        uploader = ChunkedUploader(api)
        
        await uploader.begin("txt")
        chunk_hash = await uploader.upload_chunk("I love KekUpload".encode())
        print(f"Chunk hash: {chunk_hash}")
        
        result = await uploader.finish()
        print(f"id={result.object_id} hash={result.hash}")


if __name__ == "__main__":
    asyncio.run(main())
