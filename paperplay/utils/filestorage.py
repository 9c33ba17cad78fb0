import asyncio
import logging
import os
import pathlib
import time

import aiofiles
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from paperplay.core.config import settings
from paperplay.core.exceptions import InvalidPayloadError, UploadFailedError
from paperplay.utils import aws

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class StoredAsset:
    def __init__(self, url: str, key: str):
        self.url = url
        self.key = key

    def __repr__(self):
        return f"StoredAsset(url={self.url!r}, key={self.key!r})"


class LocalFile:
    def __init__(self, file_name, content_type, file_id: str):
        if not os.path.exists(settings.FILE_STORAGE):
            os.makedirs(settings.FILE_STORAGE, exist_ok=True)
        self.name = file_name
        self.type = content_type
        file_extension = pathlib.Path(file_name or "").suffix
        self.key = f'{file_id}{file_extension}'
        self.path = f'{settings.FILE_STORAGE}/{self.key}'

    async def save(self, in_data, max_size: int = None) -> int:
        size = 0
        async with aiofiles.open(self.path, 'wb') as out_file:
            while content := await in_data.read(CHUNK_SIZE):
                size += len(content)
                if max_size and size > max_size:
                    raise InvalidPayloadError(f"File is larger than {settings.MAX_UPLOAD_SIZE_IN_MB} MB")
                await out_file.write(content)
        return size

    def remove(self):
        if os.path.exists(self.path):
            os.remove(self.path)


def local_path(key: str) -> str:
    return f'{settings.FILE_STORAGE}/{key}'


async def store_upload(upload: UploadFile, *, code: str, media_type: str) -> StoredAsset:
    """
    Store an uploaded file and return where it lives. Returns only once the asset is
    fully stored, any failure raises and leaves nothing behind.
    """
    if not upload.content_type or not upload.content_type.startswith(f"{media_type}/"):
        raise InvalidPayloadError(f"Expected a {media_type} file, got {upload.content_type}", code)

    lf = LocalFile(upload.filename, upload.content_type, f"{code}-{int(time.time() * 1000)}")
    try:
        size = await lf.save(upload, max_size=settings.MAX_UPLOAD_SIZE_IN_MB * 1024 * 1024)
        if not size:
            raise InvalidPayloadError(f"File {upload.filename} is empty", code)

        if settings.STORAGE_BACKEND == "s3":
            if not settings.AWS_S3_BUCKET:
                raise UploadFailedError("S3 storage is enabled but AWS_S3_BUCKET is not set", code)
            await asyncio.to_thread(aws.upload_file_to_s3, lf.path,
                                    bucket=settings.AWS_S3_BUCKET,
                                    key=lf.key,
                                    region=settings.AWS_S3_REGION,
                                    content_type=lf.type)
            lf.remove()
            url = f"{settings.AWS_S3_PUBLIC_URL}/{lf.key}"
        else:
            url = f"{settings.MEDIA_BASE_URL.rstrip('/')}/{lf.key}"
    except (InvalidPayloadError, UploadFailedError):
        lf.remove()
        raise
    except (OSError, BotoCoreError, ClientError) as e:
        lf.remove()
        logger.error(f"Upload of {upload.filename} for ticket {code} failed - {e}")
        raise UploadFailedError(f"Upload of {upload.filename} failed", code) from e

    logger.info(f"Stored {size} bytes for ticket {code} as {lf.key}")
    return StoredAsset(url=url, key=lf.key)


def remove_stored_asset(key: str) -> None:
    if settings.STORAGE_BACKEND == "s3":
        aws.delete_file_from_s3(bucket=settings.AWS_S3_BUCKET, key=key, region=settings.AWS_S3_REGION)
        return

    path = local_path(key)
    if os.path.exists(path):
        os.remove(path)
        logger.info(f"Removed local asset {key}")
    else:
        logger.warning(f"Local asset {key} already gone")
