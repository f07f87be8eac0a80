import logging
import os
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

import aiofiles
from fastapi import UploadFile

from manifestpro.config import Settings
from manifestpro.errors import ErrorKind, ManifestError

logger = logging.getLogger("manifestpro.uploads")


def get_file_extension(filename: str) -> str:
    """Extract the file extension without the dot, lowercased."""
    _, ext = os.path.splitext(filename)
    return ext.lstrip(".").lower()


def validate_upload_name(filename: str | None, settings: Settings) -> str:
    """Return the extension of an acceptable upload or raise INVALID_ARGUMENT."""
    if not filename:
        raise ManifestError(ErrorKind.INVALID_ARGUMENT, "No file uploaded", status_code=400)
    file_ext = get_file_extension(filename)
    if file_ext not in settings.allowed_file_types:
        raise ManifestError(
            ErrorKind.INVALID_ARGUMENT,
            f"File type '{file_ext}' not allowed. "
            f"Allowed: {', '.join(sorted(settings.allowed_file_types))}",
            status_code=400,
        )
    return file_ext


async def save_upload(file: UploadFile, settings: Settings) -> str:
    """Save an uploaded file under a unique name and return its path."""
    content = await file.read()
    if len(content) > settings.max_upload_size_mb * 1024 * 1024:
        raise ManifestError(
            ErrorKind.INVALID_ARGUMENT,
            f"File too large. Maximum size: {settings.max_upload_size_mb}MB",
            status_code=400,
        )

    ext = os.path.splitext(file.filename or "upload")[1]
    file_path = os.path.join(settings.upload_dir, f"{uuid.uuid4()}{ext}")
    os.makedirs(settings.upload_dir, exist_ok=True)

    async with aiofiles.open(file_path, "wb") as f:
        await f.write(content)

    return file_path


def delete_file(file_path: str) -> None:
    try:
        if os.path.exists(file_path):
            os.remove(file_path)
    except OSError as e:
        logger.error("Error deleting file %s: %s", file_path, e)


@asynccontextmanager
async def scoped_upload(file: UploadFile, settings: Settings) -> AsyncIterator[str]:
    """Save an upload for the duration of the block; it is deleted on every exit path."""
    file_path = await save_upload(file, settings)
    try:
        yield file_path
    finally:
        delete_file(file_path)
