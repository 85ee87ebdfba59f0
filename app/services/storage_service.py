import logging
import os
import uuid
from enum import Enum
from pathlib import Path

import aiofiles
from fastapi import HTTPException, UploadFile
from starlette import status
from app.config import settings

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads/"
MB = 1024 * 1024

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class UploadFolder(str, Enum):
    PROPERTIES = "properties"
    HERO = "hero"
    TEAM = "team"
    BLOG = "blog"
    AVATARS = "avatars"


MAX_FILE_SIZE = {
    UploadFolder.PROPERTIES: 5 * MB,
    UploadFolder.HERO: 10 * MB,
    UploadFolder.TEAM: 2 * MB,
    UploadFolder.BLOG: 5 * MB,
    UploadFolder.AVATARS: 1 * MB,
}
MAX_FILES = {UploadFolder.PROPERTIES: 10}


def upload_root() -> Path:
    return Path(settings.UPLOAD_DIR).resolve()


def _bad_request(detail: str):
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def present(files) -> list[UploadFile]:
    """Drop the empty parts browsers send for untouched file inputs."""
    if files is None:
        return []
    if not isinstance(files, (list, tuple)):
        files = [files]
    return [f for f in files if f is not None and getattr(f, "filename", None)]


class StorageService:
    def __init__(self, folder: UploadFolder):
        self.folder = folder
        self.max_size = MAX_FILE_SIZE[folder]
        self.max_files = MAX_FILES.get(folder, 1)

    def _extension(self, file: UploadFile) -> str:
        ext = os.path.splitext(file.filename or "")[1].lower()
        if ext in ALLOWED_EXTENSIONS:
            return ext
        return ALLOWED_CONTENT_TYPES[file.content_type]

    async def validate(self, files: list[UploadFile]) -> list[bytes]:
        """Check count, type and size; returns the file bodies.

        Runs before any database write so a rejected upload leaves no trace.
        """
        if len(files) > self.max_files:
            raise _bad_request(f"Too many files, at most {self.max_files} allowed")
        bodies = []
        for file in files:
            if file.content_type not in ALLOWED_CONTENT_TYPES:
                raise _bad_request(
                    "Only image files (JPEG, PNG, GIF, WebP) are allowed"
                )
            body = await file.read()
            if len(body) > self.max_size:
                raise _bad_request(
                    f"File {file.filename} exceeds the {self.max_size // MB}MB limit"
                )
            bodies.append(body)
        return bodies

    async def save_all(self, files: list[UploadFile]) -> list[str]:
        bodies = await self.validate(files)
        directory = upload_root() / self.folder.value
        directory.mkdir(parents=True, exist_ok=True)

        urls = []
        for file, body in zip(files, bodies):
            name = f"{uuid.uuid4().hex}{self._extension(file)}"
            async with aiofiles.open(directory / name, "wb") as out:
                await out.write(body)
            urls.append(f"{URL_PREFIX}{self.folder.value}/{name}")
        logger.debug("Stored %s file(s) in %s", len(urls), directory)
        return urls

    async def save(self, file: UploadFile | None) -> str | None:
        files = present(file)
        if not files:
            return None
        return (await self.save_all(files))[0]


def delete_by_url(url: str | None) -> bool:
    """Remove a stored file given its public URL.

    Only paths that resolve inside the upload root are touched.
    """
    if not url or not url.startswith(URL_PREFIX):
        return False
    root = upload_root()
    target = (root / url[len(URL_PREFIX):]).resolve()
    if not target.is_relative_to(root) or target == root:
        logger.warning("Refusing to delete file outside upload directory: %s", url)
        return False
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.error("Failed to delete %s: %s", target, exc)
        return False
    return True
