import logging
import os
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from fastapi import UploadFile

from .validation import check_size

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class TempUpload:
    path: Path
    filename: str
    content_type: str
    size_bytes: int


class TempUploadStore:
    """Scratch directory holding at most one file per in-flight request."""

    def __init__(self, root: str | os.PathLike, chunk_size: int = CHUNK_SIZE):
        self.root = Path(root)
        self.chunk_size = chunk_size

    def ensure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def new_path(self) -> Path:
        return self.root / uuid.uuid4().hex

    def discard(self, path: Path) -> bool:
        """Delete ``path``. Never raises; failures are logged and reported as False."""
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("temp upload cleanup failed path=%s: %s", path, e)
            return False

    @asynccontextmanager
    async def hold(self, upload: UploadFile, max_mb: float) -> AsyncIterator[TempUpload]:
        """Materialize ``upload`` on disk for the duration of the ``async with`` block.

        The size limit is enforced while streaming, so an oversized body raises
        FileTooLarge before it is fully written. The file is removed on every
        exit path, including cancellation.
        """
        self.ensure()
        path = self.new_path()
        try:
            size = 0
            with open(path, "wb") as out:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    size += len(chunk)
                    check_size(size, max_mb)
                    out.write(chunk)
            yield TempUpload(
                path=path,
                filename=upload.filename or path.name,
                content_type=upload.content_type or "application/octet-stream",
                size_bytes=size,
            )
        finally:
            self.discard(path)
