"""Transient on-disk staging for uploaded files.

Each upload is copied into the staging directory under a fresh
``uuid4().hex`` name, handed to exactly one request handler and removed
again when that handler is done with it.  The lifecycle is expressed as an
async context manager so removal runs on every exit path::

    async with stager.stage(upload) as staged:
        ...  # validate, encode, invoke the model

    # staged.path no longer exists here, whatever happened inside the block

Copying an upload is pushed to a worker thread with :func:`asyncio.to_thread`
so a large upload never stalls the event loop.  The final unlink is a single
cheap call and runs inline, so it also completes when the request is cancelled.
Removal is best-effort: failures are logged and never reach the client.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from flashgate.core.errors import FilesystemError

logger = logging.getLogger(__name__)

_COPY_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StagedFile:
    """An upload persisted to the staging directory.

    Attributes:
        path: Location of the staged bytes.
        mime_type: Content type declared by the client.
        original_name: Filename supplied by the client.
        size_bytes: Number of bytes written.
    """

    path: Path
    mime_type: str
    original_name: str
    size_bytes: int


class FileStager:
    """Writes uploads to a staging directory and removes them afterwards."""

    def __init__(self, staging_dir: Path) -> None:
        self.staging_dir = Path(staging_dir)
        self.staging_dir.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def stage(self, upload: UploadFile) -> AsyncIterator[StagedFile]:
        """Persist *upload* for the duration of the ``async with`` block.

        Args:
            upload: Multipart file field received by FastAPI.

        Yields:
            The :class:`StagedFile` describing the bytes on disk.

        Raises:
            FilesystemError: If the bytes could not be written.  Any partial
                file is removed before the error propagates.
        """
        path = self.staging_dir / uuid.uuid4().hex
        try:
            size = await asyncio.to_thread(self._write, upload, path)
        except OSError as e:
            logger.error(f"Failed to stage upload {upload.filename!r}: {e}", exc_info=True)
            self.discard(path)
            raise FilesystemError("File upload failed.", details=str(e)) from e
        except BaseException:
            self.discard(path)
            raise

        staged = StagedFile(
            path=path,
            mime_type=upload.content_type or "",
            original_name=upload.filename or "",
            size_bytes=size,
        )
        logger.debug(f"Staged {staged.original_name!r} at {path} ({size} bytes)")
        try:
            yield staged
        finally:
            self.discard(path)

    def discard(self, path: Path) -> None:
        """Remove a staged file, logging instead of raising on failure.

        Runs inline rather than in a worker thread: an await here would be
        cancelled again when the request's cancel scope is torn down.

        Args:
            path: File to delete.  A file that is already gone is ignored.
        """
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error(f"Failed to delete staged file {path}: {e}", exc_info=True)
            return
        logger.debug(f"Deleted staged file: {path}")

    @staticmethod
    def _write(upload: UploadFile, path: Path) -> int:
        """Copy the upload's spooled bytes to *path* and return the byte count."""
        upload.file.seek(0)
        with open(path, "wb") as dest:
            shutil.copyfileobj(upload.file, dest, _COPY_CHUNK_SIZE)
            return dest.tell()
