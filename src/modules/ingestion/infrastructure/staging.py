"""
Request-scoped scratch files.

A StagingArea owns every temporary file one upload creates. Leaving the
`with` block deletes all of them, whatever the outcome of the request.
"""

import logging
import os
import tempfile
from typing import BinaryIO, List, Optional

from src.modules.ingestion.domain.errors import StagingFailure, UploadTooLarge

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MB


class StagingArea:
    def __init__(self, directory: Optional[str] = None, prefix: str = "ingest-"):
        self.directory = directory
        self.prefix = prefix
        self._paths: List[str] = []

    @property
    def paths(self) -> List[str]:
        return list(self._paths)

    def __enter__(self) -> "StagingArea":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def create(self, suffix: str = ".mp4") -> str:
        """Creates an empty, process-unique file and takes ownership of it."""
        try:
            fd, path = tempfile.mkstemp(prefix=self.prefix, suffix=suffix, dir=self.directory)
        except OSError as e:
            logger.error(f"Could not create staging file in {self.directory or tempfile.gettempdir()}: {e}")
            raise StagingFailure(f"Couldn't save file: {e}") from e
        os.close(fd)
        self._paths.append(path)
        return path

    def track(self, path: str) -> str:
        """Takes ownership of a path another component writes, e.g. a remux output."""
        if path not in self._paths:
            self._paths.append(path)
        return path

    def write_stream(self, source: BinaryIO, max_bytes: int, suffix: str = ".mp4") -> str:
        """
        Copies an upload stream into a new staged file, enforcing max_bytes
        while copying. Returns the staged path.
        """
        path = self.create(suffix=suffix)
        size = 0
        try:
            with open(path, "wb") as f:
                while chunk := source.read(CHUNK_SIZE):
                    size += len(chunk)
                    if size > max_bytes:
                        raise UploadTooLarge(f"File exceeds maximum size of {max_bytes} bytes.")
                    f.write(chunk)
        except OSError as e:
            logger.error(f"Could not write staging file {path}: {e}")
            raise StagingFailure(f"Couldn't save file: {e}") from e

        logger.info(f"Staged {size} bytes at {path}")
        return path

    def release(self, path: str) -> None:
        """Deletes one owned file now instead of at cleanup."""
        self._remove(path)
        if path in self._paths:
            self._paths.remove(path)

    def cleanup(self) -> None:
        while self._paths:
            self._remove(self._paths.pop())

    @staticmethod
    def _remove(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove staged file {path}: {e}")
