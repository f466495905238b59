"""
File Trees
==========

Read/write access to workspace files. ``DiskTree`` talks to the real file
system, ``StagedTree`` keeps writes in memory until they are committed.
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol

from loguru import logger

from globsync.core.errors import WriteFailedError


class FileTree(Protocol):
    """File collaborator used by the synchronization driver."""

    def read_text(self, path: str | Path) -> str | None: ...

    def write_text(self, path: str | Path, content: str) -> None: ...


class DiskTree:
    """Files on disk, addressed relative to a root directory."""

    def __init__(self, root: str | Path = "."):
        self.root = Path(root)

    def resolve(self, path: str | Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.root / path

    def read_text(self, path: str | Path) -> str | None:
        """
        Read a file's contents.

        Args:
            path: Path to the file, relative to the tree root

        Returns:
            str | None: File contents, or None if the file doesn't exist
        """
        file_path = self.resolve(path)
        try:
            # newline="" keeps \r\n intact so untouched text is written back as-is
            with file_path.open(newline="") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def write_text(self, path: str | Path, content: str) -> None:
        """
        Write content using a temporary file to ensure atomic writes.

        Args:
            path: Path to the target file, relative to the tree root
            content: Content to write to the file

        Raises:
            WriteFailedError: If the file cannot be written
        """
        file_path = self.resolve(path)
        temp_path = None
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(dir=str(file_path.parent))
            with os.fdopen(temp_fd, "w", newline="") as f:
                f.write(content)

            # On Windows, we need to remove the target file first
            if os.name == "nt" and file_path.exists():
                file_path.unlink()

            Path(temp_path).replace(file_path)
        except OSError as error:
            if temp_path is not None:
                with contextlib.suppress(OSError):
                    Path(temp_path).unlink()
            raise WriteFailedError(f"Could not write {file_path}: {error}") from error
        logger.debug(f"Wrote {file_path}")


class StagedTree:
    """In-memory layer over another tree.

    Writes are staged and visible to later reads through this tree. Nothing
    reaches the base tree until ``commit`` is called.
    """

    def __init__(self, base: FileTree):
        self.base = base
        self._staged: dict[str, str] = {}

    @staticmethod
    def _key(path: str | Path) -> str:
        return Path(path).as_posix()

    def read_text(self, path: str | Path) -> str | None:
        key = self._key(path)
        if key in self._staged:
            return self._staged[key]
        return self.base.read_text(path)

    def write_text(self, path: str | Path, content: str) -> None:
        self._staged[self._key(path)] = content

    def changes(self) -> list[str]:
        """Paths with staged content, in the order they were first written."""
        return list(self._staged)

    def commit(self) -> list[str]:
        """Flush staged writes to the base tree.

        Returns:
            list[str]: Paths that were written

        Raises:
            WriteFailedError: If the base tree rejects a write. Paths that
                were not written yet stay staged.
        """
        written = []
        for path in list(self._staged):
            self.base.write_text(path, self._staged[path])
            del self._staged[path]
            written.append(path)
        return written

    def discard(self) -> None:
        self._staged.clear()
