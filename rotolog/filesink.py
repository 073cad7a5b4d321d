"""Append-only file primitive and the filesystem operations rotation relies on."""

import os
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class FileAttributes:
    size: int
    created_at: datetime | None  # None where the platform has no birth time
    modified_at: datetime


class AppendOnlyFile:
    """Synchronous byte sink that flushes on every append."""

    def __init__(self, path: str, mode: int | None = None):
        self._path = path
        existed = os.path.exists(path)
        self._file = open(path, "ab")
        if mode is not None and not existed:
            os.chmod(path, mode)

    @property
    def path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._file.closed

    def end_offset(self) -> int:
        """Bytes currently in the file, read from the open handle."""
        return self._file.seek(0, os.SEEK_END)

    def append(self, data: bytes):
        self._file.write(data)
        self._file.flush()

    def close(self):
        if not self._file.closed:
            self._file.close()


class FileSystem:
    """Thin wrapper over ``os`` so rotation can be exercised against failures."""

    def open(self, path: str, mode: int | None = None) -> AppendOnlyFile:
        return AppendOnlyFile(path, mode)

    def attributes(self, path: str) -> FileAttributes:
        st = os.stat(path)
        birth = getattr(st, "st_birthtime", None)
        return FileAttributes(
            size=st.st_size,
            created_at=datetime.fromtimestamp(birth, timezone.utc) if birth else None,
            modified_at=datetime.fromtimestamp(st.st_mtime, timezone.utc),
        )

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def move(self, src: str, dst: str):
        os.replace(src, dst)

    def list_directory(self, path: str) -> list[str]:
        return os.listdir(path)

    def delete(self, path: str):
        os.remove(path)

    def makedirs(self, path: str):
        os.makedirs(path, exist_ok=True)
