"""Append-only log sink with size/time or daily rotation and archive retention."""

import logging
import os
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime

from rotolog.config import DEFAULT_LOG_DIR, Daily, RotationConfig
from rotolog.filesink import AppendOnlyFile, FileAttributes, FileSystem
from rotolog.naming import compute_archive_path
from rotolog.policy import ActiveFileState, should_rotate
from rotolog import retention

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _to_clock(ts: datetime, now: datetime) -> datetime:
    """Express a filesystem timestamp in the same kind of datetime the clock returns."""
    if now.tzinfo is None:
        return ts.astimezone().replace(tzinfo=None)
    return ts.astimezone(now.tzinfo)


@dataclass(frozen=True)
class RotationResult:
    success: bool
    source: str
    archive_path: str
    pruned: list[str] = field(default_factory=list)
    error: str | None = None


class RotatingSink:
    """Writes messages to the active file and rotates it when the policy says so.

    The sink always opens the active file for appending. If the caller asked
    for a fresh file, or the existing file is already due for rotation, it is
    archived during construction before any message is written.

    Nothing raised by the filesystem escapes ``write``: a failed append is
    logged and dropped, a failed rename leaves the active file in place and
    is retried on the next write.
    """

    def __init__(self, config: RotationConfig, fs: FileSystem | None = None, time_func=None):
        self._fs = fs or FileSystem()
        self._time_func = time_func or _local_now
        self._lock = threading.Lock()
        self._path = config.path
        self._file: AppendOnlyFile | None = None

        parent = os.path.dirname(os.path.abspath(config.path))
        try:
            self._fs.makedirs(parent)
        except OSError as e:
            logger.error("Unable to create log directory %s: %s", parent, e)

        now = self._time_func()
        existing = self._read_attributes()
        self._state = ActiveFileState(self._path, 0, now, now)
        if existing is not None:
            started = _to_clock(existing.created_at or existing.modified_at, now)
            self._state = ActiveFileState(self._path, existing.size, started, started)

        self._config = replace(config, archive_directory=self._resolve_archive_directory(config))
        self._file = self._open_file()

        # Metadata may be unreadable; the open handle still knows whether the file is empty.
        has_content = self._state.size_bytes > 0 or self._handle_has_content()
        if has_content and (not config.append_on_open
                            or should_rotate(self._state, self._config, now)):
            self._rotate(now)
        elif not has_content:
            self._state = ActiveFileState(self._path, 0, now, now)
        elif config.append_marker:
            self._append_locked(config.append_marker + "\n")

    @property
    def config(self) -> RotationConfig:
        return self._config

    @property
    def path(self) -> str:
        return self._path

    @property
    def archive_directory(self) -> str:
        return self._config.archive_directory

    @property
    def state(self) -> ActiveFileState:
        with self._lock:
            return replace(self._state)

    def _read_attributes(self) -> FileAttributes | None:
        if not self._fs.exists(self._path):
            return None
        try:
            return self._fs.attributes(self._path)
        except OSError as e:
            logger.warning("Unable to determine current file attributes of %s: %s", self._path, e)
            return None

    def _resolve_archive_directory(self, config: RotationConfig) -> str:
        target = config.archive_directory or os.path.dirname(os.path.abspath(config.path))
        try:
            self._fs.makedirs(target)
            return target
        except OSError as e:
            logger.warning("Archive directory %s unavailable (%s), falling back to %s",
                           target, e, DEFAULT_LOG_DIR)
        try:
            self._fs.makedirs(DEFAULT_LOG_DIR)
        except OSError as e:
            logger.error("Unable to create fallback archive directory %s: %s", DEFAULT_LOG_DIR, e)
        return DEFAULT_LOG_DIR

    def _handle_has_content(self) -> bool:
        if self._file is None:
            return False
        try:
            return self._file.end_offset() > 0
        except (OSError, ValueError) as e:
            logger.warning("Unable to determine size of %s: %s", self._path, e)
            return False

    def _open_file(self) -> AppendOnlyFile | None:
        try:
            return self._fs.open(self._path, self._config.file_mode)
        except OSError as e:
            logger.error("Unable to open log file %s: %s", self._path, e)
            return None

    def _close_file(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def _append_locked(self, message: str) -> bool:
        data = message.encode(self._config.encoding, errors="replace")
        if self._file is None:
            self._file = self._open_file()
            if self._file is None:
                return False
        try:
            self._file.append(data)
        except (OSError, ValueError) as e:
            logger.error("Unable to write to %s: %s", self._path, e)
            return False
        self._state.record_write(len(data))
        return True

    def write(self, message: str) -> RotationResult | None:
        """Append a message. Returns the rotation result if a rotation was attempted."""
        with self._lock:
            if not self._append_locked(message):
                return None
            now = self._time_func()
            if should_rotate(self._state, self._config, now):
                return self._rotate(now)
            return None

    def rotate_file(self) -> RotationResult:
        """Rotate now, regardless of policy."""
        with self._lock:
            return self._rotate(self._time_func())

    def _sealed_creation_time(self, now: datetime) -> datetime | None:
        try:
            attrs = self._fs.attributes(self._path)
        except OSError as e:
            logger.warning("Unable to determine current file attributes of %s: %s", self._path, e)
            return now
        if attrs.created_at is None:
            return None
        return _to_clock(attrs.created_at, now)

    def _rotate(self, now: datetime) -> RotationResult:
        created_at = None
        if isinstance(self._config.mode, Daily):
            created_at = self._sealed_creation_time(now)
        archive_path = compute_archive_path(self._config, self._state, now, created_at)

        self._close_file()
        if self._fs.exists(archive_path):
            logger.warning("Archive %s already exists and will be overwritten", archive_path)
        try:
            self._fs.move(self._path, archive_path)
        except OSError as e:
            logger.warning("Unable to rotate %s to %s: %s", self._path, archive_path, e)
            self._file = self._open_file()
            return RotationResult(False, self._path, archive_path, error=str(e))

        logger.info("Rotated %s to %s", self._path, archive_path)
        self._file = self._open_file()
        self._state = ActiveFileState(self._path, 0, now, now)

        pruned = retention.prune(
            self._config.archive_directory,
            self._config.base_file_name,
            self._config.file_extension,
            self._config.max_archive_count,
            active_path=self._path,
            fs=self._fs,
        )
        if pruned:
            logger.info("Pruned %d archive(s): %s", len(pruned), ", ".join(pruned))
        return RotationResult(True, self._path, archive_path, pruned)

    def archived_files(self) -> list[str]:
        """Full paths of current archives, oldest first."""
        names = retention.list_archives(
            self._config.archive_directory,
            self._config.base_file_name,
            self._config.file_extension,
            active_path=self._path,
            fs=self._fs,
        )
        return [os.path.join(self._config.archive_directory, name) for name in names]

    def purge_archives(self) -> list[str]:
        """Delete every archive. Returns the deleted names."""
        with self._lock:
            return retention.purge(
                self._config.archive_directory,
                self._config.base_file_name,
                self._config.file_extension,
                active_path=self._path,
                fs=self._fs,
            )

    def close(self):
        with self._lock:
            self._close_file()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
