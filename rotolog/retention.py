"""Retention enforcement: keep at most N archives, deleting the oldest first."""

import logging
import os

from rotolog.filesink import FileSystem

logger = logging.getLogger(__name__)


def list_archives(archive_dir: str, base: str, ext: str,
                  active_path: str | None = None, fs: FileSystem | None = None) -> list[str]:
    """List archive names sorted oldest-first (lexicographic on the suffix)."""
    fs = fs or FileSystem()
    suffix = f".{ext}" if ext else ""
    active = os.path.abspath(active_path) if active_path else None
    archives = []
    for name in fs.list_directory(archive_dir):
        if not name.startswith(base) or not name.endswith(suffix):
            continue
        if active and os.path.abspath(os.path.join(archive_dir, name)) == active:
            continue
        archives.append(name)
    archives.sort()
    return archives


def _delete_all(archive_dir: str, names: list[str], fs: FileSystem) -> list[str]:
    deleted = []
    for name in names:
        try:
            fs.delete(os.path.join(archive_dir, name))
        except OSError as e:
            logger.warning("Unable to delete archive %s: %s", name, e)
            continue
        deleted.append(name)
    return deleted


def prune(archive_dir: str, base: str, ext: str, max_count: int | None,
          active_path: str | None = None, fs: FileSystem | None = None) -> list[str]:
    """Delete the oldest archives beyond ``max_count``. Returns deleted names.

    ``max_count=None`` disables pruning; ``0`` removes every archive.
    """
    if max_count is None:
        return []
    fs = fs or FileSystem()
    try:
        archives = list_archives(archive_dir, base, ext, active_path, fs)
    except OSError as e:
        logger.warning("Unable to list archive directory %s: %s", archive_dir, e)
        return []
    surplus = len(archives) - max_count
    if surplus <= 0:
        return []
    return _delete_all(archive_dir, archives[:surplus], fs)


def purge(archive_dir: str, base: str, ext: str,
          active_path: str | None = None, fs: FileSystem | None = None) -> list[str]:
    """Delete every archive for ``base``. The active file is never touched."""
    return prune(archive_dir, base, ext, 0, active_path, fs)
