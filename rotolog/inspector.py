"""Inspector logic: list, read, and search the active file and its archives."""

import os

from rotolog.config import RotationConfig
from rotolog.retention import list_archives


def list_log_files(config: RotationConfig) -> list[tuple[str, int]]:
    """Return (path, size) for each archive oldest-first, then the active file."""
    archive_dir = config.archive_directory or os.path.dirname(os.path.abspath(config.path))
    files = []
    if os.path.isdir(archive_dir):
        for name in list_archives(archive_dir, config.base_file_name,
                                  config.file_extension, active_path=config.path):
            path = os.path.join(archive_dir, name)
            files.append((path, os.path.getsize(path)))
    if os.path.exists(config.path):
        files.append((config.path, os.path.getsize(config.path)))
    return files


def read_file(path: str, encoding: str = "utf-8") -> str:
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "r", encoding=encoding, errors="replace") as f:
        return f.read()


def search_files(config: RotationConfig, text: str) -> list[tuple[str, int, str]]:
    """Search for text across archives and the active file. Returns (path, line_num, line) tuples."""
    results = []
    for path, _ in list_log_files(config):
        try:
            with open(path, "r", encoding=config.encoding, errors="replace") as f:
                for line_num, line in enumerate(f, 1):
                    if text in line:
                        results.append((path, line_num, line.rstrip("\n")))
        except OSError:
            continue
    return results


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
