"""Configuration module: frozen rotation config loaded from defaults, YAML and environment variables."""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE_BYTES = 1024 * 1024  # 1 MB
DEFAULT_MAX_INTERVAL_SECONDS = 600.0
DEFAULT_MAX_ARCHIVE_COUNT = 10
DEFAULT_APPEND_MARKER = "-- ** ** ** --"
DEFAULT_LOG_DIR = "./logs"

# Zero-padded so archive names sort in time order.
DEFAULT_SUFFIX_PATTERN = "_%Y-%m-%d_%H%M%S_%f"
DAILY_SUFFIX_PATTERN = "_%Y-%m-%d"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def _parse_count(value) -> int | None:
    """Parse a retention count. ``none``/``unbounded`` disables pruning."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in ("none", "unbounded", ""):
        return None
    count = int(value)
    if count < 0:
        raise ValueError(f"max_archive_count must be >= 0, got {count}")
    return count


def strftime_formatter(pattern: str) -> Callable[[datetime], str]:
    """Build an archive suffix formatter from a strftime pattern."""
    def _format(ts: datetime) -> str:
        return ts.strftime(pattern)
    _format.pattern = pattern
    return _format


@dataclass(frozen=True)
class SizeOrTime:
    """Rotate when either the size or the elapsed-time bound is reached.

    A bound of zero (or less) is unlimited.
    """
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    max_interval_seconds: float = DEFAULT_MAX_INTERVAL_SECONDS

    @property
    def size_unlimited(self) -> bool:
        return self.max_file_size_bytes <= 0

    @property
    def interval_unlimited(self) -> bool:
        return self.max_interval_seconds <= 0


@dataclass(frozen=True)
class Daily:
    """Rotate only when a calendar-day boundary has been crossed."""


RotationMode = Union[SizeOrTime, Daily]


def _default_formatter(mode: RotationMode) -> Callable[[datetime], str]:
    if isinstance(mode, Daily):
        return strftime_formatter(DAILY_SUFFIX_PATTERN)
    return strftime_formatter(DEFAULT_SUFFIX_PATTERN)


@dataclass(frozen=True)
class RotationConfig:
    path: str = os.path.join(DEFAULT_LOG_DIR, "application.log")
    archive_directory: str | None = None
    mode: RotationMode = field(default_factory=SizeOrTime)
    max_archive_count: int | None = DEFAULT_MAX_ARCHIVE_COUNT
    suffix_formatter: Callable[[datetime], str] | None = None
    append_on_open: bool = True
    append_marker: str | None = DEFAULT_APPEND_MARKER
    file_mode: int | None = None
    encoding: str = "utf-8"

    def __post_init__(self):
        if not isinstance(self.mode, (SizeOrTime, Daily)):
            raise ValueError(f"unsupported rotation mode: {self.mode!r}")
        if self.max_archive_count is not None and self.max_archive_count < 0:
            raise ValueError("max_archive_count must be >= 0 or None")
        if self.suffix_formatter is None:
            object.__setattr__(self, "suffix_formatter", _default_formatter(self.mode))

    @property
    def file_name(self) -> str:
        return os.path.basename(self.path)

    @property
    def file_extension(self) -> str:
        """Extension of the active file, without the leading dot."""
        _, ext = os.path.splitext(self.file_name)
        return ext[1:]

    @property
    def base_file_name(self) -> str:
        name = self.file_name
        ext = self.file_extension
        return name[: -(len(ext) + 1)] if ext else name


def load_yaml_config(path: str | None) -> dict:
    """Load the ``rotation`` section from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML config in {path} must be a mapping")
    return data.get("rotation", data)


def _build_mode(name: str, max_size: int, interval: float) -> RotationMode:
    name = name.strip().lower()
    if name == "daily":
        return Daily()
    if name in ("size_or_time", "size", "time"):
        return SizeOrTime(max_file_size_bytes=max_size, max_interval_seconds=interval)
    raise ValueError(f"unknown rotation mode: {name!r}")


def load_config(yaml_data: dict | None = None) -> RotationConfig:
    """Build RotationConfig from defaults, then YAML data, then environment variables."""
    data = dict(yaml_data or {})
    env = os.environ

    # MAX_FILE_SIZE_BYTES takes precedence over MAX_FILE_SIZE_MB
    raw_bytes = env.get("MAX_FILE_SIZE_BYTES", data.get("max_file_size_bytes"))
    raw_mb = env.get("MAX_FILE_SIZE_MB", data.get("max_file_size_mb"))
    if raw_bytes is not None:
        max_size = int(raw_bytes)
    elif raw_mb is not None:
        max_size = int(float(raw_mb) * 1024 * 1024)
    else:
        max_size = DEFAULT_MAX_FILE_SIZE_BYTES

    interval = float(
        env.get("ROTATION_INTERVAL_SECONDS",
                data.get("rotation_interval_seconds", DEFAULT_MAX_INTERVAL_SECONDS))
    )
    mode = _build_mode(env.get("ROTATION_MODE", data.get("mode", "size_or_time")),
                       max_size, interval)

    pattern = env.get("SUFFIX_PATTERN", data.get("suffix_pattern"))
    formatter = strftime_formatter(pattern) if pattern else None

    if "APPEND_ON_OPEN" in env:
        append_on_open = _parse_bool(env["APPEND_ON_OPEN"])
    else:
        append_on_open = bool(data.get("append_on_open", True))

    raw_mode = env.get("FILE_MODE", data.get("file_mode"))
    file_mode = int(str(raw_mode), 8) if raw_mode is not None else None

    return RotationConfig(
        path=env.get("LOG_PATH", data.get("path", RotationConfig.path)),
        archive_directory=env.get("ARCHIVE_DIR", data.get("archive_directory")),
        mode=mode,
        max_archive_count=_parse_count(
            env.get("MAX_ARCHIVE_COUNT", data.get("max_archive_count", DEFAULT_MAX_ARCHIVE_COUNT))
        ),
        suffix_formatter=formatter,
        append_on_open=append_on_open,
        append_marker=env.get("APPEND_MARKER", data.get("append_marker", DEFAULT_APPEND_MARKER)),
        file_mode=file_mode,
    )
