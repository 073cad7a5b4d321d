"""Archive file naming: ``<base><suffix>.<ext>`` inside the archive directory."""

import os
from datetime import datetime

from rotolog.config import Daily, RotationConfig
from rotolog.policy import ActiveFileState


def archive_file_name(base: str, suffix: str, ext: str) -> str:
    name = f"{base}{suffix}"
    return f"{name}.{ext}" if ext else name


def compute_archive_path(config: RotationConfig, state: ActiveFileState,
                         now: datetime, created_at: datetime | None = None) -> str:
    """Destination path for the file being sealed.

    Daily mode names the archive after the day the sealed file was created
    (``created_at`` from metadata, else the tracked creation time). Size/time
    mode formats ``now``. Two rotations that format to the same suffix map to
    the same path; the formatter's resolution must match the rotation rate.
    """
    if isinstance(config.mode, Daily):
        stamp = created_at or state.created_at or now
    else:
        stamp = now
    suffix = config.suffix_formatter(stamp)
    name = archive_file_name(config.base_file_name, suffix, config.file_extension)
    return os.path.join(config.archive_directory, name)
