"""Rotation policy: per-write decision over the active file's tracked state."""

from dataclasses import dataclass
from datetime import datetime, time, timezone

from rotolog.config import Daily, RotationConfig


@dataclass
class ActiveFileState:
    path: str
    size_bytes: int = 0
    start_time: datetime | None = None
    created_at: datetime | None = None

    def record_write(self, nbytes: int):
        self.size_bytes += nbytes


def start_of_day(now: datetime) -> datetime:
    """Midnight of ``now``'s calendar day, with the offset in force at midnight.

    A fixed offset matching the local zone (what ``astimezone()`` returns) is
    resolved through the local zone, so DST change days get the right
    boundary. Named zones work out their own offset; naive clocks stay naive.
    """
    midnight = datetime.combine(now.date(), time.min)
    tz = now.tzinfo
    if tz is None:
        return midnight
    if isinstance(tz, timezone) and now.astimezone().utcoffset() == now.utcoffset():
        return midnight.astimezone()
    return midnight.replace(tzinfo=tz)


def should_rotate(state: ActiveFileState, config: RotationConfig, now: datetime) -> bool:
    # No rotation until the archive directory has been resolved.
    if config.archive_directory is None:
        return False

    if isinstance(config.mode, Daily):
        if state.start_time is None:
            return False
        return start_of_day(now) > state.start_time

    mode = config.mode
    if not mode.size_unlimited and state.size_bytes >= mode.max_file_size_bytes:
        return True
    if mode.interval_unlimited or state.start_time is None:
        return False
    elapsed = (now - state.start_time).total_seconds()
    return elapsed >= mode.max_interval_seconds
