from datetime import datetime, timedelta

import pytest


class FakeClock:
    """Callable clock for ``time_func`` that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 15, 12, 0, 0))


@pytest.fixture
def log_path(tmp_path):
    return str(tmp_path / "app.log")
