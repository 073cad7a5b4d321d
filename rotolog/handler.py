"""Bridge from the stdlib ``logging`` pipeline into a RotatingSink."""

import logging

from rotolog.config import RotationConfig
from rotolog.sink import RotatingSink


class RotatingSinkHandler(logging.Handler):
    """Formats records and appends them, newline-terminated, to a RotatingSink.

    Records emitted by rotolog itself are skipped so a rotation warning can
    never re-enter the sink it is reporting on.
    """

    terminator = "\n"

    def __init__(self, config: RotationConfig, level=logging.NOTSET, sink: RotatingSink | None = None):
        super().__init__(level)
        self.sink = sink or RotatingSink(config)
        self.last_rotation = None

    def emit(self, record: logging.LogRecord):
        if record.name.split(".")[0] == "rotolog":
            return
        try:
            msg = self.format(record) + self.terminator
        except Exception:
            self.handleError(record)
            return
        result = self.sink.write(msg)
        if result is not None:
            self.last_rotation = result

    def rotate(self):
        self.acquire()
        try:
            return self.sink.rotate_file()
        finally:
            self.release()

    def close(self):
        self.acquire()
        try:
            self.sink.close()
        finally:
            self.release()
        super().close()
