"""Rotolog demo service: writes generated log lines through a rotating sink until stopped."""

import argparse
import logging
import random
import signal
import sys
import time
import uuid
from datetime import datetime, timezone

from rotolog.config import Daily, load_config, load_yaml_config
from rotolog.sink import RotatingSink

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [rotolog] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_running = True


def _signal_handler(sig, _frame):
    global _running
    logger.info("Shutdown signal received (signal %d), stopping...", sig)
    _running = False


LEVELS = ["INFO", "INFO", "INFO", "INFO", "DEBUG", "WARN", "ERROR"]
SERVICES = ["auth-api", "order-svc", "payment-gw", "user-svc", "catalog-api"]
MESSAGES = {
    "INFO": [
        "Request processed successfully",
        "Health check passed",
        "Cache hit for user session",
    ],
    "DEBUG": [
        "Entering request handler",
        "Token validation started",
    ],
    "WARN": [
        "Slow query detected (>500ms)",
        "Connection pool nearing capacity",
    ],
    "ERROR": [
        "Failed to connect to database",
        "Timeout waiting for upstream response",
    ],
}


def generate_entry() -> str:
    now = datetime.now(timezone.utc)
    timestamp = now.strftime("%Y-%m-%d %H:%M:%S.") + f"{now.microsecond // 1000:03d}"
    level = random.choice(LEVELS)
    service = random.choice(SERVICES)
    req_id = uuid.uuid4().hex[:8]
    message = random.choice(MESSAGES[level])
    return f"{timestamp} [{level}] [{service}] [{req_id}] {message}\n"


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Write demo log lines through a rotating sink")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--interval", type=float, default=0.05,
                        help="Seconds between generated lines (default: 0.05)")
    parser.add_argument("--count", type=int, default=0,
                        help="Stop after this many lines (default: run until signalled)")
    return parser


def main():
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    args = build_cli_parser().parse_args()
    config = load_config(load_yaml_config(args.config))
    logger.info("Starting rotolog demo writer")
    if isinstance(config.mode, Daily):
        logger.info("Config: path=%s, mode=daily, max_archives=%s",
                    config.path, config.max_archive_count)
    else:
        logger.info("Config: path=%s, max_size=%d bytes, interval=%.0fs, max_archives=%s",
                    config.path, config.mode.max_file_size_bytes,
                    config.mode.max_interval_seconds, config.max_archive_count)

    sink = RotatingSink(config)
    entries_written = 0

    try:
        while _running and (args.count <= 0 or entries_written < args.count):
            result = sink.write(generate_entry())
            entries_written += 1

            if result is not None:
                if result.success:
                    logger.info("Rotated: %s (%d entries written so far)",
                                result.archive_path, entries_written)
                else:
                    logger.warning("Rotation failed: %s", result.error)

            time.sleep(args.interval)
    except KeyboardInterrupt:
        pass

    sink.close()
    logger.info("Shut down cleanly. Total entries written: %d", entries_written)


if __name__ == "__main__":
    main()
