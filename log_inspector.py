"""CLI log inspector: list, read, and search the active log and its archives."""

import argparse
import sys

from rotolog.config import load_config, load_yaml_config
from rotolog.inspector import format_size, list_log_files, read_file, search_files


def main():
    parser = argparse.ArgumentParser(description="Inspect the active log file and its archives")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--list", action="store_true", help="List the active file and archives")
    group.add_argument("--read", metavar="PATH", help="Read a specific log file")
    group.add_argument("--search", metavar="TEXT", help="Search text across all log files")
    args = parser.parse_args()

    config = load_config(load_yaml_config(args.config))

    if args.list:
        files = list_log_files(config)
        if not files:
            print("No log files found.")
            return
        for path, size in files:
            print(f"  {path}  ({format_size(size)})")

    elif args.read:
        try:
            sys.stdout.write(read_file(args.read, config.encoding))
        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    elif args.search:
        results = search_files(config, args.search)
        if not results:
            print(f"No matches found for '{args.search}'.")
            return
        for path, line_num, line in results:
            print(f"  [{path}:{line_num}] {line}")


if __name__ == "__main__":
    main()
