import os
import sys
import json
import asyncio
import argparse
from dataclasses import replace

from relay import logger
from relay.config import load_config
from relay.runner import relay_event


def _read_event(args):
    if args.event_file:
        with open(args.event_file, "r", encoding="utf-8") as f:
            return json.load(f)
    if args.event is not None:
        return json.loads(args.event)
    if not sys.stdin.isatty():
        raw = sys.stdin.read().strip()
        if raw:
            return json.loads(raw)
    return {}


def build_parser():
    parser = argparse.ArgumentParser(description="Run the packaged executable on one event, as the Lambda would.")
    parser.add_argument("event", nargs="?", help="event as a JSON string (default: stdin, else {})")
    parser.add_argument("--event-file", help="read the event from a JSON file")
    parser.add_argument("--executable", help="override RELAY_EXECUTABLE")
    return parser


def main(argv=None):
    """Local CLI entry point.

    Usage (from project root):
        python main.py '{"a": 1}'
        python main.py --event-file event.json --executable ./main
    """
    args = build_parser().parse_args(argv)
    try:
        event = _read_event(args)
    except (OSError, ValueError) as e:
        logger.error("Could not read event: %s", e)
        return 2
    try:
        cfg = load_config()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    if args.executable:
        cfg = replace(cfg, executable=os.path.abspath(args.executable))
    completion = asyncio.run(relay_event(event, cfg))
    if completion.ok:
        logger.info("Invocation succeeded")
        return 0
    logger.error("Invocation failed: %s", completion.error)
    return 1


if __name__ == "__main__":
    sys.exit(main())
