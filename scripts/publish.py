#!/usr/bin/env python3
"""Run the alarm publisher locally for a saved alarm event.

Usage::

    # Build and send the alert described by config/publisher.yaml
    python scripts/publish.py --event event.json

    # Print the alert instead of sending it
    python scripts/publish.py --event event.json --dry-run

    # Custom config file and log level
    python scripts/publish.py --config my.yaml --event event.json --log-level DEBUG
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import structlog

from alarm_publisher.alerting.publisher import Publisher
from alarm_publisher.core.config import load_config
from alarm_publisher.core.exceptions import PublisherError
from alarm_publisher.core.logging import setup_logging

logger = structlog.get_logger(__name__)


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    setup_logging(config.logging, level=args.log_level, fmt="console")

    with open(Path(args.event)) as f:
        event = json.load(f)

    publisher = Publisher(config)
    if args.dry_run:
        alert = publisher.build_alert(event)
        print(alert.to_json())
        return 0

    response = publisher.publish(event)
    logger.info("alert_sent", message_id=response.get("MessageId"))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Publish a CloudWatch alarm event as a queued alert.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to publisher YAML (default: config/publisher.yaml)",
    )
    parser.add_argument(
        "--event",
        required=True,
        help="Path to an EventBridge alarm state change event (JSON)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the alert JSON instead of sending it",
    )
    args = parser.parse_args()

    try:
        code = run(args)
    except PublisherError:
        logger.exception("publish_failed")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
