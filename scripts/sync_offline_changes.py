"""Replay pending offline area changes against the areas service.

Loads configuration from a YAML settings file (or the AREA_SYNC_*
environment variables), runs one reconciliation pass and prints the event
trail.

Usage:
    python scripts/sync_offline_changes.py [--config settings.yaml] [--json-logs]

Exit status is 1 when areas still have pending changes after the pass.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from area_sync import EventRecorder, SyncConfig, create_area_service
from area_sync.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML settings file with an area_sync section (default: environment)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit structured JSON logs on stdout",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


async def run(config: SyncConfig) -> int:
    service = await create_area_service(config)
    recorder = EventRecorder().attach(service.events)

    try:
        pending = await service.cache.list_pending()
        print(f"{len(pending)} areas with offline changes")

        await service.sync_offline_changes()

        for event in recorder.events:
            target = f" {event.area_id}" if event.area_id else ""
            print(f"  {event.event_type.value}{target}")

        remaining = await service.cache.list_pending()
        print(f"{len(pending) - len(remaining)} synced, {len(remaining)} still pending")
        return 1 if remaining else 0
    finally:
        await service.api.close()
        await service.cache.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.INFO

    configure_logging(level, json_logs=args.json_logs)

    try:
        config = SyncConfig.from_yaml(args.config) if args.config else SyncConfig.from_environment()
    except (OSError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    return asyncio.run(run(config))


if __name__ == "__main__":
    sys.exit(main())
