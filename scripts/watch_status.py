#!/usr/bin/env python3
"""
Watch an establishment's open/closed status.

Reloads the schedule and re-evaluates it on a fixed interval, logging every
evaluation and each open/closed flip.

Usage:
    python scripts/watch_status.py <estab_id> [--interval SECONDS]
"""

import sys
import time
import argparse
import logging
from pathlib import Path

# add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from storehours.core.config import settings
from storehours.core.logging import setup_logging
from storehours.db.session import session_scope
from storehours.services.business import ScheduleStore, StatusPoller

setup_logging()
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Watch business hours status")
    parser.add_argument("estab_id", type=int)
    parser.add_argument("--interval", type=float, default=settings.STATUS_POLL_INTERVAL_SECONDS)
    args = parser.parse_args()

    def load():
        with session_scope() as db:
            return ScheduleStore(db).load(args.estab_id)

    last = {"is_open": None}

    def publish(status):
        logger.info(f"Status: {status.to_dict()}")
        if last["is_open"] is not None and last["is_open"] != status.is_open:
            logger.info("Establishment is now %s", "OPEN" if status.is_open else "CLOSED")
        last["is_open"] = status.is_open

    poller = StatusPoller(load, publish, interval_seconds=args.interval)
    poller.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        poller.stop()
    return True


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
