#!/usr/bin/env python3
"""
RQ Worker for the email-notifications queue.

Usage:
    python -m notification.worker
    python -m notification.worker --burst
    python -m notification.worker --workers 2 --verbose
"""

import argparse
import logging
import sys

from core.worker_runner import add_worker_arguments, run_workers

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Launchpad Notification Worker')
    add_worker_arguments(parser)
    args = parser.parse_args(argv)

    exit_code = run_workers(
        queue_name=lambda config: config.queue.notifications.name,
        default_workers=lambda config: config.queue.notifications.concurrency,
        args=args,
    )
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
