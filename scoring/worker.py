#!/usr/bin/env python3
"""
RQ Worker for the application-scoring queue.

Usage:
    python -m scoring.worker
    python -m scoring.worker --burst
    python -m scoring.worker --workers 4 --verbose
"""

import argparse
import logging
import sys

from core.worker_runner import add_worker_arguments, run_workers

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Launchpad Scoring Worker')
    add_worker_arguments(parser)
    args = parser.parse_args(argv)

    exit_code = run_workers(
        queue_name=lambda config: config.queue.scoring.name,
        default_workers=lambda config: config.queue.scoring.concurrency,
        args=args,
    )
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
