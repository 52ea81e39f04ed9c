#!/usr/bin/env python3
"""
Shared startup for the RQ worker processes.

A single worker runs in this process; N > 1 workers run as an RQ
WorkerPool whose children build their own AppContext on first job.
"""

import argparse
import logging
import os
from typing import Callable

from redis import Redis
from rq import Worker
from rq.worker_pool import WorkerPool

from core.app_context import close_process_context, init_process_context
from core.config_loader import AppConfig, load_config

logger = logging.getLogger(__name__)


def add_worker_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--burst', action='store_true', help='Process all and exit')
    parser.add_argument('--workers', type=int, default=None, help='Concurrent workers (default from config)')
    parser.add_argument('--verbose', action='store_true')
    parser.add_argument('--config', default=None, help='Path to config.yaml')


def run_workers(
    queue_name: Callable[[AppConfig], str],
    default_workers: Callable[[AppConfig], int],
    args: argparse.Namespace,
) -> int:
    """Start the RQ worker(s). Returns a process exit code."""
    if args.config:
        # Pool children load config through the same variable
        os.environ['LAUNCHPAD_CONFIG'] = args.config
    config = load_config(args.config)

    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    name = queue_name(config)
    num_workers = args.workers or default_workers(config)

    if not config.queue.use_async_queue:
        logger.error("queue.use_async_queue is false: jobs run inline, there is nothing to consume")
        return 1

    logger.info(f"Starting RQ Worker")
    logger.info(f"Redis URL: {config.queue.redis_url}")
    logger.info(f"Queue: {name}")
    logger.info(f"Workers: {num_workers}")
    logger.info(f"Burst mode: {args.burst}")

    try:
        redis_conn = Redis.from_url(config.queue.redis_url)
        redis_conn.ping()
        logger.info("✓ Connected to Redis")

        if num_workers <= 1:
            init_process_context(config)
            worker = Worker([name], connection=redis_conn)
            logger.info("Worker started. Press Ctrl+C to stop.")
            worker.work(burst=args.burst)
        else:
            pool = WorkerPool([name], connection=redis_conn, num_workers=num_workers)
            logger.info("Worker pool started. Press Ctrl+C to stop.")
            pool.start(burst=args.burst)

    except KeyboardInterrupt:
        logger.info("\nWorker stopped")
    except Exception as e:
        logger.error(f"Error: {e}")
        return 1
    finally:
        close_process_context()

    return 0
