#!/usr/bin/env python3
"""
Create the pgvector extension and all tables.

Usage:
    python -m database.init_db
    python -m database.init_db --config config.yaml
"""

import argparse
import logging
import sys

from sqlalchemy import text
from tenacity import retry, stop_after_attempt, wait_fixed

from core.config_loader import load_config
from database.database import Database

logger = logging.getLogger(__name__)


@retry(stop=stop_after_attempt(5), wait=wait_fixed(2), reraise=True)
def init_db(database: Database) -> None:
    """Idempotent: existing tables and the extension are left untouched."""
    logger.info("Initializing database...")
    try:
        if database.engine.dialect.name == "postgresql":
            with database.engine.connect() as connection:
                connection.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
                connection.commit()
                logger.info("Checked/Created 'vector' extension.")

        database.create_all()
        logger.info("Tables created or verified.")

    except Exception as e:
        logger.error(f"Error initializing DB: {e}")
        raise


def main(argv=None):
    parser = argparse.ArgumentParser(description='Launchpad database initialization')
    parser.add_argument('--config', default=None, help='Path to config.yaml')
    args = parser.parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    database = Database(url=config.database.url, echo=config.database.echo)
    exit_code = 0
    try:
        init_db(database)
    except Exception:
        exit_code = 1
    finally:
        database.dispose()
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
