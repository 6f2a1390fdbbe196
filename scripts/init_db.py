#!/usr/bin/env python3
"""
Database initialization script for the store hours backend.

This script handles:
- Database creation (for PostgreSQL)
- Table creation from the SQLAlchemy models
- Optional seeding of an establishment with a default week

Usage:
    python scripts/init_db.py [--seed-data] [--check-only]
"""

import sys
import argparse
import logging
from pathlib import Path
from urllib.parse import urlparse

# add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import create_engine, text

from storehours.core.config import settings
from storehours.core.logging import setup_logging
from storehours.db.base import Base
from storehours.db.session import engine, SessionLocal
from storehours import models

setup_logging()
logger = logging.getLogger(__name__)

# Mon-Sat 10:00-22:00, Sunday disabled
DEFAULT_WEEK = [
    {"day_of_week": day, "enabled": day != 6, "intervals": [{"open": "10:00", "close": "22:00"}] if day != 6 else []}
    for day in range(7)
]


def create_database_if_not_exists():
    """create db if it doesn't exist (PostgreSQL only)."""
    database_url = settings.DATABASE_URL

    if not database_url.startswith("postgresql"):
        logger.info("Database URL is not PostgreSQL, skipping database creation")
        return True

    try:
        parsed = urlparse(database_url)
        database_name = parsed.path[1:]  # Remove leading '/'

        # connect to the maintenance db to create ours
        postgres_engine = create_engine(f"{parsed.scheme}://{parsed.netloc}/postgres", isolation_level="AUTOCOMMIT")

        with postgres_engine.connect() as conn:
            result = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
                {"db_name": database_name}
            )

            if result.fetchone() is None:
                logger.info(f"Creating database: {database_name}")
                conn.execute(text(f'CREATE DATABASE "{database_name}"'))
                logger.info(f"Database {database_name} created successfully")
            else:
                logger.info(f"Database {database_name} already exists")

        postgres_engine.dispose()
        return True

    except Exception as e:
        logger.error(f"Error creating database: {e}")
        return False


def create_tables():
    """create any missing tables."""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Tables created successfully")
        return True
    except Exception as e:
        logger.error(f"Error creating tables: {e}")
        return False


def seed_initial_data(slug: str = "demo", name: str = "Demo Store"):
    """create a demo establishment with the default week if it doesn't exist yet."""
    db = SessionLocal()
    try:
        existing = db.query(models.Establishment).filter(models.Establishment.slug == slug).first()
        if existing:
            logger.info(f"Establishment {slug} already exists, skipping seed")
            return True

        establishment = models.Establishment(
            name=name,
            slug=slug,
            timezone=settings.DEFAULT_TIMEZONE,
            allow_orders_when_closed=False,
            show_schedule_on_menu=True,
        )
        db.add(establishment)
        db.flush()

        for day in DEFAULT_WEEK:
            db.add(models.EstablishmentHours(estab_id=establishment.id, **day))

        db.commit()
        logger.info(f"Seeded establishment {slug} with default weekly hours")
        return True
    except Exception as e:
        logger.error(f"Error seeding initial data: {e}")
        db.rollback()
        return False
    finally:
        db.close()


def check_database_connection():
    """check if db connection is working."""
    try:
        logger.info("Testing database connection...")
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        logger.info("Database connection successful")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


def main():
    parser = argparse.ArgumentParser(description="Initialize store hours database")
    parser.add_argument(
        "--seed-data",
        action="store_true",
        help="Seed a demo establishment with default weekly hours"
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only check database connection, don't create tables"
    )
    args = parser.parse_args()

    logger.info("Starting database initialization...")

    if not args.check_only and not create_database_if_not_exists():
        logger.error("Failed to create database")
        return False

    if not check_database_connection():
        logger.error("Database connection failed")
        return False

    if args.check_only:
        logger.info("Database check completed successfully")
        return True

    if not create_tables():
        return False

    if args.seed_data and not seed_initial_data():
        return False

    logger.info("Database initialization completed successfully")
    return True


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
