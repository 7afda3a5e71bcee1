"""
Database initialization utilities.

Creates the schema and seeds the default node/edge type catalogs that every
new project is bootstrapped from.
"""
import logging
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session

from vaev.db.models import Base, DefaultEdgeType, DefaultNodeType
from vaev.config import get_settings

logger = logging.getLogger(__name__)


DEFAULT_NODE_TYPES = [
    {"name": "Person", "fill_color": "#f4a261", "stroke_color": "#264653", "stroke_width": 2, "shape": 0},
    {"name": "Place", "fill_color": "#2a9d8f", "stroke_color": "#264653", "stroke_width": 2, "shape": 1},
    {"name": "Event", "fill_color": "#e9c46a", "stroke_color": "#264653", "stroke_width": 2, "shape": 2},
    {"name": "Thing", "fill_color": "#e76f51", "stroke_color": "#264653", "stroke_width": 2, "shape": 3},
]

DEFAULT_EDGE_TYPES = [
    {"name": "Relates to", "stroke_color": "#264653", "stroke_width": 2},
    {"name": "Part of", "stroke_color": "#2a9d8f", "stroke_width": 2},
    {"name": "Causes", "stroke_color": "#e76f51", "stroke_width": 3},
]


def create_database_if_not_exists(database_url: str):
    """Create the PostgreSQL database if it doesn't exist. No-op for other backends."""
    url = make_url(database_url)
    if not url.drivername.startswith("postgresql"):
        return

    db_name = url.database
    engine = create_engine(url.set(database="postgres"), isolation_level="AUTOCOMMIT")

    with engine.connect() as conn:
        # Check if database exists
        result = conn.execute(
            text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
            {"db_name": db_name}
        )

        if not result.fetchone():
            logger.info(f"Creating database: {db_name}")
            # Note: Database names cannot be parameterized in PostgreSQL
            conn.execute(text(f'CREATE DATABASE "{db_name}"'))
            logger.info(f"Database {db_name} created successfully")
        else:
            logger.info(f"Database {db_name} already exists")

    engine.dispose()


def create_tables(engine: Engine):
    """Create all tables defined in models."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("All tables created successfully")


def drop_all_tables(engine: Engine):
    """Drop all tables (useful for testing)."""
    logger.info("Dropping all database tables...")
    Base.metadata.drop_all(bind=engine)
    logger.info("All tables dropped successfully")


def seed_default_types(db: Session) -> int:
    """Insert the default type catalogs when they are empty. Returns rows added."""
    added = 0
    if db.query(DefaultNodeType).count() == 0:
        for row in DEFAULT_NODE_TYPES:
            db.add(DefaultNodeType(**row))
            added += 1
    if db.query(DefaultEdgeType).count() == 0:
        for row in DEFAULT_EDGE_TYPES:
            db.add(DefaultEdgeType(**row))
            added += 1
    db.commit()
    if added:
        logger.info("Seeded %d default type rows", added)
    return added


def init_database(engine: Engine):
    """Complete database initialization."""
    logger.info("Initializing database...")
    create_tables(engine)
    with Session(engine) as db:
        seed_default_types(db)
    logger.info("Database initialization complete")


def reset_database(engine: Engine):
    """Drop and recreate all tables."""
    logger.info("Resetting database...")
    drop_all_tables(engine)
    init_database(engine)
    logger.info("Database reset complete")


if __name__ == "__main__":
    from vaev.db.database import build_engine

    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    create_database_if_not_exists(settings.DATABASE_URL)
    init_database(build_engine(settings.DATABASE_URL))
