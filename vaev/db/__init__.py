from vaev.db.models import Base
from vaev.db.database import build_engine, build_session_factory

from vaev.db.init_db import create_database_if_not_exists, init_database


def init_db(database_url: str):
    """Initialize the database - create both the database and tables if needed."""
    create_database_if_not_exists(database_url)
    engine = build_engine(database_url)
    init_database(engine)
    return engine
