import logging

import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from sqlalchemy.engine import make_url

from vaev.config import get_settings
from vaev.db.database import build_engine
from vaev.db.init_db import reset_database


def recreate_postgres_database(database_url: str):
    """Drop and recreate a PostgreSQL database."""
    url = make_url(database_url)
    db_name = url.database

    # Connect to default postgres database
    print(f"Connecting to PostgreSQL to drop database '{db_name}'...")
    conn = psycopg2.connect(
        host=url.host, port=url.port, user=url.username, password=url.password, dbname="postgres",
    )
    conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
    cursor = conn.cursor()

    # Drop connections
    print("Closing all connections to the database...")
    cursor.execute("""
        SELECT pg_terminate_backend(pg_stat_activity.pid)
        FROM pg_stat_activity
        WHERE pg_stat_activity.datname = %s
        AND pid <> pg_backend_pid();
    """, (db_name,))

    print(f"Dropping database '{db_name}'...")
    # Database names cannot be parameterized in PostgreSQL DDL
    cursor.execute(f'DROP DATABASE IF EXISTS "{db_name}"')
    print(f"Creating database '{db_name}'...")
    cursor.execute(f'CREATE DATABASE "{db_name}"')

    cursor.close()
    conn.close()


def main():
    settings = get_settings()
    if make_url(settings.DATABASE_URL).drivername.startswith("postgresql"):
        recreate_postgres_database(settings.DATABASE_URL)

    engine = build_engine(settings.DATABASE_URL)
    reset_database(engine)
    engine.dispose()
    print("Database has been reset successfully!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    confirm = input("This will DELETE ALL DATA in the database. Are you sure? (y/n): ")
    if confirm.lower() == 'y':
        main()
    else:
        print("Operation cancelled.")
