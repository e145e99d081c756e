import sys
from pathlib import Path
from urllib.parse import urlparse

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from pipedash.core.config import get_config
from pipedash.core.logging_config import configure_logging
from pipedash.database.db import init_db


def create_postgres_database(db_url: str) -> None:
    import psycopg2
    from psycopg2 import sql

    result = urlparse(db_url)
    database = result.path[1:]

    # Connect to default 'postgres' database to create the new db
    conn = psycopg2.connect(
        database="postgres",
        user=result.username,
        password=result.password,
        host=result.hostname,
        port=result.port,
    )
    conn.autocommit = True
    try:
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s", (database,))
            if cursor.fetchone():
                print(f"Database '{database}' already exists.")
                return
            print(f"Creating database '{database}'...")
            cursor.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(database)))
            print(f"Database '{database}' created successfully.")
    finally:
        conn.close()


def main() -> None:
    configure_logging()
    db_url = get_config().DATABASE_URL
    if db_url.startswith("postgresql"):
        create_postgres_database(db_url.replace("postgresql+psycopg2://", "postgresql://", 1))
    init_db()
    print("Tables created.")


if __name__ == "__main__":
    main()
