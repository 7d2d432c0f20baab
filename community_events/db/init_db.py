import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from sqlalchemy.engine import make_url
from community_events.core.config import settings
from community_events.db.base import Base
from community_events.db.session import engine
import logging

logger = logging.getLogger(__name__)

def create_database(database_url: str | None = None):
    """Create the local development database named in DATABASE_URL if it doesn't exist."""
    url = make_url(database_url or settings.DATABASE_URL)
    if not url.drivername.startswith("postgresql"):
        logger.info("Skipping database creation for %s", url.drivername)
        return
    try:
        # Connect to default 'postgres' database on the same server to check/create target DB
        con = psycopg2.connect(
            user=url.username,
            password=url.password,
            host=url.host,
            port=url.port,
            dbname="postgres"
        )
        con.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
        cur = con.cursor()

        cur.execute(
            "SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s",
            (url.database,),
        )
        exists = cur.fetchone()

        if not exists:
            logger.info("Database %s does not exist. Creating...", url.database)
            cur.execute(f'CREATE DATABASE "{url.database}"')
            logger.info("Database %s created successfully.", url.database)
        else:
            logger.info("Database %s already exists.", url.database)

        cur.close()
        con.close()
    except psycopg2.Error as e:
        logger.error("Error creating database: %s", e)


def create_tables():
    """Create any missing tables in the local development database."""
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    create_database()
    create_tables()
