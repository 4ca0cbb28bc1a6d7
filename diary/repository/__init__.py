import logging
import os

logger = logging.getLogger(__name__)


def build_repository(config):
    """Pick the storage backend from DATABASE_URL, falling back to SQLite."""
    database_url = config.get("DATABASE_URL")
    if database_url and database_url.startswith(("postgres://", "postgresql://")):
        from diary.repository.postgres_repository import PostgresJournalRepository

        logger.info("using postgres repository")
        return PostgresJournalRepository(database_url)

    from diary.repository.sqlite_repository import SQLiteJournalRepository

    db_path = config.get("SQLITE_PATH")
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    logger.info("using sqlite repository", extra={"db_path": db_path})
    return SQLiteJournalRepository(db_path)
