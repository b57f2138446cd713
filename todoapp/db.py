import logging
from functools import lru_cache

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    false,
)
from sqlalchemy.engine import Engine, make_url

from todoapp.config import get_settings
from todoapp.exceptions import StorageError

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 255

metadata = MetaData()

# sqlite_autoincrement keeps SQLite from handing out the id of a deleted row again
todos_table = Table(
    "todos",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(TITLE_MAX_LENGTH), nullable=False),
    Column("completed", Boolean, nullable=False, default=False, server_default=false()),
    Column("createdAt", DateTime, nullable=False),
    Column("updatedAt", DateTime, nullable=True),
    sqlite_autoincrement=True,
)


@lru_cache
def get_engine() -> Engine:
    """Return the process-wide engine built from DATABASE_URL."""
    database_url = get_settings().database_url
    if not database_url:
        raise StorageError("DATABASE_URL is not set")
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


def init_db() -> None:
    """Create the todos table if it does not exist yet."""
    metadata.create_all(get_engine())
    logger.info("Todos table ready")


def dispose_engine() -> None:
    if get_engine.cache_info().currsize:
        get_engine().dispose()
        logger.info("Database connection closed")
    get_engine.cache_clear()
