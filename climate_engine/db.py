import logging
from pathlib import Path

import duckdb

from climate_engine.config import settings

logger = logging.getLogger(__name__)

_connection: duckdb.DuckDBPyConnection | None = None

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS series_cache (
    key VARCHAR PRIMARY KEY,
    body VARCHAR NOT NULL,
    stored_at TIMESTAMP NOT NULL
);
"""


def connect(db_path: str) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB database (":memory:" allowed) with the schema applied."""
    if db_path != ":memory:":
        path = Path(db_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        db_path = str(path)
    conn = duckdb.connect(db_path)
    init_schema(conn)
    return conn


def get_db() -> duckdb.DuckDBPyConnection:
    """Shared connection; each caller gets its own cursor for thread safety."""
    global _connection
    if _connection is None:
        _connection = connect(settings.db_path)
    return _connection.cursor()


def init_schema(db: duckdb.DuckDBPyConnection) -> None:
    for stmt in SCHEMA_SQL.split(";"):
        stmt = stmt.strip()
        if stmt:
            db.execute(stmt)
    logger.info("Database schema initialized")
