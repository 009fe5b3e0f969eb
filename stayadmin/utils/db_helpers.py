"""
Database Helper Utilities

Provides:
- Database dialect detection (PostgreSQL vs SQLite)
- Dialect-specific INSERT .. ON CONFLICT builders for keyed upserts
"""

import logging
from sqlalchemy.orm import Session
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

logger = logging.getLogger(__name__)


def is_postgres(db: Session) -> bool:
    """Check if the database is PostgreSQL"""
    try:
        return db.bind.dialect.name == 'postgresql'
    except Exception:
        return False


def is_sqlite(db: Session) -> bool:
    """Check if the database is SQLite"""
    try:
        return db.bind.dialect.name == 'sqlite'
    except Exception:
        return True  # Default to SQLite for safety


def upsert_statement(db: Session, table, rows: list, conflict_columns: list, update_columns: list):
    """
    Build an INSERT .. ON CONFLICT DO UPDATE for the session's dialect.

    Existing rows matching conflict_columns are overwritten with the
    incoming values of update_columns, never duplicated.
    """
    insert = pg_insert if is_postgres(db) else sqlite_insert
    stmt = insert(table).values(rows)
    return stmt.on_conflict_do_update(
        index_elements=conflict_columns,
        set_={col: stmt.excluded[col] for col in update_columns}
    )
