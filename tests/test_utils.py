"""
Tests for small shared helpers: dialect detection, JSON logs, notices
"""

import json
import logging
from unittest.mock import MagicMock

from stayadmin.client.notices import NoticeBoard
from stayadmin.models.availability import AvailabilityRecord
from stayadmin.utils.db_helpers import is_postgres, is_sqlite, upsert_statement
from stayadmin.utils.logging_config import JSONFormatter, set_request_context, clear_request_context


class TestDialectHelpers:

    def test_sqlite_detection(self):
        db = MagicMock()
        db.bind.dialect.name = 'sqlite'
        assert is_sqlite(db) is True
        assert is_postgres(db) is False

    def test_postgres_detection(self):
        db = MagicMock()
        db.bind.dialect.name = 'postgresql'
        assert is_postgres(db) is True
        assert is_sqlite(db) is False

    def test_postgres_upsert_targets_room_and_date(self):
        from sqlalchemy.dialects import postgresql

        db = MagicMock()
        db.bind.dialect.name = 'postgresql'
        stmt = upsert_statement(
            db,
            AvailabilityRecord.__table__,
            [{"room_id": 1, "date": "2026-07-01", "available": True}],
            conflict_columns=["room_id", "date"],
            update_columns=["available"],
        )

        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "ON CONFLICT" in sql
        assert "DO UPDATE" in sql
        assert "excluded.available" in sql


class TestJSONFormatter:

    def test_includes_request_context(self):
        set_request_context("req-1", user_id="7")
        try:
            record = logging.LogRecord("stayadmin.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
            data = json.loads(JSONFormatter().format(record))
        finally:
            clear_request_context()

        assert data["message"] == "hello world"
        assert data["request_id"] == "req-1"
        assert data["user_id"] == "7"
        assert data["level"] == "INFO"


class TestNoticeBoard:

    def test_drain_returns_in_order_and_empties(self):
        board = NoticeBoard()
        board.success("Updated 3 day(s)")
        board.error("Update failed")
        board.info("Loaded July")

        drained = board.drain()

        assert [n.kind for n in drained] == ["success", "error", "info"]
        assert board.notices == []
        assert board.latest is None
