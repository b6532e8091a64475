"""Configuration, logging and database bootstrap tests."""
import json
import logging
import sqlite3

import pytest

from fraud_scoring import database
from fraud_scoring.config import Settings
from fraud_scoring.logging_config import ServiceJsonFormatter
from fraud_scoring.models.settings import ScoringSettingsUpdate
from fraud_scoring.repositories import SettingsRepository


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", "/tmp/scoring.db")
    monkeypatch.setenv("DEFAULT_AUTO_BLOCK_ABOVE", "90")
    config = Settings()
    assert config.database_path == "/tmp/scoring.db"
    assert config.default_auto_block_above == 90
    assert config.default_auto_approve_below == 20


def test_json_formatter_adds_service_fields():
    formatter = ServiceJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    record = logging.LogRecord(
        name="fraud_scoring.services.lifecycle",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Manual review applied",
        args=(),
        exc_info=None,
    )
    record.transaction_id = "txn-1"

    payload = json.loads(formatter.format(record))
    assert payload["message"] == "Manual review applied"
    assert payload["level"] == "INFO"
    assert payload["service"] == "fraud-scoring"
    assert payload["transaction_id"] == "txn-1"


def test_init_db_is_idempotent_and_keeps_stored_thresholds(conn):
    SettingsRepository(conn).update(ScoringSettingsUpdate(auto_approve_below=5))
    database.init_db(conn)
    stored = SettingsRepository(conn).get()
    assert stored.auto_approve_below == 5
    assert stored.auto_block_above == 80


def test_timestamps_sort_lexically():
    from datetime import datetime, timedelta, timezone

    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    stamps = [database.to_timestamp(base + timedelta(microseconds=m)) for m in (0, 1, 999_999, 1_000_000)]
    assert stamps == sorted(stamps)
    assert database.to_timestamp(base.replace(tzinfo=None)) == stamps[0]


def test_failed_commit_rolls_back_and_leaves_connection_usable(conn):
    conn.executescript("""
        CREATE TABLE parent (id INTEGER PRIMARY KEY);
        CREATE TABLE child (
            id INTEGER PRIMARY KEY,
            parent_id INTEGER REFERENCES parent(id) DEFERRABLE INITIALLY DEFERRED
        );
    """)

    with pytest.raises(sqlite3.IntegrityError):
        with database.transaction(conn):
            conn.execute("INSERT INTO child (id, parent_id) VALUES (1, 42)")

    assert not conn.in_transaction
    assert conn.execute("SELECT COUNT(*) FROM child").fetchone()[0] == 0

    SettingsRepository(conn).update(ScoringSettingsUpdate(auto_block_above=70))
    assert not conn.in_transaction
    assert SettingsRepository(conn).get().auto_block_above == 70
