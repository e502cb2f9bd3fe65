"""Shared fixtures for quote tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from autoquote.core.config import AppConfig, DatabaseConfig, LoggingConfig, ServerConfig
from autoquote.repositories.db_pool import ThreadLocalConnection
from autoquote.repositories.schema import initialize_schema

NOW = datetime(2022, 6, 19, 12, 0, 0)


@pytest.fixture
def app_config(tmp_path, monkeypatch) -> AppConfig:
    monkeypatch.setenv("AUTOQUOTE_DB_KEY", "test-db-key")
    return AppConfig(
        database=DatabaseConfig(
            path=str(tmp_path / "test.db"),
            key_env="AUTOQUOTE_DB_KEY",
            allow_sqlite_fallback=True,
        ),
        server=ServerConfig(host="127.0.0.1", port=3000),
        logging=LoggingConfig(level="INFO", retention_days=365),
    )


@pytest.fixture
def pool(app_config):
    pool = ThreadLocalConnection(app_config)
    initialize_schema(pool)
    yield pool
    pool.close_all()


def insert_quote(pool, name, zip_code, monthly_premium, created_at, date_of_birth="1987-06-19") -> int:
    """Insert a quote with an explicit creation time."""
    cursor = pool.execute(
        """
        INSERT INTO quotes (name, zip_code, date_of_birth, monthly_premium, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (name, zip_code, date_of_birth, monthly_premium, created_at),
    )
    return int(cursor.lastrowid)
