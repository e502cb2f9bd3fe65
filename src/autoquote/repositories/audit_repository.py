"""Audit log repository."""

from __future__ import annotations

from typing import Any

from autoquote.repositories.db_pool import ThreadLocalConnection


class AuditRepository:
    """Persists and manages quote audit logs."""

    def __init__(self, pool: ThreadLocalConnection):
        self._pool = pool

    def add_log(self, action: str, entity: str, entity_id: int | None, detail: str) -> None:
        """Insert an audit log record."""
        self._pool.execute(
            """
            INSERT INTO audit_logs (action, entity, entity_id, detail)
            VALUES (?, ?, ?, ?)
            """,
            (action, entity, entity_id, detail),
        )

    def cleanup_old_logs(self, retention_days: int) -> int:
        """Delete logs older than retention_days and return removed row count."""
        cursor = self._pool.execute(
            """
            DELETE FROM audit_logs
            WHERE created_at < datetime('now', ?)
            """,
            (f"-{int(retention_days)} days",),
        )
        return cursor.rowcount

    def logs_for_quote(self, quote_id: int) -> list[dict[str, Any]]:
        """Return the audit trail of one quote, newest first."""
        rows = self._pool.fetchall(
            """
            SELECT action, entity_id, detail, created_at
            FROM audit_logs
            WHERE entity = 'quote' AND entity_id = ?
            ORDER BY id DESC
            """,
            (quote_id,),
        )
        return [dict(row) for row in rows]
