"""Quote repository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from autoquote.models.quote import QuoteCreate
from autoquote.repositories.db_pool import ThreadLocalConnection
from autoquote.repositories.quote_filters import QuoteFilter

QUOTE_COLUMNS = "id, name, zip_code, date_of_birth, monthly_premium, created_at"


class QuoteRepository:
    """Handles quote persistence."""

    def __init__(self, pool: ThreadLocalConnection):
        self._pool = pool

    def create_quote(self, payload: QuoteCreate, monthly_premium: Decimal) -> int:
        """Insert quote and return new id."""
        cursor = self._pool.execute(
            """
            INSERT INTO quotes (name, zip_code, date_of_birth, monthly_premium)
            VALUES (?, ?, ?, ?)
            """,
            (
                payload.name,
                payload.zip_code,
                payload.date_of_birth.isoformat(),
                str(monthly_premium),
            ),
        )
        return int(cursor.lastrowid)

    def get_quote(self, quote_id: int) -> dict[str, Any] | None:
        """Fetch one quote record."""
        row = self._pool.fetchone(
            f"SELECT {QUOTE_COLUMNS} FROM quotes WHERE id = ?",
            (quote_id,),
        )
        return dict(row) if row else None

    def find_quotes(self, quote_filter: QuoteFilter, most_recent_only: bool = False) -> list[dict[str, Any]]:
        """Return quotes matching every equality predicate."""
        where_sql, params = quote_filter.to_sql()
        order_sql = "ORDER BY id DESC LIMIT 1" if most_recent_only else "ORDER BY id"
        rows = self._pool.fetchall(
            f"SELECT {QUOTE_COLUMNS} FROM quotes {where_sql} {order_sql}",
            params,
        )
        return [dict(row) for row in rows]

    def search_created_since(
        self,
        since: datetime | None,
        zip_code: str | None = None,
        min_monthly_premium: Decimal | None = None,
        max_monthly_premium: Decimal | None = None,
    ) -> list[dict[str, Any]]:
        """List quotes created after ``since`` (UTC) with optional filters.

        ``since=None`` means no lower bound on the creation time.
        """
        where_clauses: list[str] = []
        params: list[Any] = []

        if since is not None:
            where_clauses.append("created_at > ?")
            params.append(since.replace(microsecond=0).isoformat(sep=" "))

        if zip_code:
            where_clauses.append("zip_code = ?")
            params.append(zip_code)
        if min_monthly_premium is not None:
            where_clauses.append("CAST(monthly_premium AS REAL) > ?")
            params.append(float(min_monthly_premium))
        if max_monthly_premium is not None:
            where_clauses.append("CAST(monthly_premium AS REAL) < ?")
            params.append(float(max_monthly_premium))

        where_sql = ""
        if where_clauses:
            where_sql = "WHERE " + " AND ".join(where_clauses)
        rows = self._pool.fetchall(
            f"""
            SELECT {QUOTE_COLUMNS}
            FROM quotes
            {where_sql}
            ORDER BY id
            """,
            tuple(params),
        )
        return [dict(row) for row in rows]

    def count_quotes(self) -> int:
        row = self._pool.fetchone("SELECT COUNT(*) AS num_quotes FROM quotes")
        return int(row["num_quotes"]) if row else 0
