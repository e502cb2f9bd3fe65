"""Application dependency container."""

from __future__ import annotations

from dataclasses import dataclass

from autoquote.core.config import AppConfig, load_config
from autoquote.repositories.audit_repository import AuditRepository
from autoquote.repositories.db_pool import ThreadLocalConnection
from autoquote.repositories.quote_repository import QuoteRepository
from autoquote.repositories.schema import initialize_schema
from autoquote.services.earnings_service import EarningsService
from autoquote.services.quote_service import QuoteService


@dataclass
class ServiceContainer:
    """Wires the storage handle, repositories and services."""

    config: AppConfig
    pool: ThreadLocalConnection
    quote_repo: QuoteRepository
    audit_repo: AuditRepository
    quote_service: QuoteService
    earnings_service: EarningsService

    def close(self) -> None:
        """Release every database connection."""
        self.pool.close_all()


def build_container(config: AppConfig | None = None) -> ServiceContainer:
    """Open storage, initialize schema and build dependencies."""
    config = config or load_config()

    pool = ThreadLocalConnection(config)
    pool.open()
    initialize_schema(pool)

    audit_repo = AuditRepository(pool)
    quote_repo = QuoteRepository(pool)

    return ServiceContainer(
        config=config,
        pool=pool,
        quote_repo=quote_repo,
        audit_repo=audit_repo,
        quote_service=QuoteService(quote_repo, audit_repo),
        earnings_service=EarningsService(quote_repo),
    )
