"""Schema management for the payments domain's SQL providers.

Memory providers need no schema; only sqlite and postgresql providers are
touched.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

from payments.payment.payment import Payment

logger = structlog.get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [p for p in domain.providers.values() if p.conn_info["provider"] in SQL_PROVIDERS]


def setup_db(domain: Domain) -> int:
    """Create payment tables. Returns the number of providers touched."""
    with domain.domain_context():
        providers = _sql_providers(domain)
        for provider in providers:
            # Table metadata is registered when the DAO is first built
            if Payment.meta_.provider == provider.name:
                domain.repository_for(Payment)._dao  # noqa: B018
            outbox_repos = getattr(domain, "_outbox_repos", {})
            if provider.name in outbox_repos:
                outbox_repos[provider.name]._dao  # noqa: B018

            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            logger.info("payments.db_created", provider=provider.name)
        return len(providers)


def drop_db(domain: Domain) -> int:
    with domain.domain_context():
        providers = _sql_providers(domain)
        for provider in providers:
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            logger.info("payments.db_dropped", provider=provider.name)
        return len(providers)
