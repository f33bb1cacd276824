"""Schema management for SQL-backed providers.

Only providers that talk to a relational database get tables; the in-memory
provider used in development and tests needs nothing.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [provider for provider in domain.providers.values() if provider.conn_info["provider"] in SQL_PROVIDERS]


def _register_models(domain: Domain, provider) -> None:
    # Touching a repository's DAO builds and registers its SQLAlchemy model
    records = [
        *domain.registry.aggregates.values(),
        *domain.registry.entities.values(),
    ]
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables for every aggregate and entity of the domain."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_models(domain, provider)
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.create_all(engine)
            logger.info("Schema created", provider=provider.name, tables=len(provider._metadata.tables))


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_models(domain, provider)
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("Schema dropped", provider=provider.name)
