"""Schema helpers for the SQLAlchemy-backed providers.

The in-memory provider needs no schema; SQLite and PostgreSQL providers get
their tables created from the registered aggregates and entities.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def setup_db(domain: Domain) -> None:
    """Create tables for every SQL provider the domain is configured with."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching each repository's DAO registers its model with SQLAlchemy
            records = [*domain.registry.aggregates.values(), *domain.registry.entities.values()]
            for record in records:
                if record.cls.meta_.provider == provider.name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider in _sql_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))


def reset_data(domain: Domain) -> None:
    """Empty every provider and the event store. Used between tests."""
    for _, provider in domain.providers.items():
        provider._data_reset()
    domain.event_store.store._data_reset()
