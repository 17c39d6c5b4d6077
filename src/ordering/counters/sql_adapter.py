"""SQL counter store.

One row per counter in a ``counters`` table. Every increment is a single
``UPDATE ... SET value = value + 1 ... RETURNING value``, so the database row
lock is what keeps concurrent workers from reading the same value.
"""

import structlog
from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine, delete, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Connection, Engine

from ordering.counters.port import CounterStore

logger = structlog.get_logger(__name__)

metadata = MetaData()

counters = Table(
    "counters",
    metadata,
    Column("name", String(100), primary_key=True),
    Column("value", Integer, nullable=False, default=0),
)


class SqlCounterStore(CounterStore):
    def __init__(self, database_uri: str | None = None, engine: Engine | None = None) -> None:
        self.engine = engine or create_engine(database_uri)
        metadata.create_all(self.engine)

    def _create_missing(self, conn: Connection, name: str, start: int) -> None:
        insert = sqlite_insert if self.engine.dialect.name == "sqlite" else postgresql_insert
        conn.execute(insert(counters).values(name=name, value=start).on_conflict_do_nothing(index_elements=["name"]))

    def increment(self, name: str) -> int:
        with self.engine.begin() as conn:
            self._create_missing(conn, name, 0)
            return conn.execute(
                update(counters)
                .where(counters.c.name == name)
                .values(value=counters.c.value + 1)
                .returning(counters.c.value)
            ).scalar_one()

    def increment_below(self, name: str, ceiling: int, start: int = 0) -> int | None:
        with self.engine.begin() as conn:
            self._create_missing(conn, name, start)
            value = conn.execute(
                update(counters)
                .where(counters.c.name == name, counters.c.value < ceiling)
                .values(value=counters.c.value + 1)
                .returning(counters.c.value)
            ).scalar_one_or_none()

        if value is None:
            logger.info("Counter at ceiling", counter=name, ceiling=ceiling)
        return value

    def value(self, name: str, default: int = 0) -> int:
        with self.engine.connect() as conn:
            value = conn.execute(select(counters.c.value).where(counters.c.name == name)).scalar_one_or_none()
        return default if value is None else value

    def clear(self) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(counters))
