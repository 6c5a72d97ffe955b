"""
SQL Column Store
================

Wide-column store emulated on a relational table through SQLAlchemy async
(aiosqlite for SQLite, asyncpg for PostgreSQL).

Features:
- Ordered range reads within a row (byte-wise order of column names)
- Batches applied in one transaction
- Last-write-wins on write_time when a column is written twice
- Separate tables per environment (location_index_test, location_index_prod)
"""

from typing import List, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from geoindex.storage.codec import Column

from .base import ColumnStore, MutationBatch
from .config import SQLStoreConfig
from .models import get_index_column_model

log = structlog.get_logger()


class SQLColumnStore(ColumnStore):
    """
    Column store backed by one SQL table.

    Example:
        store = SQLColumnStore(SQLStoreConfig.for_test())
        await store.connect()
        await store.ensure_table_exists()

        columns = await store.read(row_key, limit=50)

        await store.close()
    """

    def __init__(self, config: Optional[SQLStoreConfig] = None, retry_delay: float = 0.05):
        self.config = config or SQLStoreConfig()
        self.retry_delay = retry_delay
        self._engine = None
        self._session_maker = None
        self._connected = False

        self._model_class = get_index_column_model(self.config.table_name)

        log.info(
            f"SQLColumnStore initialized - "
            f"table={self.config.table_name}, "
            f"sqlite={self.config.is_sqlite}"
        )

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self):
        """Create the engine and session factory."""
        if self._connected:
            log.debug("Already connected to index database")
            return

        engine_kwargs = {"echo": self.config.echo}
        if not self.config.is_sqlite:
            engine_kwargs["pool_size"] = self.config.pool_size
            engine_kwargs["max_overflow"] = self.config.max_overflow

        self._engine = create_async_engine(self.config.url, **engine_kwargs)
        self._session_maker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        self._connected = True
        log.info(f"Connected to index database, table={self.config.table_name}")

    def _require_connection(self):
        if not self._connected:
            raise RuntimeError("Not connected to index database. Call connect() first.")

    async def ensure_table_exists(self):
        """Create the index table if it does not exist."""
        if not self._connected:
            await self.connect()

        table = self._model_class.__table__
        async with self._engine.begin() as conn:
            await conn.run_sync(lambda sync_conn: table.create(sync_conn, checkfirst=True))

        log.info(f"Table {self.config.table_name} ensured to exist")

    async def drop_table(self):
        """Drop the index table (destructive)."""
        if not self._connected:
            await self.connect()

        table = self._model_class.__table__
        async with self._engine.begin() as conn:
            await conn.run_sync(lambda sync_conn: table.drop(sync_conn, checkfirst=True))

        log.warning(f"Table {self.config.table_name} dropped")

    async def count(self) -> int:
        """Number of stored columns across all rows."""
        self._require_connection()

        async with self._session_maker() as session:
            result = await session.execute(select(func.count()).select_from(self._model_class))
            return result.scalar()

    async def close(self):
        """Dispose the engine."""
        if not self._connected:
            return

        await self._engine.dispose()
        self._connected = False
        log.info("Disconnected from index database")

    async def read(
        self,
        row_key: bytes,
        start: Optional[bytes] = None,
        limit: int = 100,
        reverse: bool = False,
    ) -> List[Column]:
        self._require_connection()
        if limit <= 0:
            return []

        model = self._model_class
        stmt = select(model.column_name, model.column_value, model.write_time).where(
            model.row_key == row_key
        )
        if start is not None:
            stmt = stmt.where(model.column_name <= start if reverse else model.column_name >= start)
        order = model.column_name.desc() if reverse else model.column_name.asc()
        stmt = stmt.order_by(order).limit(limit)

        async with self._session_maker() as session:
            result = await session.execute(stmt)
            rows = result.all()

        log.debug(f"Read {len(rows)} columns (limit={limit}, reverse={reverse})")
        return [Column(name=row[0], value=row[1], write_time=row[2]) for row in rows]

    async def _apply(self, batch: MutationBatch) -> None:
        self._require_connection()
        model = self._model_class

        try:
            async with self._session_maker() as session:
                async with session.begin():
                    pending = {}
                    for mutation in batch:
                        pk = (mutation.row_key, mutation.name)
                        existing = pending.get(pk)
                        if existing is None:
                            existing = await session.get(model, pk)
                        if existing is None:
                            pending[pk] = model(
                                row_key=mutation.row_key,
                                column_name=mutation.name,
                                column_value=mutation.value,
                                write_time=mutation.write_time,
                            )
                            session.add(pending[pk])
                        elif mutation.write_time >= existing.write_time:
                            existing.column_value = mutation.value
                            existing.write_time = mutation.write_time
        except SQLAlchemyError as e:
            log.warning(f"Batch transaction rolled back: {e}")
            raise

        log.debug(f"Applied batch of {len(batch)} mutations to {self.config.table_name}")

    async def health_check(self) -> bool:
        """
        Check that the database answers.

        Returns:
            True if healthy, False otherwise
        """
        try:
            if not self._connected:
                await self.connect()

            async with self._session_maker() as session:
                result = await session.execute(select(1))
                result.scalar()

            return True

        except Exception as e:
            log.error(f"Health check failed: {e}")
            return False
