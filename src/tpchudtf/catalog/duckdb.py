"""
Catalog backed by a DuckDB connection.

Providers are exposed to SQL by registering their Arrow data as views on the
connection, so ``SELECT * FROM tpch_nation`` works once the entry exists.
"""

import threading

import duckdb

from tpchudtf.catalog.abstract import AbstractCatalog
from tpchudtf.errors import CatalogError
from tpchudtf.logging_utils import get_thread_aware_logger
from tpchudtf.provider import MemTableProvider

logger = get_thread_aware_logger()


class DuckDBCatalog(AbstractCatalog):
    def __init__(self, conn: duckdb.DuckDBPyConnection, lock: "threading.RLock | None" = None) -> None:
        """
        Initialize the catalog on an existing connection.

        Args:
            conn: The DuckDB connection tables are registered on
            lock: Lock guarding every use of conn; share it with other users of
                the same connection (defaults to a private lock)
        """
        self.conn = conn
        self.lock = lock or threading.RLock()
        self._tables: dict[str, MemTableProvider] = {}

    def __repr__(self) -> str:
        return f"DuckDBCatalog(tables={self.table_names()})"

    def register(self, name: str, provider: MemTableProvider) -> None:
        with self.lock:
            try:
                self.conn.register(name, provider.to_arrow())
            except duckdb.Error as e:
                raise CatalogError(f"Registering table '{name}' failed: {e}") from e
            self._tables.pop(name, None)
            self._tables[name] = provider
        logger.debug(f"Registered view {name} ({provider.num_rows} rows)")

    def lookup(self, name: str) -> MemTableProvider | None:
        with self.lock:
            return self._tables.get(name)

    def table_names(self) -> list[str]:
        with self.lock:
            return list(self._tables)
