"""
Plain in-process catalog, used when no query engine is attached.
"""

import threading

from tpchudtf.catalog.abstract import AbstractCatalog
from tpchudtf.provider import MemTableProvider


class InMemoryCatalog(AbstractCatalog):
    def __init__(self) -> None:
        self._tables: dict[str, MemTableProvider] = {}
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"InMemoryCatalog(tables={self.table_names()})"

    def register(self, name: str, provider: MemTableProvider) -> None:
        with self._lock:
            # Re-registering moves the name to the end of the order
            self._tables.pop(name, None)
            self._tables[name] = provider

    def lookup(self, name: str) -> MemTableProvider | None:
        with self._lock:
            return self._tables.get(name)

    def table_names(self) -> list[str]:
        with self._lock:
            return list(self._tables)
