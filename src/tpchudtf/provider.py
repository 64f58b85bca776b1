"""
Scan-only table provider over a materialized table.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import pyarrow as pa

from tpchudtf.batches import MaterializedTable


class MemTableProvider:
    """
    Immutable, scan-only view over a MaterializedTable.

    This is the unit registered into a catalog. The wrapped table is never
    mutated, so concurrent scans need no synchronization.
    """

    __slots__ = ("_table",)

    def __init__(self, table: MaterializedTable) -> None:
        self._table = table

    @classmethod
    def from_pydict(cls, data: Mapping[str, Sequence[Any]], schema: pa.Schema) -> "MemTableProvider":
        """Build a provider holding a single batch from column lists."""
        batch = pa.RecordBatch.from_pydict(dict(data), schema=schema)
        return cls(MaterializedTable(schema=schema, batches=(batch,)))

    def __repr__(self) -> str:
        return f"MemTableProvider(rows={self.num_rows}, columns={self.num_columns})"

    @property
    def schema(self) -> pa.Schema:
        return self._table.schema

    @property
    def num_rows(self) -> int:
        return self._table.num_rows

    @property
    def num_columns(self) -> int:
        return self._table.num_columns

    def scan(self) -> MaterializedTable:
        """Return the full batch collection together with its schema."""
        return self._table

    def to_arrow(self) -> pa.Table:
        return self._table.to_arrow()
