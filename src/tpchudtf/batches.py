"""
Columnar batches: the Arrow batch adapter and the batch materializer.

The adapter turns a row generator into a lazy sequence of record batches. The
materializer drains such a sequence completely and combines it into one
immutable MaterializedTable, which is what a table provider serves to scans.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import duckdb
import pyarrow as pa

from tpchudtf.errors import GeneratorError, InternalError
from tpchudtf.generator.abstract import AbstractTableGenerator

DEFAULT_BATCH_SIZE = 8000


class ArrowBatchAdapter:
    """
    Lazy, finite sequence of record batches produced by one generator.

    The schema is known as soon as the adapter is created, before any batch has
    been read.
    """

    def __init__(self, generator: AbstractTableGenerator, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        self.generator = generator
        self.batch_size = batch_size
        self._reader = generator.arrow_reader(batch_size)

    @property
    def schema(self) -> pa.Schema:
        return self._reader.schema

    def __iter__(self) -> Iterator[pa.RecordBatch]:
        return self

    def __next__(self) -> pa.RecordBatch:
        try:
            return self._reader.read_next_batch()
        except (pa.ArrowException, duckdb.Error) as e:
            raise GeneratorError(f"{self.generator.table_name}: reading batch failed: {e}") from e


@dataclass(frozen=True)
class MaterializedTable:
    """A fully generated table: one schema and its batches, never mutated."""

    schema: pa.Schema
    batches: tuple[pa.RecordBatch, ...]

    @property
    def num_rows(self) -> int:
        return sum(batch.num_rows for batch in self.batches)

    @property
    def num_columns(self) -> int:
        return len(self.schema)

    def to_arrow(self) -> pa.Table:
        return pa.Table.from_batches(list(self.batches), schema=self.schema)


class BatchSequence(Iterable[pa.RecordBatch]):
    """In-memory batch sequence with a declared schema, e.g. for tests or small tables."""

    def __init__(self, schema: pa.Schema, batches: Iterable[pa.RecordBatch] = ()) -> None:
        self.schema = schema
        self._batches = list(batches)

    def __iter__(self) -> Iterator[pa.RecordBatch]:
        return iter(self._batches)


def materialize(batches: ArrowBatchAdapter | BatchSequence) -> MaterializedTable:
    """
    Drain a batch sequence and combine all batches into a single table.

    Row order is preserved. An empty sequence yields a zero-row table with the
    declared schema.

    Raises:
        InternalError: If a batch does not match the sequence's declared schema.
    """
    schema = batches.schema
    collected = []
    for index, batch in enumerate(batches):
        if not batch.schema.equals(schema):
            raise InternalError(f"Batch {index} does not match the declared schema:\n{batch.schema}\nexpected:\n{schema}")
        collected.append(batch)

    table = pa.Table.from_batches(collected, schema=schema).combine_chunks()
    combined = tuple(batch for batch in table.to_batches() if batch.num_rows > 0)
    return MaterializedTable(schema=schema, batches=combined)
