import math

import duckdb
import pyarrow as pa
import pytest

from tpchudtf.generator.abstract import AbstractTableGenerator

FAKE_SCHEMA = pa.schema([pa.field("id", pa.int64()), pa.field("name", pa.string())])


class FakeGenerator(AbstractTableGenerator):
    """Deterministic generator producing 1000 * scale_factor rows split into parts."""

    table_name = "fake"
    columns = ("id", "name")
    base_rows = 1000
    instances: list["FakeGenerator"] = []

    def __init__(self, scale_factor, part=1, num_parts=1, scratch=None):
        self.scale_factor = scale_factor
        self.part = part
        self.num_parts = num_parts
        self.scratch = scratch
        self.closed = False
        self.batch_sizes = []
        FakeGenerator.instances.append(self)

    def arrow_reader(self, batch_size):
        self.batch_sizes.append(batch_size)
        rows = int(self.base_rows * self.scale_factor)
        part_size = math.ceil(rows / self.num_parts)
        start = part_size * (self.part - 1)
        end = min(rows, start + part_size)
        ids = list(range(start, end))
        table = pa.table({"id": pa.array(ids, pa.int64()), "name": [f"row{i}" for i in ids]}, schema=FAKE_SCHEMA)
        return pa.RecordBatchReader.from_batches(FAKE_SCHEMA, table.to_batches(max_chunksize=batch_size))

    def close(self):
        self.closed = True


@pytest.fixture
def fake_generator():
    FakeGenerator.instances = []
    yield FakeGenerator
    FakeGenerator.instances = []


@pytest.fixture(scope="session")
def tpch_extension():
    """Skip tests that need DuckDB's tpch extension when it cannot be loaded."""
    conn = duckdb.connect()
    try:
        conn.execute("INSTALL tpch")
        conn.execute("LOAD tpch")
    except duckdb.Error as e:
        pytest.skip(f"DuckDB tpch extension not available: {e}")
    finally:
        conn.close()
