"""
Tests for the Arrow batch adapter and the batch materializer.
"""

from unittest.mock import Mock

import pyarrow as pa
import pytest

from tpchudtf.batches import DEFAULT_BATCH_SIZE, ArrowBatchAdapter, BatchSequence, MaterializedTable, materialize
from tpchudtf.errors import CollaboratorFailure, GeneratorError, InternalError

from conftest import FAKE_SCHEMA


class TestArrowBatchAdapter:
    def test_default_batch_size(self, fake_generator):
        generator = fake_generator(1.0)
        ArrowBatchAdapter(generator)
        assert generator.batch_sizes == [DEFAULT_BATCH_SIZE]
        assert DEFAULT_BATCH_SIZE == 8000

    def test_schema_known_before_first_batch(self, fake_generator):
        adapter = ArrowBatchAdapter(fake_generator(1.0))
        assert adapter.schema.equals(FAKE_SCHEMA)

    def test_batches_are_bounded(self, fake_generator):
        adapter = ArrowBatchAdapter(fake_generator(1.0), batch_size=300)
        sizes = [batch.num_rows for batch in adapter]
        assert sizes == [300, 300, 300, 100]

    def test_sequence_is_finite(self, fake_generator):
        adapter = ArrowBatchAdapter(fake_generator(0.001), batch_size=10)
        assert len(list(adapter)) == 1
        with pytest.raises(StopIteration):
            next(adapter)

    def test_reader_failure_becomes_generator_error(self):
        reader = Mock()
        reader.read_next_batch.side_effect = pa.ArrowInvalid("stream broken")
        generator = Mock()
        generator.table_name = "lineitem"
        generator.arrow_reader.return_value = reader

        adapter = ArrowBatchAdapter(generator)
        with pytest.raises(GeneratorError, match="lineitem") as exc_info:
            next(adapter)
        assert isinstance(exc_info.value, CollaboratorFailure)
        assert isinstance(exc_info.value.__cause__, pa.ArrowInvalid)


class TestMaterialize:
    def test_concatenates_into_single_batch(self, fake_generator):
        table = materialize(ArrowBatchAdapter(fake_generator(1.0), batch_size=128))
        assert isinstance(table, MaterializedTable)
        assert len(table.batches) == 1
        assert table.num_rows == 1000
        assert table.num_columns == 2
        assert table.schema.equals(FAKE_SCHEMA)

    def test_preserves_row_order(self, fake_generator):
        table = materialize(ArrowBatchAdapter(fake_generator(0.5), batch_size=7))
        assert table.to_arrow().column("id").to_pylist() == list(range(500))

    def test_empty_sequence_is_not_an_error(self):
        table = materialize(BatchSequence(FAKE_SCHEMA, []))
        assert table.num_rows == 0
        assert table.schema.equals(FAKE_SCHEMA)
        assert table.to_arrow().num_rows == 0

    def test_empty_generator(self, fake_generator):
        table = materialize(ArrowBatchAdapter(fake_generator(0.0)))
        assert table.num_rows == 0
        assert table.num_columns == 2

    def test_schema_mismatch_is_internal_error(self):
        other = pa.record_batch({"id": pa.array([1, 2], pa.int32())})
        sequence = BatchSequence(FAKE_SCHEMA, [other])
        with pytest.raises(InternalError, match="Batch 0"):
            materialize(sequence)

    def test_mismatch_after_valid_batches(self):
        good = pa.RecordBatch.from_pydict({"id": [1], "name": ["a"]}, schema=FAKE_SCHEMA)
        bad = pa.record_batch({"id": pa.array([2], pa.int64()), "label": pa.array(["b"])})
        with pytest.raises(InternalError, match="Batch 1"):
            materialize(BatchSequence(FAKE_SCHEMA, [good, bad]))

    def test_materialized_table_is_frozen(self):
        table = materialize(BatchSequence(FAKE_SCHEMA, []))
        with pytest.raises(AttributeError):
            table.batches = ()
