"""
Tests for the multi-table ``tpch`` function.
"""

from unittest.mock import Mock, patch

import pyarrow.parquet as pq
import pytest

from tpchudtf.catalog.memory import InMemoryCatalog
from tpchudtf.errors import CatalogError, GeneratorError, InvalidArgument
from tpchudtf.functions import TABLE_FUNCTIONS, TpchTableFunction
from tpchudtf.generator import DbgenTableGenerator
from tpchudtf.session import TpchSession
from tpchudtf.tables import META_TABLE_SCHEMA, TpchTables, register_tpch_udtf

TABLE_NAMES = [
    "tpch_nation",
    "tpch_customer",
    "tpch_orders",
    "tpch_lineitem",
    "tpch_part",
    "tpch_partsupp",
    "tpch_supplier",
    "tpch_region",
]


@pytest.fixture
def fake_functions(fake_generator):
    return {name: TpchTableFunction(name, fake_generator) for name in TABLE_NAMES}


@pytest.fixture
def catalog():
    return InMemoryCatalog()


class TestInMemoryPath:
    def test_meta_table(self, catalog, fake_functions):
        provider = TpchTables(catalog, fake_functions).invoke([1.0])

        scanned = provider.scan()
        assert len(scanned.batches) == 1
        assert provider.num_rows == 8
        assert provider.num_columns == 1
        assert provider.schema.equals(META_TABLE_SCHEMA)
        assert provider.to_arrow().column("table_name").to_pylist() == TABLE_NAMES

    def test_registers_every_table_in_order(self, catalog, fake_functions):
        TpchTables(catalog, fake_functions).invoke([0.5])

        assert catalog.table_names() == TABLE_NAMES
        assert all(catalog.lookup(name).num_rows == 500 for name in TABLE_NAMES)

    def test_tables_generated_whole(self, catalog, fake_functions, fake_generator):
        TpchTables(catalog, fake_functions).invoke([0.5])

        assert len(fake_generator.instances) == 8
        assert all((g.scale_factor, g.part, g.num_parts) == (0.5, 1, 1) for g in fake_generator.instances)

    def test_tables_share_one_scratch(self, catalog, fake_functions, fake_generator):
        with patch("tpchudtf.tables.DbgenScratch") as scratch_class:
            TpchTables(catalog, fake_functions).invoke([0.5])

        scratch = scratch_class.return_value.__enter__.return_value
        assert all(generator.scratch is scratch for generator in fake_generator.instances)
        scratch_class.assert_called_once_with()
        scratch_class.return_value.__exit__.assert_called_once()

    def test_scratch_released_after_failure(self, catalog, fake_functions):
        failing = Mock()
        failing.invoke.side_effect = GeneratorError("out of memory")
        fake_functions["tpch_part"] = failing

        with patch("tpchudtf.tables.DbgenScratch") as scratch_class:
            with pytest.raises(GeneratorError):
                TpchTables(catalog, fake_functions).invoke([1.0])

        scratch_class.return_value.__exit__.assert_called_once()

    def test_flag_without_path_stays_in_memory(self, catalog, fake_functions):
        writer_factory = Mock()
        provider = TpchTables(catalog, fake_functions, writer_factory).invoke([1.0, True, ""])

        writer_factory.assert_not_called()
        assert provider.num_rows == 8

    def test_defaults_to_all_tpch_functions(self, catalog):
        assert TpchTables(catalog).functions == TABLE_FUNCTIONS

    def test_invalid_arguments_register_nothing(self, catalog, fake_functions):
        with pytest.raises(InvalidArgument):
            TpchTables(catalog, fake_functions).invoke([1])
        assert catalog.table_names() == []

    def test_call_shortcut(self, catalog, fake_functions):
        assert TpchTables(catalog, fake_functions)(1.0).num_rows == 8


class TestPartialFailure:
    def test_generation_failure_keeps_earlier_tables(self, catalog, fake_functions):
        failing = Mock()
        failing.invoke.side_effect = GeneratorError("out of memory")
        fake_functions["tpch_orders"] = failing

        with pytest.raises(GeneratorError, match="tpch_orders: out of memory") as exc_info:
            TpchTables(catalog, fake_functions).invoke([1.0])

        assert catalog.table_names() == ["tpch_nation", "tpch_customer"]
        assert isinstance(exc_info.value.__cause__, GeneratorError)

    def test_registration_failure_aborts(self, fake_functions):
        catalog = Mock()
        catalog.register.side_effect = [None, CatalogError("Registering table 'tpch_customer' failed: conflict")]

        with pytest.raises(CatalogError, match="tpch_customer"):
            TpchTables(catalog, fake_functions).invoke([1.0])

        assert catalog.register.call_count == 2


class TestDiskPath:
    def test_writes_every_table_and_returns_nation(self, catalog, fake_functions, tmp_path):
        target = tmp_path / "out"
        provider = TpchTables(catalog, fake_functions).invoke([0.2, True, str(target)])

        assert provider.num_rows == 200
        assert provider.schema.names == ["id", "name"]
        assert sorted(p.name for p in target.iterdir()) == sorted(f"{name}.parquet" for name in TABLE_NAMES)
        assert pq.read_table(target / "tpch_lineitem.parquet").num_rows == 200
        assert catalog.table_names() == []

    def test_disk_path_shares_scratch(self, catalog, fake_functions, fake_generator, tmp_path):
        with patch("tpchudtf.tables.DbgenScratch") as scratch_class:
            TpchTables(catalog, fake_functions).invoke([0.1, True, str(tmp_path)])

        scratch = scratch_class.return_value.__enter__.return_value
        assert len(fake_generator.instances) == 8
        assert all(generator.scratch is scratch for generator in fake_generator.instances)

    def test_uses_writer_factory(self, catalog, fake_functions):
        writer = Mock()
        writer_factory = Mock(return_value=writer)

        TpchTables(catalog, fake_functions, writer_factory).invoke([1.0, True, "/data/tpch"])

        writer_factory.assert_called_once_with("/data/tpch")
        assert [call.args[0] for call in writer.write.call_args_list] == TABLE_NAMES


class TestRegisterTpchUdtf:
    def test_registers_under_tpch(self):
        session = Mock()
        tables = register_tpch_udtf(session)

        session.register_udtf.assert_called_once_with("tpch", tables)
        assert tables.catalog is session.catalog


@pytest.mark.integration
@pytest.mark.usefixtures("tpch_extension")
class TestTpchIntegration:
    def test_small_scale_session(self):
        with TpchSession(":memory:") as session:
            register_tpch_udtf(session)
            result = session.query("SELECT * FROM tpch(0.01)")

            assert result.column("table_name").to_pylist() == TABLE_NAMES
            assert session.execute("SELECT count(*) FROM tpch_nation") == [(25,)]
            assert session.execute("SELECT count(*) FROM tpch_customer") == [(1500,)]
            assert session.catalog.table_names() == TABLE_NAMES

    def test_dbgen_runs_once_per_call(self):
        with patch.object(
            DbgenTableGenerator, "run_dbgen", autospec=True, side_effect=DbgenTableGenerator.run_dbgen
        ) as run_dbgen:
            TpchTables(InMemoryCatalog()).invoke([0.01])

        assert run_dbgen.call_count == 1

    @pytest.mark.slow
    def test_meta_table_at_scale_factor_one(self):
        catalog = InMemoryCatalog()
        provider = TpchTables(catalog).invoke([1.0])

        assert len(provider.scan().batches) == 1
        assert (provider.num_rows, provider.num_columns) == (8, 1)
        assert catalog.lookup("tpch_lineitem").num_rows == 6001215
