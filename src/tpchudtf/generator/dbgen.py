"""
TPC-H row generators backed by DuckDB's ``tpch`` extension.

``dbgen`` runs in a private in-memory DuckDB database, once, on first use.
Partitions map onto dbgen's ``children``/``step`` parameters: part p of n is
``CALL dbgen(sf=..., children=n, step=p-1)``. nation and region have a fixed
size; they are always generated whole and partitioned by key order here.

A single dbgen call builds all eight relations. Generators created for one
invocation can share a DbgenScratch so each distinct (scale_factor, part,
num_parts) is generated only once.
"""

import math
import time

import duckdb
import pyarrow as pa

from tpchudtf.environment_config import EnvironmentConfigManager
from tpchudtf.errors import GeneratorError
from tpchudtf.generator.abstract import AbstractTableGenerator
from tpchudtf.logging_utils import get_thread_aware_logger

logger = get_thread_aware_logger()


class DbgenScratch:
    """
    Scratch databases shared by the generators of one invocation.

    Databases are keyed by the generator's dbgen parameters and stay open until
    close(). Generators never close a shared database themselves.
    """

    def __init__(self) -> None:
        self._databases: dict[tuple[float, int, int], duckdb.DuckDBPyConnection] = {}

    def __repr__(self) -> str:
        return f"DbgenScratch(databases={list(self._databases)})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def database(self, generator: "DbgenTableGenerator") -> duckdb.DuckDBPyConnection:
        """Return the database holding generator's data, running dbgen on first use."""
        key = generator.database_key
        conn = self._databases.get(key)
        if conn is None:
            conn = generator.run_dbgen()
            self._databases[key] = conn
        else:
            logger.debug(f"Reusing dbgen database {key} for {generator.table_name}")
        return conn

    def close(self) -> None:
        for conn in self._databases.values():
            conn.close()
        self._databases.clear()


class DbgenTableGenerator(AbstractTableGenerator):
    """Generates one relation through ``CALL dbgen`` in a scratch connection."""

    # Row count of relations whose size does not depend on the scale factor
    fixed_rows: int | None = None

    def __init__(self, scale_factor: float, part: int = 1, num_parts: int = 1, scratch: DbgenScratch | None = None) -> None:
        if part == 0 or num_parts == 0:
            raise GeneratorError(
                f"{self.table_name}: part and num_parts are 1-based, got part={part}, num_parts={num_parts}"
            )
        if part > num_parts:
            raise GeneratorError(f"{self.table_name}: part {part} is out of range for {num_parts} parts")

        self.scale_factor = scale_factor
        self.part = part
        self.num_parts = num_parts
        self.scratch = scratch
        self.config = EnvironmentConfigManager.get_generator_config()
        self.conn: duckdb.DuckDBPyConnection | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(scale_factor={self.scale_factor}, part={self.part}, num_parts={self.num_parts})"

    @property
    def database_key(self) -> tuple[float, int, int]:
        """The (scale_factor, part, num_parts) dbgen is called with."""
        if self.fixed_rows is not None:
            return (self.scale_factor, 1, 1)
        return (self.scale_factor, self.part, self.num_parts)

    def _dbgen_statement(self) -> str:
        scale_factor, part, num_parts = self.database_key
        if num_parts == 1:
            return f"CALL dbgen(sf={scale_factor!r})"
        return f"CALL dbgen(sf={scale_factor!r}, children={num_parts}, step={part - 1})"

    def _select_statement(self) -> str:
        sql = f"SELECT {', '.join(self.columns)} FROM {self.table_name}"
        if self.fixed_rows is not None and self.num_parts > 1:
            part_size = math.ceil(self.fixed_rows / self.num_parts)
            sql += f" ORDER BY {self.columns[0]} LIMIT {part_size} OFFSET {part_size * (self.part - 1)}"
        return sql

    def run_dbgen(self) -> duckdb.DuckDBPyConnection:
        """Open a new scratch database and run dbgen in it."""
        settings = {}
        if self.config["threads"]:
            settings["threads"] = self.config["threads"]
        if self.config["memory_limit"]:
            settings["memory_limit"] = self.config["memory_limit"]

        conn = duckdb.connect(":memory:", config=settings)
        try:
            if self.config["auto_install"]:
                conn.execute("INSTALL tpch")
            conn.execute("LOAD tpch")
            start = time.perf_counter()
            conn.execute(self._dbgen_statement())
            logger.debug(f"dbgen for {self!r} finished in {time.perf_counter() - start:.3f}s")
        except duckdb.Error:
            conn.close()
            raise
        return conn

    def arrow_reader(self, batch_size: int) -> pa.RecordBatchReader:
        try:
            if self.conn is None:
                self.conn = self.scratch.database(self) if self.scratch is not None else self.run_dbgen()
            return self.conn.sql(self._select_statement()).fetch_arrow_reader(batch_size)
        except duckdb.Error as e:
            raise GeneratorError(f"{self.table_name}: generation failed: {e}") from e

    def close(self) -> None:
        if self.conn is not None and self.scratch is None:
            self.conn.close()
        self.conn = None


class NationGenerator(DbgenTableGenerator):
    table_name = "nation"
    columns = ("n_nationkey", "n_name", "n_regionkey", "n_comment")
    fixed_rows = 25


class RegionGenerator(DbgenTableGenerator):
    table_name = "region"
    columns = ("r_regionkey", "r_name", "r_comment")
    fixed_rows = 5


class PartGenerator(DbgenTableGenerator):
    table_name = "part"
    columns = (
        "p_partkey",
        "p_name",
        "p_mfgr",
        "p_brand",
        "p_type",
        "p_size",
        "p_container",
        "p_retailprice",
        "p_comment",
    )


class SupplierGenerator(DbgenTableGenerator):
    table_name = "supplier"
    columns = ("s_suppkey", "s_name", "s_address", "s_nationkey", "s_phone", "s_acctbal", "s_comment")


class PartSuppGenerator(DbgenTableGenerator):
    table_name = "partsupp"
    columns = ("ps_partkey", "ps_suppkey", "ps_availqty", "ps_supplycost", "ps_comment")


class CustomerGenerator(DbgenTableGenerator):
    table_name = "customer"
    columns = (
        "c_custkey",
        "c_name",
        "c_address",
        "c_nationkey",
        "c_phone",
        "c_acctbal",
        "c_mktsegment",
        "c_comment",
    )


class OrderGenerator(DbgenTableGenerator):
    table_name = "orders"
    columns = (
        "o_orderkey",
        "o_custkey",
        "o_orderstatus",
        "o_totalprice",
        "o_orderdate",
        "o_orderpriority",
        "o_clerk",
        "o_shippriority",
        "o_comment",
    )


class LineItemGenerator(DbgenTableGenerator):
    table_name = "lineitem"
    columns = (
        "l_orderkey",
        "l_partkey",
        "l_suppkey",
        "l_linenumber",
        "l_quantity",
        "l_extendedprice",
        "l_discount",
        "l_tax",
        "l_returnflag",
        "l_linestatus",
        "l_shipdate",
        "l_commitdate",
        "l_receiptdate",
        "l_shipinstruct",
        "l_shipmode",
        "l_comment",
    )
