"""
Multi-table function: generates every TPC-H relation in one call.

    tpch(scale_factor [, write_to_disk, path])

In memory (the default, or when path is empty) each relation is generated with
the scale factor only and registered in the catalog under its fixed name. The
call returns a one-column meta-table listing the registered names in
registration order.

With write_to_disk = true and a non-empty path, every relation is written to
``<path>/<name>.parquet`` instead and the nation table is returned.
"""

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pyarrow as pa

from tpchudtf.arguments import TablesConfig, parse_tables_args
from tpchudtf.catalog.abstract import AbstractCatalog
from tpchudtf.errors import TpchUdtfError, with_context
from tpchudtf.functions import TABLE_FUNCTIONS, TpchTableFunction
from tpchudtf.generator import DbgenScratch
from tpchudtf.logging_utils import get_thread_aware_logger
from tpchudtf.provider import MemTableProvider
from tpchudtf.writer import ParquetTableWriter

if TYPE_CHECKING:
    from tpchudtf.session import TpchSession

logger = get_thread_aware_logger()

META_TABLE_SCHEMA = pa.schema([pa.field("table_name", pa.string(), nullable=False)])


class TpchTables:
    """
    Table function that generates all TPC-H tables into a catalog.

    Tables registered before a failing table stay registered; there is no
    rollback across the eight relations.
    """

    def __init__(
        self,
        catalog: AbstractCatalog,
        functions: Mapping[str, TpchTableFunction] | None = None,
        writer_factory: Callable[[str], ParquetTableWriter] = ParquetTableWriter,
    ) -> None:
        self.catalog = catalog
        self.functions = dict(functions if functions is not None else TABLE_FUNCTIONS)
        self.writer_factory = writer_factory

    def __repr__(self) -> str:
        return f"TpchTables(catalog={self.catalog!r}, tables={list(self.functions)})"

    def __call__(self, *args: Any) -> MemTableProvider:
        return self.invoke(args)

    def invoke(self, args: Sequence[Any]) -> MemTableProvider:
        """
        Generate all tables.

        All tables of one call are read from shared dbgen databases, so each
        distinct generation runs once per call. The databases are released when
        the call returns.

        Args:
            args: Positional literal arguments (scale_factor [, write_to_disk, path])

        Returns:
            MemTableProvider: The meta-table of registered names, or the nation
            table when writing to disk
        """
        config = parse_tables_args(args)
        with DbgenScratch() as scratch:
            if config.writes_to_disk:
                return self._write_to_disk(config, scratch)

            registered = []
            for name, function in self.functions.items():
                provider = self._generate(name, function, config.scale_factor, scratch)
                try:
                    self.catalog.register(name, provider)
                except TpchUdtfError as e:
                    logger.error(f"Registering {name} failed, {len(registered)} tables stay registered: {e}")
                    raise
                logger.info(f"Registered {name} ({provider.num_rows} rows)")
                registered.append(name)

        return MemTableProvider.from_pydict({"table_name": registered}, META_TABLE_SCHEMA)

    def _generate(
        self, name: str, function: TpchTableFunction, scale_factor: float, scratch: DbgenScratch
    ) -> MemTableProvider:
        try:
            return function.invoke([scale_factor], scratch)
        except TpchUdtfError as e:
            logger.error(f"Generating {name} failed: {e}")
            raise with_context(e, name) from e

    def _write_to_disk(self, config: TablesConfig, scratch: DbgenScratch) -> MemTableProvider:
        writer = self.writer_factory(config.path)
        written: list[Path] = []
        first_provider = None
        for name, function in self.functions.items():
            provider = self._generate(name, function, config.scale_factor, scratch)
            written.append(writer.write(name, provider))
            if first_provider is None:
                first_provider = provider

        if first_provider is None:
            raise ValueError("No table functions configured")
        logger.info(f"Wrote {len(written)} tables to {config.path}")
        return first_provider


def register_tpch_udtf(session: "TpchSession", name: str = "tpch") -> TpchTables:
    """Register the multi-table function in the session, backed by the session's catalog."""
    tables = TpchTables(session.catalog)
    session.register_udtf(name, tables)
    return tables
