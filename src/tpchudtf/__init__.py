"""
tpchudtf - TPC-H tables generated on demand as SQL table functions.

This module provides the table functions (one per TPC-H relation, plus the
multi-table ``tpch`` function), the host session that makes them callable from
DuckDB SQL, and the building blocks they are made of.
"""

from tpchudtf.arguments import InvocationConfig, TablesConfig, parse_invocation_args, parse_tables_args
from tpchudtf.batches import DEFAULT_BATCH_SIZE, ArrowBatchAdapter, MaterializedTable, materialize
from tpchudtf.catalog import AbstractCatalog, get_catalog
from tpchudtf.errors import (
    CatalogError,
    CollaboratorFailure,
    GeneratorError,
    InternalError,
    InvalidArgument,
    TpchUdtfError,
    WriterError,
)
from tpchudtf.functions import TABLE_FUNCTIONS, TpchTableFunction, get_table_function, register_tpch_udtfs
from tpchudtf.provider import MemTableProvider
from tpchudtf.session import TpchSession
from tpchudtf.tables import TpchTables, register_tpch_udtf
from tpchudtf.writer import ParquetTableWriter


def create_session(database: str | None = None, register_functions: bool = True) -> TpchSession:
    """
    Create a session with all TPC-H table functions registered.

    Args:
        database: DuckDB database path (default: TPCH_UDTF_DATABASE or ":memory:")
        register_functions: Register the eight tpch_<table> functions and ``tpch``
    """
    session = TpchSession(database)
    if register_functions:
        register_tpch_udtfs(session)
        register_tpch_udtf(session)
    return session


__all__ = [
    "create_session",
    "TpchSession",
    "TpchTableFunction",
    "TpchTables",
    "TABLE_FUNCTIONS",
    "get_table_function",
    "register_tpch_udtfs",
    "register_tpch_udtf",
    "InvocationConfig",
    "TablesConfig",
    "parse_invocation_args",
    "parse_tables_args",
    "ArrowBatchAdapter",
    "MaterializedTable",
    "materialize",
    "DEFAULT_BATCH_SIZE",
    "MemTableProvider",
    "AbstractCatalog",
    "get_catalog",
    "ParquetTableWriter",
    "TpchUdtfError",
    "InvalidArgument",
    "InternalError",
    "CollaboratorFailure",
    "GeneratorError",
    "CatalogError",
    "WriterError",
]
