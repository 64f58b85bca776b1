"""
Host session: a DuckDB connection that understands the TPC-H table functions.

DuckDB cannot call Python table functions from SQL, so the session plans each
statement itself. Statements are parsed with sqlglot; every table reference of
the form ``name(<literals>)`` whose name is a registered table function is
invoked with the literal values, its provider is registered as a temporary view
and the call site is rewritten to that view. Temporary views are dropped once
the statement has run. Tables registered in the session catalog (for example by
``tpch(1.0)``) stay available to later statements.

Usage:
    with TpchSession() as session:
        register_tpch_udtfs(session)
        register_tpch_udtf(session)
        session.query("SELECT * FROM tpch(1.0)")
        session.execute("SELECT count(*) FROM tpch_lineitem")
"""

import threading
import uuid
from collections.abc import Sequence
from typing import Any, Protocol

import duckdb
import pyarrow as pa
import sqlglot
import sqlglot.errors
from sqlglot import exp

from tpchudtf.arguments import NonLiteral
from tpchudtf.catalog.duckdb import DuckDBCatalog
from tpchudtf.environment_config import EnvironmentConfigManager
from tpchudtf.errors import TpchUdtfError, with_context
from tpchudtf.logging_utils import get_thread_aware_logger
from tpchudtf.provider import MemTableProvider

logger = get_thread_aware_logger()


class TableFunction(Protocol):
    def invoke(self, args: Sequence[Any]) -> MemTableProvider: ...


def literal_value(expression: exp.Expression) -> Any:
    """
    Convert a sqlglot argument expression into a Python literal.

    Numbers become int or float depending on how they are written (``1`` vs
    ``1.0``), strings become str, TRUE/FALSE become bool and NULL becomes None.
    Anything else is returned as a NonLiteral.
    """
    if isinstance(expression, exp.Neg) and isinstance(expression.this, exp.Literal) and not expression.this.is_string:
        return -literal_value(expression.this)
    if isinstance(expression, exp.Literal):
        if expression.is_string:
            return expression.this
        try:
            return int(expression.this)
        except ValueError:
            return float(expression.this)
    if isinstance(expression, exp.Boolean):
        return expression.this
    if isinstance(expression, exp.Null):
        return None
    return NonLiteral(expression.sql(dialect="duckdb"))


class TpchSession:
    def __init__(self, database: str | None = None, conn: duckdb.DuckDBPyConnection | None = None) -> None:
        """
        Initialize the session.

        Args:
            database: Path to the DuckDB database, ":memory:" for in-memory
                (default: TPCH_UDTF_DATABASE or ":memory:")
            conn: Existing connection to use instead of opening one
        """
        if conn is None:
            database = database or EnvironmentConfigManager.get_session_config()["database"]
            conn = duckdb.connect(database)
        self.conn = conn
        # Guards every use of conn, shared with the catalog
        self.lock = threading.RLock()
        self.catalog = DuckDBCatalog(conn, self.lock)
        self._functions: dict[str, TableFunction] = {}

    def __repr__(self) -> str:
        return f"TpchSession(functions={self.udtf_names()}, tables={self.catalog.table_names()})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def register_udtf(self, name: str, function: TableFunction) -> None:
        """Make a table function callable from SQL under name (case-insensitive)."""
        with self.lock:
            self._functions[name.lower()] = function

    def udtf_names(self) -> list[str]:
        with self.lock:
            return list(self._functions)

    def plan(self, query: str) -> tuple[str, list[str]]:
        """
        Invoke the table functions referenced by query and rewrite it.

        Returns:
            tuple: The SQL to run and the temporary views it reads from. The
            caller owns the views and must drop them with drop_views().
        """
        try:
            statements = sqlglot.parse(query, read="duckdb")
        except sqlglot.errors.ParseError as e:
            logger.debug(f"Query not parseable by sqlglot, running it unchanged: {e}")
            return query, []

        with self.lock:
            functions = dict(self._functions)

        views: list[str] = []
        rewritten = []
        try:
            for statement in statements:
                if statement is None:
                    continue
                for table in list(statement.find_all(exp.Table)):
                    call = table.this
                    if not isinstance(call, exp.Func):
                        continue
                    function = functions.get(call.name.lower())
                    if function is None:
                        continue

                    args = [literal_value(arg) for arg in call.expressions]
                    try:
                        provider = function.invoke(args)
                    except TpchUdtfError as e:
                        raise with_context(e, call.name) from e

                    view = f"__tpch_udtf_{uuid.uuid4().hex}"
                    with self.lock:
                        self.conn.register(view, provider.to_arrow())
                    views.append(view)
                    table.set("this", exp.to_identifier(view))
                rewritten.append(statement.sql(dialect="duckdb"))
        except Exception:
            self.drop_views(views)
            raise

        if not views:
            return query, []
        return ";\n".join(rewritten), views

    def drop_views(self, views: list[str]) -> None:
        with self.lock:
            for view in views:
                self.conn.unregister(view)

    def execute(self, query: str) -> list[tuple]:
        """Run query and return all rows of its (last) result."""
        sql, views = self.plan(query)
        with self.lock:
            try:
                return self.conn.execute(sql).fetchall()
            finally:
                self.drop_views(views)

    def query(self, query: str) -> pa.Table:
        """Run query and return its result as an Arrow table."""
        sql, views = self.plan(query)
        with self.lock:
            try:
                return self.conn.execute(sql).to_arrow_table()
            finally:
                self.drop_views(views)

    def close(self) -> None:
        """Close the database connection."""
        if self.conn:
            self.conn.close()
