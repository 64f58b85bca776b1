"""
Argument validation for the TPC-H table functions.

Table functions receive a positional list of literal values, as written in SQL
(``tpch_lineitem(1.0, 2, 10)``). Values arrive as plain Python objects; anything
that was not a literal in the query arrives as a NonLiteral marker so it fails
the type checks below like any other mistyped argument.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from tpchudtf.errors import InvalidArgument


@dataclass(frozen=True)
class NonLiteral:
    """Placeholder for an argument that was not a literal (column, sub-query, ...)."""

    sql: str

    def __str__(self) -> str:
        return self.sql


@dataclass(frozen=True)
class InvocationConfig:
    """Validated arguments of a single-table function."""

    scale_factor: float
    part: int = 1
    num_parts: int = 1


@dataclass(frozen=True)
class TablesConfig:
    """Validated arguments of the multi-table ``tpch`` function."""

    scale_factor: float
    write_to_disk: bool = False
    path: str = ""

    @property
    def writes_to_disk(self) -> bool:
        return self.write_to_disk and self.path != ""


def _is_float(value: Any) -> bool:
    return isinstance(value, float)


def _is_int(value: Any) -> bool:
    # bool is a subclass of int but TRUE is not a partition number
    return isinstance(value, int) and not isinstance(value, bool)


def _scale_factor(args: Sequence[Any]) -> float:
    if len(args) == 0 or not _is_float(args[0]):
        raise InvalidArgument("First argument must be a float literal.")
    return args[0]


def parse_invocation_args(args: Sequence[Any]) -> InvocationConfig:
    """
    Validate the arguments of a single-table function.

    Args:
        args: Positional literal values: scale factor, and optionally part and num_parts

    Returns:
        InvocationConfig: The validated configuration. part and num_parts default to 1,
        which tells the generator to produce the whole table.

    Raises:
        InvalidArgument: On wrong arity, wrong literal types, a part without num_parts,
        or negative part/num_parts.
    """
    scale_factor = _scale_factor(args)

    if len(args) > 3:
        raise InvalidArgument(f"Expected at most 3 arguments (scale_factor, part, num_parts), got {len(args)}.")

    if len(args) == 1:
        return InvocationConfig(scale_factor=scale_factor)

    part = args[1]
    if not _is_int(part):
        raise InvalidArgument("Second argument must be an i64 literal.")
    if len(args) < 3 or not _is_int(args[2]):
        raise InvalidArgument("Third argument must be an i64 literal.")
    num_parts = args[2]

    if part < 0 or num_parts < 0:
        raise InvalidArgument(f"Second and third arguments must not be negative, got part={part}, num_parts={num_parts}.")

    return InvocationConfig(scale_factor=scale_factor, part=part, num_parts=num_parts)


def parse_tables_args(args: Sequence[Any]) -> TablesConfig:
    """
    Validate the arguments of the multi-table ``tpch`` function.

    Args:
        args: Positional literal values: scale factor, optional write-to-disk flag
            and optional destination path

    Typing is strict: a flag that is not a boolean literal or a path that is not
    a string literal is rejected, not read as false or as an empty path.

    Raises:
        InvalidArgument: On wrong arity or wrong literal types.
    """
    scale_factor = _scale_factor(args)

    if len(args) > 3:
        raise InvalidArgument(f"Expected at most 3 arguments (scale_factor, write_to_disk, path), got {len(args)}.")

    write_to_disk = False
    if len(args) > 1:
        if not isinstance(args[1], bool):
            raise InvalidArgument("Second argument must be a boolean literal.")
        write_to_disk = args[1]

    path = ""
    if len(args) > 2:
        if not isinstance(args[2], str):
            raise InvalidArgument("Third argument must be a string literal.")
        path = args[2]

    return TablesConfig(scale_factor=scale_factor, write_to_disk=write_to_disk, path=path)
