"""
Single-table functions: one table function per TPC-H relation.

All eight functions share the same argument contract and control flow:

    tpch_<relation>(scale_factor [, part, num_parts])

validate the arguments, build the relation's generator, wrap it in a batch
adapter, materialize every batch and return the result as a MemTableProvider.
They differ only in the (name, generator, adapter) triple listed in
TABLE_FUNCTION_DEFINITIONS.
"""

import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from tpchudtf.arguments import parse_invocation_args
from tpchudtf.batches import ArrowBatchAdapter, materialize
from tpchudtf.generator import (
    AbstractTableGenerator,
    CustomerGenerator,
    LineItemGenerator,
    NationGenerator,
    OrderGenerator,
    PartGenerator,
    PartSuppGenerator,
    RegionGenerator,
    SupplierGenerator,
)
from tpchudtf.logging_utils import get_thread_aware_logger
from tpchudtf.provider import MemTableProvider

if TYPE_CHECKING:
    from tpchudtf.session import TpchSession

logger = get_thread_aware_logger()


class TpchTableFunction:
    """
    Table function generating one TPC-H relation.

    The first argument is a float literal with the scale factor. The second and
    third arguments are the part to generate and the number of parts; both are
    optional and default to 1, which generates the whole table.
    """

    def __init__(
        self,
        name: str,
        generator_class: type[AbstractTableGenerator],
        adapter_class: type[ArrowBatchAdapter] = ArrowBatchAdapter,
    ) -> None:
        self.name = name
        self.generator_class = generator_class
        self.adapter_class = adapter_class

    def __repr__(self) -> str:
        return f"TpchTableFunction(name='{self.name}', generator={self.generator_class.__name__})"

    def __call__(self, *args: Any) -> MemTableProvider:
        return self.invoke(args)

    def invoke(self, args: Sequence[Any], scratch: Any = None) -> MemTableProvider:
        """
        Generate and materialize the relation.

        Args:
            args: Positional literal arguments (scale_factor [, part, num_parts])
            scratch: Scratch state shared with the other generators of the calling
                invocation, passed through to the generator (default: none)

        Returns:
            MemTableProvider: The fully materialized table

        Raises:
            InvalidArgument: If the arguments do not validate
            CollaboratorFailure: If the generator fails
            InternalError: If the generated batches do not match their schema
        """
        config = parse_invocation_args(args)

        start = time.perf_counter()
        generator = self.generator_class(config.scale_factor, config.part, config.num_parts, scratch)
        try:
            table = materialize(self.adapter_class(generator))
        finally:
            generator.close()

        logger.debug(
            f"{self.name}(sf={config.scale_factor}, part={config.part}, num_parts={config.num_parts}) "
            f"materialized {table.num_rows} rows in {time.perf_counter() - start:.3f}s"
        )
        return MemTableProvider(table)


# Registration order of the relations, also used by the multi-table function
TABLE_FUNCTION_DEFINITIONS: tuple[tuple[str, type[AbstractTableGenerator], type[ArrowBatchAdapter]], ...] = (
    ("tpch_nation", NationGenerator, ArrowBatchAdapter),
    ("tpch_customer", CustomerGenerator, ArrowBatchAdapter),
    ("tpch_orders", OrderGenerator, ArrowBatchAdapter),
    ("tpch_lineitem", LineItemGenerator, ArrowBatchAdapter),
    ("tpch_part", PartGenerator, ArrowBatchAdapter),
    ("tpch_partsupp", PartSuppGenerator, ArrowBatchAdapter),
    ("tpch_supplier", SupplierGenerator, ArrowBatchAdapter),
    ("tpch_region", RegionGenerator, ArrowBatchAdapter),
)

TABLE_FUNCTIONS: dict[str, TpchTableFunction] = {
    name: TpchTableFunction(name, generator_class, adapter_class)
    for name, generator_class, adapter_class in TABLE_FUNCTION_DEFINITIONS
}


def get_table_function(name: str) -> TpchTableFunction:
    """Return the single-table function registered under name (e.g. 'tpch_nation')."""
    function = TABLE_FUNCTIONS.get(name.lower())
    if function is None:
        raise ValueError(f"Unknown TPC-H table function: {name}. Options: {', '.join(TABLE_FUNCTIONS)}")
    return function


def register_tpch_udtfs(session: "TpchSession") -> None:
    """Register all eight single-table functions in the given session."""
    for name, function in TABLE_FUNCTIONS.items():
        session.register_udtf(name, function)
