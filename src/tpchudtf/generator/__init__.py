from tpchudtf.generator.abstract import AbstractTableGenerator
from tpchudtf.generator.dbgen import (
    CustomerGenerator,
    DbgenScratch,
    DbgenTableGenerator,
    LineItemGenerator,
    NationGenerator,
    OrderGenerator,
    PartGenerator,
    PartSuppGenerator,
    RegionGenerator,
    SupplierGenerator,
)

GENERATORS: dict[str, type[DbgenTableGenerator]] = {
    generator.table_name: generator
    for generator in (
        NationGenerator,
        RegionGenerator,
        PartGenerator,
        SupplierGenerator,
        PartSuppGenerator,
        CustomerGenerator,
        OrderGenerator,
        LineItemGenerator,
    )
}


def get_generator(
    table_name: str, scale_factor: float, part: int = 1, num_parts: int = 1, scratch: DbgenScratch | None = None
) -> AbstractTableGenerator:
    """
    Factory function to create a generator for one TPC-H relation.

    Args:
        table_name: Relation name ('nation', 'region', 'part', 'supplier', 'partsupp',
            'customer', 'orders', 'lineitem')
        scale_factor: TPC-H scale factor
        part: 1-based partition to generate
        num_parts: Total number of partitions
        scratch: Scratch databases shared with other generators of the same invocation

    Returns:
        A generator for the requested relation
    """
    generator = GENERATORS.get(table_name.lower())
    if generator is None:
        raise ValueError(f"Unsupported TPC-H table: {table_name}. Options: {', '.join(GENERATORS)}")
    return generator(scale_factor, part, num_parts, scratch)


__all__ = [
    "AbstractTableGenerator",
    "DbgenTableGenerator",
    "DbgenScratch",
    "CustomerGenerator",
    "LineItemGenerator",
    "NationGenerator",
    "OrderGenerator",
    "PartGenerator",
    "PartSuppGenerator",
    "RegionGenerator",
    "SupplierGenerator",
    "GENERATORS",
    "get_generator",
]
