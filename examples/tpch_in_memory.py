#!/usr/bin/env python3
"""
Load all TPC-H tables into a session and inspect them.

Runs ``tpch(<scale factor>)`` once, which registers tpch_nation ... tpch_region
in the session catalog, then prints the row count and schema of every table
and a small TPC-H style query over the registered tables.

Usage:
    python tpch_in_memory.py --scale-factor 0.1
"""

import argparse

from tpchudtf import create_session
from tpchudtf.logging_utils import configure_enhanced_logging

PRICING_SUMMARY = """
    SELECT l_returnflag, l_linestatus, sum(l_quantity) AS sum_qty, count(*) AS count_order
    FROM tpch_lineitem
    WHERE l_shipdate <= DATE '1998-09-02'
    GROUP BY l_returnflag, l_linestatus
    ORDER BY l_returnflag, l_linestatus
"""


def main():
    parser = argparse.ArgumentParser(description="Generate all TPC-H tables in memory")
    parser.add_argument("--scale-factor", type=float, default=1.0, help="TPC-H scale factor (default: 1.0)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug output")
    args = parser.parse_args()

    configure_enhanced_logging(verbose=args.verbose)

    with create_session() as session:
        names = session.query(f"SELECT * FROM tpch({args.scale_factor!r})").column("table_name").to_pylist()

        for name in names:
            provider = session.catalog.lookup(name)
            print(f"  {name + ':':16s} {provider.num_rows:>10,} rows, {provider.num_columns} columns")
            print(f"    {', '.join(provider.schema.names)}")

        print("\nPricing summary:")
        for row in session.execute(PRICING_SUMMARY):
            print(f"  {row}")

        # Single-table functions can be mixed with the registered tables
        nations = session.execute(
            "SELECT r.r_name, count(*) FROM tpch_nation(1.0) AS n JOIN tpch_region r ON n.n_regionkey = r.r_regionkey GROUP BY r.r_name ORDER BY 1"
        )
        print("\nNations per region:")
        for region, count in nations:
            print(f"  {region}: {count}")


if __name__ == "__main__":
    main()
