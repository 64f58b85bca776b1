#!/usr/bin/env python3
"""
Write generated TPC-H tables as parquet files.

Two ways are shown:
    - ``tpch(sf, true, '<dir>')`` writes all eight tables through the built-in
      parquet writer
    - ``COPY (SELECT * FROM tpch_<table>(sf, part, num_parts)) TO ...`` writes
      one partition of a single table with DuckDB's own writer

Usage:
    python tpch_parquet.py --scale-factor 1.0 --output-dir ./tpch_sf1
    python tpch_parquet.py --scale-factor 10 --output-dir ./tpch_sf10 --table lineitem --num-parts 10
"""

import argparse
from pathlib import Path

from tpchudtf import create_session
from tpchudtf.logging_utils import configure_enhanced_logging


def write_all_tables(session, scale_factor, output_dir):
    path = str(output_dir).replace("'", "''")
    session.execute(f"SELECT * FROM tpch({scale_factor!r}, true, '{path}')")


def write_partitions(session, table, scale_factor, num_parts, output_dir):
    output_dir.mkdir(parents=True, exist_ok=True)
    for part in range(1, num_parts + 1):
        target = str(output_dir / f"tpch_{table}_{part}.parquet").replace("'", "''")
        session.execute(
            f"COPY (SELECT * FROM tpch_{table}({scale_factor!r}, {part}, {num_parts})) TO '{target}' (FORMAT parquet)"
        )
        print(f"  wrote part {part}/{num_parts} to {target}")


def main():
    parser = argparse.ArgumentParser(description="Write TPC-H tables as parquet files")
    parser.add_argument("--scale-factor", type=float, default=1.0, help="TPC-H scale factor (default: 1.0)")
    parser.add_argument("--output-dir", type=Path, required=True, help="Directory to write parquet files to")
    parser.add_argument("--table", help="Write only this table, partitioned (e.g. lineitem)")
    parser.add_argument("--num-parts", type=int, default=1, help="Number of partitions for --table (default: 1)")
    args = parser.parse_args()

    configure_enhanced_logging()

    with create_session() as session:
        if args.table:
            write_partitions(session, args.table, args.scale_factor, args.num_parts, args.output_dir)
        else:
            write_all_tables(session, args.scale_factor, args.output_dir)

    for file in sorted(args.output_dir.glob("*.parquet")):
        print(f"  {file.name:28s} {file.stat().st_size:>14,} bytes")


if __name__ == "__main__":
    main()
