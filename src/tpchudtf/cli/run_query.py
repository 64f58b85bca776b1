"""
CLI tool to run SQL against a session with the TPC-H table functions registered.

Examples:
    tpch-udtf-query --query "SELECT * FROM tpch_nation(1.0) LIMIT 5"
    tpch-udtf-query --scale-factor 0.1 --query "SELECT count(*) FROM tpch_lineitem"
    tpch-udtf-query --scale-factor 1.0 --write-dir ./tpch_sf1
"""

import argparse
import csv
import json
import sys
from logging import getLogger

import pyarrow as pa

from tpchudtf import create_session
from tpchudtf.cli.common_args import (
    add_database_args,
    add_environment_args,
    add_output_args,
    add_verbosity_args,
    configure_logging,
    load_environment_with_validation,
)
from tpchudtf.logging_utils import LOGGER_NAME

logger = getLogger(LOGGER_NAME)


def format_result(result: pa.Table, output_format: str, file) -> None:
    """Print an Arrow result in the requested format."""
    rows = result.to_pylist()
    columns = result.column_names

    if output_format == "json":
        for row in rows:
            print(json.dumps(row, default=str), file=file)
    elif output_format == "csv":
        writer = csv.writer(file)
        writer.writerow(columns)
        for row in rows:
            writer.writerow([row[column] for column in columns])
    else:  # table format
        cells = [[str(row[column]) for column in columns] for row in rows]
        widths = [max([len(column)] + [len(line[i]) for line in cells]) for i, column in enumerate(columns)]
        print(" | ".join(column.ljust(widths[i]) for i, column in enumerate(columns)), file=file)
        print("-+-".join("-" * width for width in widths), file=file)
        for line in cells:
            print(" | ".join(value.ljust(widths[i]) for i, value in enumerate(line)), file=file)


def main(file=sys.stdout):
    parser = argparse.ArgumentParser(description="Run SQL queries using the TPC-H table functions")

    parser.add_argument("--query", type=str, action="append", default=[], help="SQL query to run (may be repeated)")
    parser.add_argument("--scale-factor", type=float, help="Generate all TPC-H tables at this scale factor before running queries")
    parser.add_argument("--write-dir", type=str, help="With --scale-factor: write all tables as parquet files to this directory")

    add_database_args(parser)
    add_environment_args(parser)
    add_output_args(parser)
    add_verbosity_args(parser)

    args = parser.parse_args()

    configure_logging(args)

    if not args.query and args.scale_factor is None:
        logger.error("Nothing to do: pass --query and/or --scale-factor")
        sys.exit(1)
    if args.write_dir and args.scale_factor is None:
        logger.error("--write-dir requires --scale-factor")
        sys.exit(1)

    output_file = open(args.output_file, "w") if args.output_file else file

    session = None
    try:
        load_environment_with_validation(args.env_file)
        session = create_session(args.database)

        if args.scale_factor is not None:
            if args.write_dir:
                path = args.write_dir.replace("'", "''")
                session.execute(f"SELECT * FROM tpch({args.scale_factor!r}, true, '{path}')")
                logger.info(f"Wrote TPC-H tables at scale factor {args.scale_factor} to {args.write_dir}")
            else:
                names = session.query(f"SELECT * FROM tpch({args.scale_factor!r})").column("table_name").to_pylist()
                logger.info(f"Generated {len(names)} tables at scale factor {args.scale_factor}: {', '.join(names)}")

        for query in args.query:
            logger.debug(f"Running query: {query}")
            format_result(session.query(query), args.output_format, output_file)

        sys.exit(0)

    except Exception as e:
        logger.error(f"Error running query: {str(e)}")
        sys.exit(1)
    finally:
        if session is not None:
            session.close()
        if args.output_file and output_file is not file:
            output_file.close()


if __name__ == "__main__":
    main()
