#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Order ETL Pipeline

Usage:
    python main.py                  # no filters
    python main.py STATUS           # Pending | Complete | Cancelled
    python main.py ORIGIN           # O | P
    python main.py STATUS ORIGIN

Sources and output locations come from the environment, see
src/utils/config.py.
"""

import logging
import sys
from typing import List, Optional

from src.etl import ETLError, ETLPipeline, UsageError, parse_filter_args
from src.utils import Config, setup_logging

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = sys.argv[1:] if argv is None else argv

    try:
        status, origin, mode = parse_filter_args(args)
    except UsageError as e:
        print(f"Usage: python main.py [STATUS] [ORIGIN]\n{e}", file=sys.stderr)
        return EXIT_USAGE

    config = Config()
    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file=config.LOG_FILE,
        log_dir=config.LOG_DIR
    )

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("ORDER ETL PIPELINE - MAIN EXECUTION")
    logger.info("=" * 60)

    try:
        config.ensure_directories()

        pipeline = ETLPipeline.from_config(config, status=status, origin=origin, mode=mode)
        results = pipeline.run()

        _print_execution_summary(results)
        return EXIT_OK

    except ETLError as e:
        logger.error(f"Pipeline aborted: {e}")
        return EXIT_FAILURE
    except Exception as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return EXIT_FAILURE


def _print_execution_summary(results: dict) -> None:
    """Print final execution summary."""
    counts = results['counts']
    active_filter = results['filter']

    print("\n" + "=" * 70)
    print("ETL EXECUTION SUMMARY")
    print("=" * 70)

    print("Filter:")
    print(f"   • Mode: {active_filter['mode']}")
    print(f"   • Status: {active_filter['status'] or 'any'}")
    print(f"   • Origin: {active_filter['origin'] or 'any'}")

    print("\nProcessing:")
    print(f"   • Orders loaded: {counts['orders_loaded']:,}")
    print(f"   • Line items loaded: {counts['line_items_loaded']:,}")
    print(f"   • Joined rows: {counts['joined_rows']:,}")
    print(f"   • Rows after filtering: {counts['filtered_rows']:,}")
    print(f"   • Aggregated orders: {counts['aggregated_orders']:,}")

    print("\nOutputs:")
    for output_type, file_path in results['saved_files'].items():
        print(f"   • {output_type}: {file_path}")

    print("=" * 70)


if __name__ == '__main__':
    sys.exit(main())
