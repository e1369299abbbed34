# ========================
# src/etl/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Composes the ETL stages explicitly: extract raw rows, decode, join, filter,
aggregate, format and save. Nothing is written until the transform has
succeeded as a whole.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .decoding import decode_line_item, decode_order
from .errors import InvalidModeError
from .filtering import DEFAULT_ORIGIN, DEFAULT_STATUS, FilterMode, apply_filters
from .formatting import format_csv_lines, format_value_rows
from .ingestion import RawRowReader, RawRows
from .join import inner_join
from .loading import load_table
from .models import AggregatedOrder, Origin, Status
from .storage import DataSaver
from .transformation import aggregate, unique_order_ids
from ..utils.config import Config
from ..utils.performance_monitor import PerformanceMonitor, monitor_performance

logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """Counts and aggregated orders produced by one transform pass."""
    orders_loaded: int = 0
    line_items_loaded: int = 0
    joined_rows: int = 0
    filtered_rows: int = 0
    aggregated_orders: List[AggregatedOrder] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            'orders_loaded': self.orders_loaded,
            'line_items_loaded': self.line_items_loaded,
            'joined_rows': self.joined_rows,
            'filtered_rows': self.filtered_rows,
            'aggregated_orders': len(self.aggregated_orders),
        }


class ETLPipeline:
    """
    Orchestrates one run of the order ETL pipeline.
    """

    def __init__(self,
                 orders_source: str,
                 order_items_source: str,
                 output_dir: str,
                 status: Optional[Status] = None,
                 origin: Optional[Origin] = None,
                 mode: int = FilterMode.NONE,
                 config: Optional[Config] = None):
        """
        Initialize the pipeline.

        Args:
            orders_source (str): Path or URL of the orders CSV
            order_items_source (str): Path or URL of the line items CSV
            output_dir (str): Directory for output files
            status (Status): Status filter, used by modes 1 and 2
            origin (Origin): Origin filter, used by modes 1 and 3
            mode (int): Filter mode, see FilterMode
            config (Config): Configuration object
        """
        self.orders_source = orders_source
        self.order_items_source = order_items_source
        self.output_dir = output_dir
        self.status = status or DEFAULT_STATUS
        self.origin = origin or DEFAULT_ORIGIN
        try:
            self.mode = FilterMode(mode)
        except ValueError:
            raise InvalidModeError(mode) from None
        self.config = config or Config()

        logger.info("ETLPipeline initialized:")
        logger.info(f"  Orders: {self.orders_source}")
        logger.info(f"  Line items: {self.order_items_source}")
        logger.info(f"  Output: {self.output_dir}")
        logger.info(f"  Filter: {self.describe_filter()}")

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> 'ETLPipeline':
        return cls(
            orders_source=config.ORDERS_SOURCE,
            order_items_source=config.ORDER_ITEMS_SOURCE,
            output_dir=config.DEFAULT_OUTPUT_DIR,
            config=config,
            **kwargs
        )

    def describe_filter(self) -> Dict[str, Any]:
        return {
            'mode': int(self.mode),
            'status': self.status.value if self.mode in (FilterMode.STATUS_AND_ORIGIN, FilterMode.STATUS_ONLY) else None,
            'origin': self.origin.value if self.mode in (FilterMode.STATUS_AND_ORIGIN, FilterMode.ORIGIN_ONLY) else None,
        }

    def extract(self) -> Dict[str, RawRows]:
        """Read both raw row-sets."""
        timeout = self.config.HTTP_TIMEOUT_SECONDS
        return {
            'orders': RawRowReader(self.orders_source, timeout=timeout).read(),
            'order_items': RawRowReader(self.order_items_source, timeout=timeout).read(),
        }

    def transform(self,
                  order_rows: RawRows,
                  item_rows: RawRows,
                  monitor: Optional[PerformanceMonitor] = None) -> TransformResult:
        """
        Run the in-memory stages over raw row-sets. Performs no I/O.

        Returns:
            TransformResult: Stage counts and orders sorted by order_id
        """
        orders = load_table(order_rows, decode_order)
        line_items = load_table(item_rows, decode_line_item)
        self._checkpoint(monitor, 'decode', orders=len(orders), line_items=len(line_items))

        joined = inner_join(orders, line_items)
        self._checkpoint(monitor, 'join', rows=len(joined))

        filtered = apply_filters(joined, self.status, self.origin, self.mode)
        self._checkpoint(monitor, 'filter', rows=len(filtered))

        aggregated = aggregate(filtered, unique_order_ids(filtered))
        aggregated.sort(key=lambda record: record.order_id)
        self._checkpoint(monitor, 'aggregate', orders=len(aggregated))

        return TransformResult(
            orders_loaded=len(orders),
            line_items_loaded=len(line_items),
            joined_rows=len(joined),
            filtered_rows=len(filtered),
            aggregated_orders=aggregated,
        )

    def load(self, records: List[AggregatedOrder]) -> Dict[str, str]:
        """Format records and hand them to the CSV and SQLite sinks."""
        saver = DataSaver(
            self.output_dir,
            csv_file=self.config.OUTPUT_CSV_FILE,
            db_file=self.config.OUTPUT_DB_FILE
        )
        return saver.save_all(format_csv_lines(records), format_value_rows(records))

    def run(self) -> Dict[str, Any]:
        """
        Execute the complete pipeline from start to finish.

        Returns:
            dict: Filter, stage counts, aggregated orders, saved files and
                  performance summary
        """
        logger.info("Starting ETL pipeline...")

        with monitor_performance("ETL") as monitor:
            raw = self.extract()
            monitor.update_progress(len(raw['orders']) + len(raw['order_items']))
            self._checkpoint(monitor, 'extract')

            result = self.transform(raw['orders'], raw['order_items'], monitor)

            logger.info("Saving results...")
            saved_files = self.load(result.aggregated_orders)
            self._checkpoint(monitor, 'load', files=len(saved_files))

        results = {
            'pipeline_status': 'completed',
            'sources': {
                'orders': self.orders_source,
                'order_items': self.order_items_source,
            },
            'output_directory': self.output_dir,
            'filter': self.describe_filter(),
            'counts': result.counts(),
            'aggregated_orders': [record.to_dict() for record in result.aggregated_orders],
            'saved_files': saved_files,
            'performance': monitor.summary,
        }
        saved_files['summary'] = DataSaver(self.output_dir).save_summary(results)

        logger.info("Pipeline finished successfully.")
        self._log_final_summary(results)
        return results

    @staticmethod
    def _checkpoint(monitor: Optional[PerformanceMonitor], name: str, **metadata) -> None:
        if monitor is not None:
            monitor.add_checkpoint(name, metadata)

    def _log_final_summary(self, results: Dict[str, Any]) -> None:
        counts = results['counts']
        logger.info("=" * 60)
        logger.info("ETL EXECUTION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Orders loaded: {counts['orders_loaded']:,}")
        logger.info(f"Line items loaded: {counts['line_items_loaded']:,}")
        logger.info(f"Joined rows: {counts['joined_rows']:,}")
        logger.info(f"Rows after filtering: {counts['filtered_rows']:,}")
        logger.info(f"Aggregated orders: {counts['aggregated_orders']:,}")
        for output_type, file_path in results['saved_files'].items():
            logger.info(f"  - {output_type}: {file_path}")
        logger.info("=" * 60)
