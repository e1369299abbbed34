# ========================
# src/etl/__init__.py
# ========================

"""
Order ETL Package

Core components of the order ETL pipeline:
- decoding: Raw rows to typed orders and line items
- loading: Header/trailer handling and table decoding
- join: Orders to line items inner join
- filtering: Status/origin filters and filter mode derivation
- transformation: Per-order aggregation
- formatting: Output rows for the sinks
- ingestion: Raw row reading from files and URLs
- storage: CSV and SQLite sinks
- orchestrator: Pipeline coordination
"""

from .decoding import decode_order, decode_line_item
from .errors import ETLError, DecodeError, InvalidModeError, UsageError
from .filtering import FilterMode, apply_filters, parse_filter_args
from .formatting import format_row, format_csv_lines, format_value_rows
from .join import inner_join
from .loading import load_table
from .models import AggregatedOrder, JoinedRow, LineItem, Order, Origin, Status
from .orchestrator import ETLPipeline
from .transformation import aggregate, aggregate_rows, unique_order_ids

__all__ = [
    'AggregatedOrder',
    'DecodeError',
    'ETLError',
    'ETLPipeline',
    'FilterMode',
    'InvalidModeError',
    'JoinedRow',
    'LineItem',
    'Order',
    'Origin',
    'Status',
    'UsageError',
    'aggregate',
    'aggregate_rows',
    'apply_filters',
    'decode_line_item',
    'decode_order',
    'format_csv_lines',
    'format_row',
    'format_value_rows',
    'inner_join',
    'load_table',
    'parse_filter_args',
    'unique_order_ids'
]

__version__ = "1.0.0"
