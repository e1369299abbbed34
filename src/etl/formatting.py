# ========================
# src/etl/formatting.py
# ========================

"""
Output Formatting Module

Renders aggregated orders for the CSV and SQLite sinks. Amounts are always
written with exactly two decimals.
"""

from typing import Iterable, List, Tuple

from .models import AggregatedOrder

OUTPUT_HEADER = "order_id,total_amount,total_taxes\n"


def format_row(record: AggregatedOrder) -> str:
    return f"{record.order_id},{record.total_amount:.2f},{record.total_taxes:.2f}\n"


def format_csv_lines(records: Iterable[AggregatedOrder]) -> List[str]:
    """Header line followed by one formatted line per record."""
    return [OUTPUT_HEADER] + [format_row(record) for record in records]


def format_value_rows(records: Iterable[AggregatedOrder]) -> List[Tuple[str, str, str]]:
    """
    Split each formatted line into (order_id, total_amount, total_taxes).

    The trailing newline is stripped from the last value.
    """
    rows = []
    for record in records:
        order_id, amount, taxes = format_row(record).split(',')
        rows.append((order_id, amount, taxes.rstrip('\n')))
    return rows
