# ========================
# src/etl/transformation.py
# ========================

"""
Aggregation Module

Groups joined rows by order and sums line-item prices and taxes per order.
"""

import logging
from collections import defaultdict
from typing import Iterable, List, Sequence, Set

from .models import AggregatedOrder, JoinedRow

logger = logging.getLogger(__name__)


def unique_order_ids(rows: Iterable[JoinedRow]) -> Set[int]:
    """Distinct order ids present in rows."""
    return {row.order.id for row in rows}


def aggregate(rows: Sequence[JoinedRow], order_ids: Iterable[int]) -> List[AggregatedOrder]:
    """
    Sum unit_price and tax per order id.

    order_ids must be derived from the same rows (see aggregate_rows);
    an id without rows would come out with zero totals. No rounding is
    applied here.

    Args:
        rows: Joined rows, already filtered
        order_ids: Ids to produce a record for

    Returns:
        list[AggregatedOrder]: One record per id, in unspecified order
    """
    totals = defaultdict(lambda: {'amount': 0.0, 'taxes': 0.0})
    for row in rows:
        bucket = totals[row.order.id]
        bucket['amount'] += row.line_item.unit_price
        bucket['taxes'] += row.line_item.tax

    results = []
    for order_id in order_ids:
        bucket = totals.get(order_id)
        if bucket is None:
            logger.warning(f"Order {order_id} has no rows to aggregate")
            bucket = {'amount': 0.0, 'taxes': 0.0}
        results.append(AggregatedOrder(
            order_id=order_id,
            total_amount=bucket['amount'],
            total_taxes=bucket['taxes'],
        ))

    logger.info(f"Aggregated {len(rows)} rows into {len(results)} orders")
    return results


def aggregate_rows(rows: Sequence[JoinedRow]) -> List[AggregatedOrder]:
    """Aggregate rows over the order ids they contain."""
    return aggregate(rows, unique_order_ids(rows))
