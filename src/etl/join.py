# ========================
# src/etl/join.py
# ========================

"""
Join Module

One-to-many inner join of orders and line items on the order identifier.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from .models import JoinedRow, LineItem, Order

logger = logging.getLogger(__name__)


def index_line_items(line_items: Iterable[LineItem]) -> Dict[int, List[LineItem]]:
    """Group line items by order_id, keeping their input order per group."""
    index = defaultdict(list)
    for item in line_items:
        index[item.order_id].append(item)
    return index


def inner_join(orders: Iterable[Order], line_items: Iterable[LineItem]) -> List[JoinedRow]:
    """
    Pair every order with each of its line items.

    Output is grouped by order (in order input order), then by line item
    input order within the group. Orders without items contribute no rows;
    items without an order are dropped.

    Args:
        orders: Decoded orders
        line_items: Decoded line items

    Returns:
        list[JoinedRow]: One row per (order, matching item) combination
    """
    index = index_line_items(line_items)
    joined = [
        JoinedRow(order, item)
        for order in orders
        for item in index.get(order.id, ())
    ]
    logger.info(f"Inner join produced {len(joined)} rows")
    return joined
