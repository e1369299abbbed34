# ========================
# src/etl/models.py
# ========================

"""
Data Model

Typed entities flowing through the ETL stages: decoded orders and line
items, the joined pair, and the per-order aggregate.
"""

from dataclasses import dataclass
from enum import Enum


class Status(Enum):
    """Order status, valued by its wire token."""
    PENDING = "Pending"
    COMPLETE = "Complete"
    CANCELLED = "Cancelled"


class Origin(Enum):
    """Order origin channel, valued by its wire token."""
    ONLINE = "O"
    PHONE = "P"


@dataclass(frozen=True)
class Order:
    id: int
    client_id: int
    placed_at: str
    status: Status
    origin: Origin


@dataclass(frozen=True)
class LineItem:
    order_id: int
    product_id: int
    quantity: int
    unit_price: float
    tax: float


@dataclass(frozen=True)
class JoinedRow:
    """One (order, matching line item) combination produced by the join."""
    order: Order
    line_item: LineItem


@dataclass(frozen=True)
class AggregatedOrder:
    """Per-order totals, the final output unit of the pipeline."""
    order_id: int
    total_amount: float
    total_taxes: float

    def to_dict(self) -> dict:
        return {
            'order_id': self.order_id,
            'total_amount': self.total_amount,
            'total_taxes': self.total_taxes,
        }
