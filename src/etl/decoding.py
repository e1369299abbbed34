# ========================
# src/etl/decoding.py
# ========================

"""
Record Decoding Module

Converts raw rows of text fields into typed Order and LineItem entities.
Unlike a lenient cleaner, every malformed row is fatal: a bad row raises
DecodeError instead of being dropped.
"""

import logging
import re
from typing import Sequence

from .errors import DecodeError
from .models import LineItem, Order, Origin, Status

logger = logging.getLogger(__name__)

ORDER_FIELDS = ('id', 'client_id', 'placed_at', 'status', 'origin')
LINE_ITEM_FIELDS = ('order_id', 'product_id', 'quantity', 'unit_price', 'tax')

# ASCII only, no surrounding whitespace
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
DECIMAL_PATTERN = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_status(token: str) -> Status:
    """Look up a Status by its exact, case-sensitive token."""
    try:
        return Status(token)
    except ValueError:
        raise DecodeError(f"Unrecognized status: {token!r}", field='status') from None


def parse_origin(token: str) -> Origin:
    """Look up an Origin by its exact, case-sensitive token ("O" or "P")."""
    try:
        return Origin(token)
    except ValueError:
        raise DecodeError(f"Unrecognized origin: {token!r}", field='origin') from None


def _check_arity(fields: Sequence[str], names: Sequence[str], kind: str) -> None:
    if len(fields) != len(names):
        raise DecodeError(
            f"Wrong number of fields for {kind}: expected {len(names)}, got {len(fields)}",
            fields=fields
        )


def _parse_int(fields: Sequence[str], index: int, names: Sequence[str]) -> int:
    if not INTEGER_PATTERN.fullmatch(fields[index]):
        raise DecodeError(
            f"Invalid integer: {fields[index]!r}", fields=fields, field=names[index]
        )
    return int(fields[index])


def _parse_float(fields: Sequence[str], index: int, names: Sequence[str]) -> float:
    if not DECIMAL_PATTERN.fullmatch(fields[index]):
        raise DecodeError(
            f"Invalid decimal: {fields[index]!r}", fields=fields, field=names[index]
        )
    return float(fields[index])


def _parse_enum(parser, fields: Sequence[str], index: int):
    try:
        return parser(fields[index])
    except DecodeError as e:
        raise DecodeError(e.message, fields=fields, field=e.field) from None


def decode_order(fields: Sequence[str]) -> Order:
    """
    Decode one raw order row.

    Args:
        fields: Exactly five strings: id, client_id, placed_at, status, origin

    Returns:
        Order: The decoded order

    Raises:
        DecodeError: On wrong arity, a non-integer id, or an unknown token
    """
    _check_arity(fields, ORDER_FIELDS, 'order')
    return Order(
        id=_parse_int(fields, 0, ORDER_FIELDS),
        client_id=_parse_int(fields, 1, ORDER_FIELDS),
        placed_at=fields[2],
        status=_parse_enum(parse_status, fields, 3),
        origin=_parse_enum(parse_origin, fields, 4),
    )


def decode_line_item(fields: Sequence[str]) -> LineItem:
    """
    Decode one raw line item row.

    Args:
        fields: Exactly five strings: order_id, product_id, quantity,
                unit_price, tax

    Returns:
        LineItem: The decoded line item

    Raises:
        DecodeError: On wrong arity or an unparsable number
    """
    _check_arity(fields, LINE_ITEM_FIELDS, 'line item')
    return LineItem(
        order_id=_parse_int(fields, 0, LINE_ITEM_FIELDS),
        product_id=_parse_int(fields, 1, LINE_ITEM_FIELDS),
        quantity=_parse_int(fields, 2, LINE_ITEM_FIELDS),
        unit_price=_parse_float(fields, 3, LINE_ITEM_FIELDS),
        tax=_parse_float(fields, 4, LINE_ITEM_FIELDS),
    )
