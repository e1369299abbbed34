# ========================
# src/etl/filtering.py
# ========================

"""
Filtering Module

Optional status/origin predicates over joined rows, and the derivation of
the filter mode from positional command-line arguments.
"""

import logging
from enum import IntEnum
from typing import List, Sequence, Tuple

from .errors import InvalidModeError, UsageError
from .models import JoinedRow, Origin, Status

logger = logging.getLogger(__name__)

DEFAULT_STATUS = Status.COMPLETE
DEFAULT_ORIGIN = Origin.ONLINE

USAGE = (
    "Accepted filter arguments:\n"
    "  (none)            no filtering\n"
    "  STATUS            filter by status (Pending, Complete, Cancelled)\n"
    "  ORIGIN            filter by origin (O, P)\n"
    "  STATUS ORIGIN     filter by both"
)


class FilterMode(IntEnum):
    STATUS_AND_ORIGIN = 1
    STATUS_ONLY = 2
    ORIGIN_ONLY = 3
    NONE = 4


def filter_by_status(status: Status, rows: Sequence[JoinedRow]) -> List[JoinedRow]:
    return [row for row in rows if row.order.status == status]


def filter_by_origin(origin: Origin, rows: Sequence[JoinedRow]) -> List[JoinedRow]:
    return [row for row in rows if row.order.origin == origin]


def apply_filters(rows: Sequence[JoinedRow],
                  status: Status,
                  origin: Origin,
                  mode: int) -> List[JoinedRow]:
    """
    Apply the filters selected by mode.

    Args:
        rows: Joined rows
        status: Status to keep (used by modes 1 and 2)
        origin: Origin to keep (used by modes 1 and 3)
        mode: 1 = status and origin, 2 = status, 3 = origin, 4 = none

    Returns:
        list[JoinedRow]: The surviving rows, in input order

    Raises:
        InvalidModeError: If mode is not one of 1-4
    """
    if mode == FilterMode.STATUS_AND_ORIGIN:
        filtered = filter_by_origin(origin, filter_by_status(status, rows))
    elif mode == FilterMode.STATUS_ONLY:
        filtered = filter_by_status(status, rows)
    elif mode == FilterMode.ORIGIN_ONLY:
        filtered = filter_by_origin(origin, rows)
    elif mode == FilterMode.NONE:
        filtered = list(rows)
    else:
        raise InvalidModeError(mode)

    logger.info(f"Filter mode {int(mode)}: {len(filtered)}/{len(rows)} rows kept")
    return filtered


def _lookup(enum_cls, token: str):
    try:
        return enum_cls(token)
    except ValueError:
        return None


def parse_filter_args(args: Sequence[str]) -> Tuple[Status, Origin, FilterMode]:
    """
    Derive (status, origin, mode) from positional arguments.

    Filters that the mode does not use keep their defaults (Complete, Online).

    Args:
        args: Positional arguments, without the program name

    Returns:
        tuple: (status, origin, mode)

    Raises:
        UsageError: On wrong arity or unrecognized tokens
    """
    if len(args) == 0:
        return DEFAULT_STATUS, DEFAULT_ORIGIN, FilterMode.NONE

    if len(args) == 1:
        status = _lookup(Status, args[0])
        if status is not None:
            return status, DEFAULT_ORIGIN, FilterMode.STATUS_ONLY
        origin = _lookup(Origin, args[0])
        if origin is not None:
            return DEFAULT_STATUS, origin, FilterMode.ORIGIN_ONLY
        raise UsageError(f"Unrecognized filter argument: {args[0]!r}\n{USAGE}")

    if len(args) == 2:
        status = _lookup(Status, args[0])
        origin = _lookup(Origin, args[1])
        if status is None or origin is None:
            raise UsageError(f"Expected STATUS ORIGIN, got {list(args)!r}\n{USAGE}")
        return status, origin, FilterMode.STATUS_AND_ORIGIN

    raise UsageError(f"Too many filter arguments ({len(args)})\n{USAGE}")
