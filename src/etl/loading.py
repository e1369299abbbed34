# ========================
# src/etl/loading.py
# ========================

"""
Table Loading Module

Turns a raw row-set (header first, empty trailing row last) into a list of
decoded entities.
"""

import logging
from typing import Callable, List, Sequence, TypeVar

from .errors import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def drop_header_and_trailer(raw_rows: Sequence[Sequence[str]]) -> List[Sequence[str]]:
    """
    Drop the first row and the last row unconditionally.

    The last row is assumed to be the empty row left over by splitting file
    content on a trailing newline. Row-sets of length 0 or 1 become empty.
    """
    return list(raw_rows[1:-1])


def load_table(raw_rows: Sequence[Sequence[str]],
               decode: Callable[[Sequence[str]], T]) -> List[T]:
    """
    Decode every data row of a raw row-set.

    Args:
        raw_rows: Rows of raw string fields, including header and trailer
        decode: Row decoder, e.g. decode_order or decode_line_item

    Returns:
        list: Decoded entities in input order

    Raises:
        DecodeError: For the first row that fails to decode, annotated with
                     its 1-based line number in raw_rows
    """
    entities = []
    # Line 1 is the header, so data rows start at line 2
    for line_number, fields in enumerate(drop_header_and_trailer(raw_rows), start=2):
        try:
            entities.append(decode(fields))
        except DecodeError as e:
            e.line_number = line_number
            e.fields = list(fields)
            logger.error(f"Failed to decode row: {e}")
            raise

    logger.debug(f"Loaded {len(entities)} records from {len(raw_rows)} raw rows")
    return entities
