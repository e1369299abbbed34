# ========================
# src/etl/errors.py
# ========================

"""
Error Types

Every failure raised by the pipeline derives from ETLError. None of them is
retried: any error aborts the whole run.
"""

from typing import Optional, Sequence


class ETLError(Exception):
    """Base class for pipeline errors."""


class DecodeError(ETLError):
    """
    A raw row could not be decoded into an entity.

    Attributes:
        fields: The offending raw row, if known
        field: Name of the field that failed to parse, if any
        line_number: 1-based position of the row in its raw row-set, set by
                     the table loader
    """

    def __init__(self,
                 message: str,
                 fields: Optional[Sequence[str]] = None,
                 field: Optional[str] = None,
                 line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields is not None else None
        self.field = field
        self.line_number = line_number

    def __str__(self) -> str:
        parts = [self.message]
        if self.line_number is not None:
            parts.append(f"line {self.line_number}")
        if self.field is not None:
            parts.append(f"field '{self.field}'")
        if self.fields is not None:
            parts.append(f"row {self.fields!r}")
        return " | ".join(parts)


class InvalidModeError(ETLError):
    """apply_filters was called with a mode outside 1-4."""

    def __init__(self, mode):
        super().__init__(f"Could not filter records: filter mode {mode!r} does not exist")
        self.mode = mode


class UsageError(ETLError):
    """Filter arguments given on the command line (or API) are not accepted."""
