"""Range classification and summation.

A range expression is a comma-separated list of segments. Each segment is
classified into exactly one :data:`RangeKind` variant, which knows which
addresses it covers::

    A1          SingleCell
    A:C         FullColumn
    B2:B        ColumnSegmentFromRow
    2:4         FullRow
    A1:B3       Rectangle
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from gridcalc._utils import (
    Address,
    column_index,
    is_column_label,
    is_row_number,
)
from gridcalc.calc._errors import AddressParseError
from gridcalc.calc._protocol import Number, ValueGetter

logger = logging.getLogger(__name__)

_ENDPOINT_RE = re.compile(r"^([A-Za-z]+)([0-9]+)$")


def _span(a: int, b: int, limit: int | None = None) -> range:
    """Inclusive ``min(a, b)..max(a, b)``, clipped to ``[0, limit)``."""
    lo, hi = min(a, b), max(a, b)
    if limit is not None:
        hi = min(hi, limit - 1)
    return range(max(lo, 0), hi + 1)


# ---------------------------------------------------------------------------
# Range variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SingleCell:
    address: Address

    def addresses(self, row_count: int, col_count: int) -> Iterator[Address]:
        yield self.address


@dataclass(frozen=True)
class FullColumn:
    first_col: int
    last_col: int

    def addresses(self, row_count: int, col_count: int) -> Iterator[Address]:
        for c in _span(self.first_col, self.last_col, col_count):
            for r in range(row_count):
                yield Address(r, c)


@dataclass(frozen=True)
class ColumnSegmentFromRow:
    start_row: int
    first_col: int
    last_col: int

    def addresses(self, row_count: int, col_count: int) -> Iterator[Address]:
        for c in _span(self.first_col, self.last_col, col_count):
            for r in range(max(self.start_row, 0), row_count):
                yield Address(r, c)


@dataclass(frozen=True)
class FullRow:
    first_row: int
    last_row: int

    def addresses(self, row_count: int, col_count: int) -> Iterator[Address]:
        for r in _span(self.first_row, self.last_row, row_count):
            for c in range(col_count):
                yield Address(r, c)


@dataclass(frozen=True)
class Rectangle:
    start: Address
    end: Address

    def addresses(self, row_count: int, col_count: int) -> Iterator[Address]:
        for r in _span(self.start.row, self.end.row, row_count):
            for c in _span(self.start.col, self.end.col, col_count):
                yield Address(r, c)


RangeKind = Union[SingleCell, FullColumn, ColumnSegmentFromRow, FullRow, Rectangle]


def _endpoint(token: str) -> Address | None:
    """Parse an A1 range endpoint. Row 0 maps to row -1 and is clipped later."""
    m = _ENDPOINT_RE.match(token)
    if not m:
        return None
    return Address(int(m.group(2)) - 1, column_index(m.group(1)))


def parse_segment(segment: str) -> RangeKind:
    """Classify one range segment.

    Raises AddressParseError if the segment matches none of the variants.
    """
    segment = segment.strip()
    if ":" not in segment:
        address = _endpoint(segment)
        if address is None:
            raise AddressParseError(f"Invalid range segment: {segment!r}")
        return SingleCell(address)

    start, _, end = (part.strip() for part in segment.partition(":"))

    if is_column_label(start) and is_column_label(end):
        return FullColumn(column_index(start), column_index(end))

    start_address = _endpoint(start)
    if start_address is not None and is_column_label(end):
        return ColumnSegmentFromRow(start_address.row, start_address.col, column_index(end))

    if is_row_number(start) and is_row_number(end):
        return FullRow(int(start) - 1, int(end) - 1)

    end_address = _endpoint(end)
    if start_address is None or end_address is None:
        raise AddressParseError(f"Invalid range segment: {segment!r}")
    return Rectangle(start_address, end_address)


def classify_segment(segment: str) -> RangeKind | None:
    """Classify one range segment, or return None if it is malformed."""
    try:
        return parse_segment(segment)
    except AddressParseError:
        return None


def classify_range(range_expr: str) -> list[RangeKind | None]:
    """Classify every comma-separated segment of *range_expr*."""
    return [classify_segment(segment) for segment in range_expr.split(",")]


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_range(
    range_expr: str,
    get_value: ValueGetter,
    row_count: int,
    col_count: int,
) -> Number:
    """Sum every cell covered by *range_expr*.

    Malformed segments contribute 0, so a range with no valid segment sums
    to 0. Errors raised by *get_value* propagate.
    """
    total: Number = 0
    for segment in range_expr.split(","):
        try:
            kind = parse_segment(segment)
        except AddressParseError as e:
            logger.debug("Ignoring range segment: %s", e)
            continue
        for row, col in kind.addresses(row_count, col_count):
            total += get_value(row, col)
    return total


def range_addresses(range_expr: str, row_count: int, col_count: int) -> list[Address]:
    """Addresses covered by *range_expr*, in resolution order (duplicates kept)."""
    addresses: list[Address] = []
    for kind in classify_range(range_expr):
        if kind is not None:
            addresses.extend(kind.addresses(row_count, col_count))
    return addresses
