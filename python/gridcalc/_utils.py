"""Coordinate helpers: column labels and A1-style addresses (zero-based)."""

from __future__ import annotations

import re
from typing import NamedTuple

_ADDRESS_RE = re.compile(r"^([A-Za-z]+)([0-9]+)$")
_LABEL_RE = re.compile(r"^[A-Za-z]+$")


class Address(NamedTuple):
    """Zero-based ``(row, col)`` position of a cell in a grid."""

    row: int
    col: int


def column_index(label: str) -> int:
    """Decode a column label: ``"A"`` -> 0, ``"Z"`` -> 25, ``"AA"`` -> 26."""
    if not _LABEL_RE.match(label):
        raise ValueError(f"Invalid column label: {label!r}")
    n = 0
    for ch in label.upper():
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def column_label(index: int) -> str:
    """Encode a zero-based column index: 0 -> ``"A"``, 26 -> ``"AA"``."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    result = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        result = chr(rem + ord("A")) + result
    return result


def is_column_label(token: str) -> bool:
    return bool(_LABEL_RE.match(token))


def is_row_number(token: str) -> bool:
    return token.isascii() and token.isdigit()


def parse_address(token: str) -> Address | None:
    """Parse ``"B3"`` into ``Address(row=2, col=1)``.

    Returns None when *token* is not ``<letters><digits>`` or names row 0.
    """
    m = _ADDRESS_RE.match(token.strip())
    if not m:
        return None
    row_number = int(m.group(2))
    if row_number < 1:
        return None
    return Address(row_number - 1, column_index(m.group(1)))


def address_label(address: tuple[int, int]) -> str:
    """Format a zero-based ``(row, col)`` as an A1 label."""
    row, col = address
    return f"{column_label(col)}{row + 1}"
