"""Grid data model: cells, kinds, and shape helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Union

CellValue = Union[str, int, float, bool, None]

ERROR_SENTINEL = "#ERROR"


class CellKind(str, Enum):
    EMPTY = "empty"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass
class Cell:
    """One grid entry.

    ``formula`` holds the raw text (starting with ``=``) of a formula cell.
    For formula cells ``value`` and ``kind`` are recalculation outputs.
    """

    value: CellValue = None
    kind: CellKind = CellKind.EMPTY
    formula: str | None = None

    @property
    def is_formula(self) -> bool:
        return self.formula is not None and self.formula.startswith("=")

    @property
    def is_error(self) -> bool:
        return self.is_formula and self.value == ERROR_SENTINEL


Grid = list[list[Cell]]


def empty_cell() -> Cell:
    return Cell()


def clone_grid(grid: Grid) -> Grid:
    """Copy every row and cell so edits never reach the caller's grid."""
    return [[replace(cell) for cell in row] for row in grid]


def column_count(grid: Grid) -> int:
    """Width of the widest row."""
    return max((len(row) for row in grid), default=0)


def ensure_dimensions(grid: Grid, rows: int, cols: int) -> None:
    """Grow *grid* in place to at least ``rows`` x ``cols`` with empty cells."""
    while len(grid) < rows:
        grid.append([])
    for row in grid:
        while len(row) < cols:
            row.append(empty_cell())


def infer_kind(text: str) -> CellKind:
    """Kind of raw text typed into a cell: empty, numeric or plain string."""
    if text == "":
        return CellKind.EMPTY
    return CellKind.STRING if to_number(text) is None else CellKind.NUMBER


def cell_from_value(value: Any) -> Cell:
    """Build a cell from a raw Python value (``"=..."`` strings are formulas)."""
    if value is None:
        return empty_cell()
    if isinstance(value, bool):
        return Cell(value, CellKind.BOOLEAN)
    if isinstance(value, (int, float)):
        return Cell(value, CellKind.NUMBER)
    text = str(value)
    if text.startswith("="):
        return Cell(None, CellKind.EMPTY, text)
    return Cell(text, CellKind.STRING if text else CellKind.EMPTY)


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------


def to_number(value: CellValue) -> int | float | None:
    """Coerce a raw cell value to a finite number, or None if it has none.

    Blank text and None count as 0; booleans as 1/0; integer text stays int.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return 0
    if "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        num = float(text)
    except ValueError:
        return None
    return num if math.isfinite(num) else None


def numeric_value(value: CellValue) -> int | float:
    """Numeric reading of a plain cell for arithmetic; 0 when not numeric."""
    num = to_number(value)
    return 0 if num is None else num
