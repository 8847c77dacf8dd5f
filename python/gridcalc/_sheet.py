"""Sheet facade: ``sheet['A1']`` access with recalculation after every edit."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from gridcalc._grid import (
    Cell,
    CellKind,
    CellValue,
    Grid,
    cell_from_value,
    clone_grid,
    column_count,
    empty_cell,
    ensure_dimensions,
    infer_kind,
)
from gridcalc._utils import Address, parse_address
from gridcalc.calc._evaluator import SheetEvaluator

if TYPE_CHECKING:
    from gridcalc.calc._errors import FormulaError


class Sheet:
    """An editable grid that stays recalculated.

    Edits mirror what an editor front end does: a cell's raw text changes,
    or rows/columns are inserted or deleted. Each edit recalculates the whole
    grid. Formula text is not rewritten by structural edits.
    """

    __slots__ = ("_grid", "_errors")

    def __init__(self, rows: Grid | None = None) -> None:
        self._grid: Grid = []
        self._errors: dict[Address, FormulaError] = {}
        self._recalculate(clone_grid(rows or []))

    @classmethod
    def from_values(cls, values: Iterable[Iterable[Any]]) -> Sheet:
        """Build a sheet from raw Python values (``"=..."`` strings are formulas)."""
        return cls([[cell_from_value(v) for v in row] for row in values])

    @classmethod
    def from_worksheet(cls, ws: Any) -> Sheet:
        """Build a sheet from an openpyxl worksheet."""
        from gridcalc._openpyxl import grid_from_worksheet

        return cls(grid_from_worksheet(ws))

    # ------------------------------------------------------------------
    # Shape + snapshots
    # ------------------------------------------------------------------

    @property
    def max_row(self) -> int:
        return len(self._grid)

    @property
    def max_column(self) -> int:
        return column_count(self._grid)

    @property
    def rows(self) -> Grid:
        """Copy of the current (recalculated) grid."""
        return clone_grid(self._grid)

    @property
    def errors(self) -> dict[Address, FormulaError]:
        """Failures from the latest recalculation, keyed by address."""
        return dict(self._errors)

    def values(self) -> list[list[CellValue]]:
        """Displayed values, one list per row."""
        return [[cell.value for cell in row] for row in self._grid]

    def iter_rows(self) -> Iterator[tuple[Cell, ...]]:
        width = self.max_column
        for row in self._grid:
            yield tuple(row) + tuple(empty_cell() for _ in range(width - len(row)))

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Cell:
        """``sheet['A1']`` -> Cell (an empty cell outside the grid)."""
        row, col = self._address(key)
        if row < len(self._grid) and col < len(self._grid[row]):
            return self._grid[row][col]
        return empty_cell()

    def __setitem__(self, key: str, value: Any) -> None:
        """``sheet['A1'] = 42`` or ``sheet['B1'] = '=SUM(A1:A3)'``."""
        row, col = self._address(key)
        if isinstance(value, str):
            self.set_text(row, col, value)
        else:
            self.set_value(row, col, value)

    def cell(self, row: int, column: int) -> Cell:
        """Get a cell by 1-based (row, column). Matches openpyxl API."""
        if row < 1 or column < 1:
            raise ValueError(f"Row and column are 1-based, got ({row}, {column})")
        r, c = row - 1, column - 1
        if r < len(self._grid) and c < len(self._grid[r]):
            return self._grid[r][c]
        return empty_cell()

    @staticmethod
    def _address(key: str) -> Address:
        address = parse_address(key)
        if address is None:
            raise ValueError(f"Invalid A1 reference: {key!r}")
        return address

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def set_text(self, row: int, col: int, text: str) -> None:
        """Replace the raw text of the cell at zero-based (row, col).

        Text starting with ``=`` becomes the formula; anything else clears the
        formula and is stored with an inferred kind.
        """
        if text.startswith("="):
            self._replace_cell(row, col, Cell(None, CellKind.EMPTY, text))
        else:
            self._replace_cell(row, col, Cell(text, infer_kind(text)))

    def set_value(self, row: int, col: int, value: Any) -> None:
        """Store a raw Python value (number, bool, None or text) at (row, col)."""
        self._replace_cell(row, col, cell_from_value(value))

    def _replace_cell(self, row: int, col: int, cell: Cell) -> None:
        if row < 0 or col < 0:
            raise IndexError(f"Cell position out of range: ({row}, {col})")
        grid = clone_grid(self._grid)
        ensure_dimensions(grid, row + 1, max(column_count(grid), col + 1))
        grid[row][col] = cell
        self._recalculate(grid)

    def insert_row(self, index: int) -> None:
        """Insert an empty row before zero-based *index* (appends past the end)."""
        if index < 0:
            raise IndexError(f"Row index out of range: {index}")
        grid = clone_grid(self._grid)
        grid.insert(index, [empty_cell() for _ in range(column_count(grid))])
        self._recalculate(grid)

    def delete_row(self, index: int) -> None:
        if not 0 <= index < len(self._grid):
            raise IndexError(f"Row index out of range: {index}")
        grid = clone_grid(self._grid)
        del grid[index]
        self._recalculate(grid)

    def insert_column(self, index: int) -> None:
        """Insert an empty column before zero-based *index* in every row."""
        if index < 0:
            raise IndexError(f"Column index out of range: {index}")
        grid = clone_grid(self._grid)
        for row in grid:
            row.insert(index, empty_cell())
        self._recalculate(grid)

    def delete_column(self, index: int) -> None:
        if not 0 <= index < column_count(self._grid):
            raise IndexError(f"Column index out of range: {index}")
        grid = clone_grid(self._grid)
        for row in grid:
            if index < len(row):
                del row[index]
        self._recalculate(grid)

    def _recalculate(self, grid: Grid) -> None:
        result = SheetEvaluator(grid).run()
        self._grid = result.grid
        self._errors = result.errors

    def __repr__(self) -> str:
        return f"<Sheet {self.max_row}x{self.max_column} errors={len(self._errors)}>"

