"""SheetEvaluator: one memoized, cycle-checked recalculation pass over a grid.

Each pass works on a deep copy of the caller's grid and owns its own value
cache and in-progress set, so nothing leaks between calls::

    result = SheetEvaluator(grid).run()
    result.grid      # recalculated copy
    result.errors    # Address -> FormulaError for cells showing "#ERROR"
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridcalc._grid import ERROR_SENTINEL, CellKind, clone_grid, column_count, numeric_value
from gridcalc._utils import Address, address_label
from gridcalc.calc._errors import CircularReferenceError, FormulaDepthError, FormulaError
from gridcalc.calc._expression import evaluate
from gridcalc.calc._graph import DependencyGraph
from gridcalc.calc._protocol import Number, RecalcResult

if TYPE_CHECKING:
    from gridcalc._grid import Grid

logger = logging.getLogger(__name__)


class SheetEvaluator:
    """Evaluates every formula cell of a grid snapshot exactly once.

    The instance is single-use: construct one per recalculation.
    """

    def __init__(self, grid: Grid) -> None:
        self.grid: Grid = clone_grid(grid)
        self.row_count = len(self.grid)
        self.col_count = column_count(self.grid)
        self._cache: dict[Address, Number] = {}
        self._visiting: set[Address] = set()

    def get_value(self, row: int, col: int) -> Number:
        """Memoized numeric value of the cell at zero-based (row, col).

        Formula cells are evaluated on first access; re-entering a cell that
        is still being evaluated raises CircularReferenceError.
        """
        key = Address(row, col)
        if key in self._cache:
            return self._cache[key]

        if row < 0 or col < 0 or row >= self.row_count or col >= len(self.grid[row]):
            self._cache[key] = 0
            return 0

        cell = self.grid[row][col]
        if not cell.is_formula:
            value = numeric_value(cell.value)
            self._cache[key] = value
            return value

        if key in self._visiting:
            raise CircularReferenceError(key)
        self._visiting.add(key)
        try:
            result = evaluate(cell.formula[1:], self.get_value, self.row_count, self.col_count)
        finally:
            self._visiting.discard(key)

        self._cache[key] = result
        cell.value = result
        cell.kind = CellKind.NUMBER
        return result

    def run(self) -> RecalcResult:
        """Evaluate all formula cells and return the recalculated grid."""
        graph = DependencyGraph.from_grid(self.grid)
        ordered, blocked = graph.evaluation_order()
        errors: dict[Address, FormulaError] = {}

        for address in ordered + blocked:
            try:
                self.get_value(address.row, address.col)
            except FormulaError as e:
                errors[address] = e
            except RecursionError:
                errors[address] = FormulaDepthError("Formula nesting too deep")
            else:
                continue
            logger.debug("Formula %s failed: %s", address_label(address), errors[address])
            cell = self.grid[address.row][address.col]
            cell.value = ERROR_SENTINEL
            cell.kind = CellKind.STRING

        if errors:
            logger.debug("Recalculated %d formula cells, %d failed", len(graph.formulas), len(errors))
        return RecalcResult(
            grid=self.grid,
            errors=dict(sorted(errors.items())),
            formula_cells=len(graph.formulas),
        )


def recalculate_sheet(grid: Grid) -> Grid:
    """Return a recalculated copy of *grid*; the input is never mutated.

    Every formula cell ends up holding either its numeric result
    (``kind == CellKind.NUMBER``) or ``"#ERROR"`` (``kind == CellKind.STRING``).
    """
    return SheetEvaluator(grid).run().grid
