"""Accessor protocol and recalculation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, Union

if TYPE_CHECKING:
    from gridcalc._grid import Grid
    from gridcalc._utils import Address
    from gridcalc.calc._errors import FormulaError

Number = Union[int, float]


class ValueGetter(Protocol):
    """Memoized numeric accessor handed to the range resolver and evaluator."""

    def __call__(self, row: int, col: int) -> Number:
        """Return the numeric value of the cell at zero-based (row, col).

        May raise a FormulaError when the cell is a failing formula.
        """
        ...


@dataclass(frozen=True)
class RecalcResult:
    """Output of one full-grid recalculation pass."""

    grid: Grid
    errors: dict[Address, FormulaError] = field(default_factory=dict)
    formula_cells: int = 0

    @property
    def failed_cells(self) -> int:
        return len(self.errors)

    @property
    def ok(self) -> bool:
        return not self.errors
