"""Dependency graph for formula cells with topological ordering."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from gridcalc._grid import column_count
from gridcalc._utils import Address
from gridcalc.calc._expression import formula_references

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gridcalc._grid import Grid


class DependencyGraph:
    """Tracks which formula cells read which cells within one grid."""

    __slots__ = ("dependencies", "dependents", "formulas")

    def __init__(self) -> None:
        # cell -> set of cells it reads from
        self.dependencies: dict[Address, set[Address]] = {}
        # cell -> set of cells that read from it (reverse edges)
        self.dependents: dict[Address, set[Address]] = {}
        # formula cell -> formula text, in row-major insertion order
        self.formulas: dict[Address, str] = {}

    def add_formula(self, address: Address, formula: str, refs: Iterable[Address]) -> None:
        """Register a formula cell and the cells it reads."""
        self.formulas[address] = formula
        self.dependencies[address] = set(refs)
        for ref in self.dependencies[address]:
            self.dependents.setdefault(ref, set()).add(address)

    def evaluation_order(self) -> tuple[list[Address], list[Address]]:
        """Split formula cells into ``(ordered, blocked)`` (Kahn's algorithm).

        ``ordered`` lists every cell whose formula-cell dependencies come
        before it. ``blocked`` holds, in row-major order, the cells that sit
        on a cycle or depend on one.
        """
        formula_cells = set(self.formulas)
        if not formula_cells:
            return [], []

        # Only count deps that are themselves formula cells (self-refs included)
        in_degree: dict[Address, int] = {
            cell: len(self.dependencies.get(cell, set()) & formula_cells)
            for cell in self.formulas
        }

        queue: deque[Address] = deque(cell for cell in self.formulas if in_degree[cell] == 0)
        order: list[Address] = []
        while queue:
            cell = queue.popleft()
            order.append(cell)
            for dep in sorted(self.dependents.get(cell, ())):
                if dep in formula_cells and dep != cell:
                    in_degree[dep] -= 1
                    if in_degree[dep] == 0:
                        queue.append(dep)

        done = set(order)
        blocked = [cell for cell in sorted(self.formulas) if cell not in done]
        return order, blocked

    @classmethod
    def from_grid(cls, grid: Grid) -> DependencyGraph:
        """Build a dependency graph by scanning *grid* for formula cells."""
        graph = cls()
        row_count, col_count = len(grid), column_count(grid)
        for r, row in enumerate(grid):
            for c, cell in enumerate(row):
                if cell.is_formula:
                    refs = formula_references(cell.formula[1:], row_count, col_count)
                    graph.add_formula(Address(r, c), cell.formula, refs)
        return graph
