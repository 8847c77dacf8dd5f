"""gridcalc - whole-sheet formula recalculation for spreadsheet grids.

Usage::

    from gridcalc import Cell, CellKind, Sheet, recalculate_sheet

    # Functional: grid snapshot in, recalculated copy out
    grid = [
        [Cell(5, CellKind.NUMBER), Cell(formula="=SUM(A1:A2)")],
        [Cell(10, CellKind.NUMBER)],
    ]
    result = recalculate_sheet(grid)
    print(result[0][1].value)  # 15

    # Editing facade: recalculates after every edit
    sheet = Sheet.from_values([[1, 2, "=A1+B1"]])
    sheet["A1"] = 40
    print(sheet["C1"].value)  # 42
"""

from gridcalc._grid import ERROR_SENTINEL, Cell, CellKind, Grid, clone_grid
from gridcalc._sheet import Sheet
from gridcalc._utils import Address, address_label, column_index, column_label, parse_address
from gridcalc.calc import FormulaError, RecalcResult, SheetEvaluator, recalculate_sheet

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Address",
    "Cell",
    "CellKind",
    "ERROR_SENTINEL",
    "FormulaError",
    "Grid",
    "RecalcResult",
    "Sheet",
    "SheetEvaluator",
    "address_label",
    "clone_grid",
    "column_index",
    "column_label",
    "parse_address",
    "recalculate_sheet",
]
