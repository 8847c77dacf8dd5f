"""openpyxl boundary: read worksheets into grids, write computed values back.

openpyxl is optional (``pip install gridcalc[xlsx]``); worksheets are passed
in by the caller, so this module never imports it at load time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gridcalc._grid import cell_from_value

if TYPE_CHECKING:
    from gridcalc._grid import Grid

logger = logging.getLogger(__name__)


def grid_from_worksheet(ws: Any) -> Grid:
    """Read every row of an openpyxl worksheet into a Grid.

    Formula cells (values starting with ``=``) keep their formula text;
    recalculation fills in their values.
    """
    grid: Grid = [
        [cell_from_value(value) for value in row]
        for row in ws.iter_rows(values_only=True)
    ]
    # Drop trailing empty rows openpyxl reports for a blank sheet
    while grid and all(cell.value is None and not cell.is_formula for cell in grid[-1]):
        grid.pop()
    logger.debug("Read %d rows from worksheet %r", len(grid), getattr(ws, "title", None))
    return grid


def write_values(grid: Grid, ws: Any) -> None:
    """Write the displayed value of every non-empty cell into *ws*.

    Formula cells receive their computed number or ``"#ERROR"``, so the
    worksheet holds a calculated snapshot rather than formulas.
    """
    for r, row in enumerate(grid, start=1):
        for c, cell in enumerate(row, start=1):
            if cell.value is None and not cell.is_formula:
                continue
            ws.cell(row=r, column=c, value=cell.value)
