"""gridcalc.calc - Formula evaluation engine for grid snapshots."""

from gridcalc.calc._errors import (
    AddressParseError,
    CircularReferenceError,
    FormulaDepthError,
    FormulaError,
    FormulaSyntaxError,
    InvalidFormulaCharacters,
    NonFiniteResult,
)
from gridcalc.calc._evaluator import SheetEvaluator, recalculate_sheet
from gridcalc.calc._expression import evaluate, formula_references
from gridcalc.calc._graph import DependencyGraph
from gridcalc.calc._protocol import RecalcResult, ValueGetter
from gridcalc.calc._ranges import (
    ColumnSegmentFromRow,
    FullColumn,
    FullRow,
    RangeKind,
    Rectangle,
    SingleCell,
    classify_segment,
    parse_segment,
    resolve_range,
)

__all__ = [
    "AddressParseError",
    "CircularReferenceError",
    "ColumnSegmentFromRow",
    "DependencyGraph",
    "FormulaDepthError",
    "FormulaError",
    "FormulaSyntaxError",
    "FullColumn",
    "FullRow",
    "InvalidFormulaCharacters",
    "NonFiniteResult",
    "RangeKind",
    "RecalcResult",
    "Rectangle",
    "SheetEvaluator",
    "SingleCell",
    "ValueGetter",
    "classify_segment",
    "evaluate",
    "formula_references",
    "parse_segment",
    "recalculate_sheet",
    "resolve_range",
]
