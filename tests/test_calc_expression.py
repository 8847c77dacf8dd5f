"""Tests for formula body evaluation and the arithmetic expression tree."""

from __future__ import annotations

import pytest

from gridcalc._utils import Address
from gridcalc.calc._errors import (
    FormulaSyntaxError,
    InvalidFormulaCharacters,
    NonFiniteResult,
)
from gridcalc.calc._expression import (
    BinaryOp,
    Num,
    UnaryOp,
    evaluate,
    evaluate_arithmetic,
    format_number,
    formula_references,
    parse_arithmetic,
    substitute_references,
    tokenize,
)


def _values(values: dict[tuple[int, int], float]):
    def get_value(row: int, col: int) -> float:
        return values.get((row, col), 0)

    return get_value


NO_CELLS = _values({})


class TestTokenize:
    def test_numbers_and_operators(self) -> None:
        assert tokenize("2*(3+4.5)") == ["2", "*", "(", "3", "+", "4.5", ")"]

    def test_whitespace_ignored(self) -> None:
        assert tokenize("  1 +\t2 ") == ["1", "+", "2"]

    def test_leading_dot_number(self) -> None:
        assert tokenize(".5") == [".5"]

    def test_empty(self) -> None:
        assert tokenize("") == []


class TestParseArithmetic:
    def test_precedence(self) -> None:
        tree = parse_arithmetic("1+2*3")
        assert tree == BinaryOp("+", Num(1), BinaryOp("*", Num(2), Num(3)))

    def test_left_associative(self) -> None:
        tree = parse_arithmetic("8-4-2")
        assert tree == BinaryOp("-", BinaryOp("-", Num(8), Num(4)), Num(2))

    def test_unary_minus(self) -> None:
        assert parse_arithmetic("-3") == UnaryOp("-", Num(3))

    def test_float_literal(self) -> None:
        assert parse_arithmetic("2.5") == Num(2.5)

    def test_empty_is_zero(self) -> None:
        assert parse_arithmetic("   ") == Num(0)

    @pytest.mark.parametrize("text", ["(1+2", "1+2)", "1+", "*2", "1 2", "1.2.3", "()", "."])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(FormulaSyntaxError):
            parse_arithmetic(text)


class TestEvaluateArithmetic:
    def test_literal_arithmetic(self) -> None:
        assert evaluate_arithmetic("2+3") == 5
        assert evaluate_arithmetic("2*(3+4)") == 14

    def test_division(self) -> None:
        assert evaluate_arithmetic("7/2") == 3.5

    def test_integral_division_is_int(self) -> None:
        result = evaluate_arithmetic("6/3")
        assert result == 2
        assert isinstance(result, int)

    def test_double_negative(self) -> None:
        assert evaluate_arithmetic("5--3") == 8

    def test_division_by_zero(self) -> None:
        with pytest.raises(NonFiniteResult, match="Division by zero"):
            evaluate_arithmetic("1/0")

    def test_division_by_zero_expression(self) -> None:
        with pytest.raises(NonFiniteResult):
            evaluate_arithmetic("1/(2-2)")

    def test_float_overflow(self) -> None:
        big = "9" * 400
        with pytest.raises(NonFiniteResult):
            evaluate_arithmetic(f"{big}.0*{big}.0")


class TestFormatNumber:
    def test_int(self) -> None:
        assert format_number(42) == "42"
        assert format_number(-7) == "-7"

    def test_float(self) -> None:
        assert format_number(0.1) == "0.1"

    def test_no_exponent(self) -> None:
        assert format_number(1e21) == "1000000000000000000000"
        assert format_number(1.5e-7) == "0.00000015"


class TestEvaluate:
    def test_sum_replaced(self) -> None:
        get = _values({(0, 0): 5, (1, 0): 10})
        assert evaluate("SUM(A1:A2)", get, 2, 1) == 15

    def test_sum_case_insensitive(self) -> None:
        get = _values({(0, 0): 5, (1, 0): 10})
        assert evaluate("sum(a1:a2)*2", get, 2, 1) == 30

    def test_bare_references(self) -> None:
        get = _values({(0, 0): 4, (0, 1): 3})
        assert evaluate("A1*B1+1", get, 1, 2) == 13

    def test_negative_reference_value(self) -> None:
        get = _values({(0, 0): 5, (0, 1): -3})
        assert evaluate("A1-B1", get, 1, 2) == 8

    def test_non_finite_reference_is_zero(self) -> None:
        get = _values({(0, 0): float("inf")})
        assert evaluate("A1+1", get, 1, 1) == 1

    def test_row_zero_reference_is_zero(self) -> None:
        assert evaluate("A0+2", NO_CELLS, 1, 1) == 2

    def test_empty_body(self) -> None:
        assert evaluate("", NO_CELLS, 0, 0) == 0

    def test_unknown_function(self) -> None:
        with pytest.raises(InvalidFormulaCharacters):
            evaluate("FOO(1)", NO_CELLS, 1, 1)

    def test_text_rejected(self) -> None:
        with pytest.raises(InvalidFormulaCharacters):
            evaluate('"hello"', NO_CELLS, 1, 1)

    def test_nested_sum_not_supported(self) -> None:
        with pytest.raises(InvalidFormulaCharacters):
            evaluate("SUM((A1))", NO_CELLS, 1, 1)

    def test_sum_without_resolvable_range(self) -> None:
        assert evaluate("SUM(nothing)", NO_CELLS, 1, 1) == 0
        assert evaluate("SUM(foo)+1", NO_CELLS, 1, 1) == 1

    def test_substitution_text(self) -> None:
        get = _values({(0, 0): 2.5, (1, 0): 1})
        assert substitute_references("SUM(A1:A2)+A2", get, 2, 1) == "3.5+1"


class TestFormulaReferences:
    def test_bare_and_range(self) -> None:
        refs = formula_references("SUM(A1:A2)+B1", 3, 3)
        assert refs == {Address(0, 0), Address(1, 0), Address(0, 1)}

    def test_full_column_uses_bounds(self) -> None:
        refs = formula_references("SUM(C:C)", 2, 3)
        assert refs == {Address(0, 2), Address(1, 2)}

    def test_literal_only(self) -> None:
        assert formula_references("1+2", 5, 5) == set()
