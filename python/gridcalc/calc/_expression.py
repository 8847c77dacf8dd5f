"""Formula body evaluation: reference substitution + arithmetic expression tree.

A formula body goes through four stages:

1. ``SUM(<range-expr>)`` calls are replaced by their resolved totals.
2. Bare references (``B3``) are replaced by the referenced cell's value.
3. The result is validated against the arithmetic alphabet
   (digits, ``+ - * / ( ) .`` and whitespace).
4. The sanitized string is tokenized, parsed by recursive descent into
   :class:`Number` / :class:`UnaryOp` / :class:`BinaryOp` nodes and evaluated.

Nothing is ever passed to ``eval``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from gridcalc._utils import Address, parse_address
from gridcalc.calc._errors import (
    FormulaSyntaxError,
    InvalidFormulaCharacters,
    NonFiniteResult,
)
from gridcalc.calc._protocol import Number, ValueGetter
from gridcalc.calc._ranges import range_addresses, resolve_range

_SUM_RE = re.compile(r"SUM\(([^()]+)\)", re.IGNORECASE)
_REF_RE = re.compile(r"[A-Za-z]+\d+")
_ARITHMETIC_RE = re.compile(r"^[0-9+\-*/().\s]*$")
_TOKEN_RE = re.compile(r"\s*(?:(\d+\.?\d*|\.\d+)|(.))")


def format_number(value: Number) -> str:
    """Render a number in plain positional notation (no exponent)."""
    if isinstance(value, int):
        return str(value)
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


# ---------------------------------------------------------------------------
# Expression tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Num:
    value: Number

    def evaluate(self) -> Number:
        return self.value


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: Node

    def evaluate(self) -> Number:
        val = self.operand.evaluate()
        return -val if self.op == "-" else val


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: Node
    right: Node

    def evaluate(self) -> Number:
        left = self.left.evaluate()
        right = self.right.evaluate()
        if self.op == "+":
            return left + right
        if self.op == "-":
            return left - right
        if self.op == "*":
            return left * right
        if right == 0:
            raise NonFiniteResult("Division by zero")
        return left / right


Node = Union[Num, UnaryOp, BinaryOp]


# ---------------------------------------------------------------------------
# Tokenizer + recursive descent parser
# ---------------------------------------------------------------------------


def tokenize(text: str) -> list[str]:
    """Split sanitized arithmetic into number, operator and paren tokens."""
    tokens: list[str] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:  # pragma: no cover - the pattern always matches one char
            break
        number, symbol = m.groups()
        if symbol is not None and symbol not in "+-*/()":
            raise FormulaSyntaxError(f"Unexpected character {symbol!r}")
        tokens.append(number if number is not None else symbol)
        pos = m.end()
    return tokens


class _Parser:
    """Grammar::

        expr   := term (("+" | "-") term)*
        term   := unary (("*" | "/") unary)*
        unary  := ("+" | "-") unary | atom
        atom   := NUMBER | "(" expr ")"
    """

    def __init__(self, tokens: list[str]) -> None:
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> Node:
        node = self._expr()
        if self._pos != len(self._tokens):
            raise FormulaSyntaxError(f"Unexpected token {self._tokens[self._pos]!r}")
        return node

    def _peek(self) -> str | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> str:
        tok = self._peek()
        if tok is None:
            raise FormulaSyntaxError("Unexpected end of expression")
        self._pos += 1
        return tok

    def _expr(self) -> Node:
        node = self._term()
        while self._peek() in ("+", "-"):
            op = self._next()
            node = BinaryOp(op, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while self._peek() in ("*", "/"):
            op = self._next()
            node = BinaryOp(op, node, self._unary())
        return node

    def _unary(self) -> Node:
        if self._peek() in ("+", "-"):
            op = self._next()
            return UnaryOp(op, self._unary())
        return self._atom()

    def _atom(self) -> Node:
        tok = self._next()
        if tok == "(":
            node = self._expr()
            if self._next() != ")":
                raise FormulaSyntaxError("Unbalanced parentheses")
            return node
        if tok[0].isdigit() or tok[0] == ".":
            if "." in tok:
                return Num(float(tok))
            return Num(int(tok))
        raise FormulaSyntaxError(f"Unexpected token {tok!r}")


def parse_arithmetic(text: str) -> Node:
    """Parse sanitized arithmetic text into an expression tree."""
    tokens = tokenize(text)
    if not tokens:
        return Num(0)
    return _Parser(tokens).parse()


def evaluate_arithmetic(text: str) -> Number:
    """Evaluate sanitized arithmetic text; the result is always finite."""
    try:
        result = parse_arithmetic(text).evaluate()
    except OverflowError as e:
        raise NonFiniteResult(str(e)) from e
    if isinstance(result, float):
        if not math.isfinite(result):
            raise NonFiniteResult(f"Non-finite result: {result}")
        # Integral division results read back as ints (6/3 -> 2)
        if result.is_integer() and abs(result) < 2**53:
            return int(result)
    return result


# ---------------------------------------------------------------------------
# Formula evaluation
# ---------------------------------------------------------------------------


def substitute_references(
    body: str,
    get_value: ValueGetter,
    row_count: int,
    col_count: int,
) -> str:
    """Replace SUM calls and bare references in *body* with numbers."""

    def _sum(m: re.Match[str]) -> str:
        return format_number(resolve_range(m.group(1), get_value, row_count, col_count))

    def _ref(m: re.Match[str]) -> str:
        address = parse_address(m.group(0))
        if address is None:
            return "0"
        value = get_value(address.row, address.col)
        if isinstance(value, float) and not math.isfinite(value):
            return "0"
        return format_number(value)

    text = _SUM_RE.sub(_sum, body)
    return _REF_RE.sub(_ref, text)


def evaluate(
    body: str,
    get_value: ValueGetter,
    row_count: int,
    col_count: int,
) -> Number:
    """Evaluate a formula body (formula text without the leading ``=``)."""
    sanitized = substitute_references(body, get_value, row_count, col_count)
    if not _ARITHMETIC_RE.match(sanitized):
        raise InvalidFormulaCharacters(f"Invalid characters in formula: {body!r}")
    return evaluate_arithmetic(sanitized)


def formula_references(body: str, row_count: int, col_count: int) -> set[Address]:
    """Every address a formula body reads, through SUM ranges or bare refs."""
    refs: set[Address] = set()
    for m in _SUM_RE.finditer(body):
        refs.update(range_addresses(m.group(1), row_count, col_count))
    for m in _REF_RE.finditer(_SUM_RE.sub("0", body)):
        address = parse_address(m.group(0))
        if address is not None:
            refs.add(address)
    return refs
