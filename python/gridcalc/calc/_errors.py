"""Formula failure types.

Every failure renders the same cell sentinel; the subclass records why the
formula failed so callers can report it.
"""

from __future__ import annotations

from gridcalc._grid import ERROR_SENTINEL
from gridcalc._utils import address_label


class FormulaError(ValueError):
    """Base for all formula failures. ``code`` is the cell display string."""

    code: str = ERROR_SENTINEL


class AddressParseError(FormulaError):
    """A range segment matches none of the supported reference shapes."""


class InvalidFormulaCharacters(FormulaError):
    """Characters outside the arithmetic grammar remained after substitution."""


class FormulaSyntaxError(FormulaError):
    """The sanitized arithmetic string is not a well-formed expression."""


class CircularReferenceError(FormulaError):
    """A cell was re-entered while its own evaluation was still in progress."""

    def __init__(self, address: tuple[int, int]) -> None:
        super().__init__(f"Circular reference detected at {address_label(address)}")
        self.address = address


class NonFiniteResult(FormulaError):
    """Arithmetic produced a non-finite number (including division by zero)."""


class FormulaDepthError(FormulaError):
    """A reference chain was too deep to follow within the recursion limit."""
