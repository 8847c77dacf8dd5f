"""Tests for column label and address helpers."""

from __future__ import annotations

import pytest

from gridcalc._utils import (
    Address,
    address_label,
    column_index,
    column_label,
    is_column_label,
    is_row_number,
    parse_address,
)


class TestColumnCodec:
    def test_column_index(self) -> None:
        assert column_index("A") == 0
        assert column_index("Z") == 25
        assert column_index("AA") == 26
        assert column_index("AZ") == 51
        assert column_index("ZZ") == 701
        assert column_index("AAA") == 702

    def test_column_index_lowercase(self) -> None:
        assert column_index("aa") == 26

    def test_column_label(self) -> None:
        assert column_label(0) == "A"
        assert column_label(25) == "Z"
        assert column_label(26) == "AA"
        assert column_label(701) == "ZZ"
        assert column_label(702) == "AAA"

    def test_roundtrip(self) -> None:
        for n in range(10000):
            assert column_index(column_label(n)) == n

    def test_invalid_label_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid column label"):
            column_index("A1")

    def test_negative_index_raises(self) -> None:
        with pytest.raises(ValueError):
            column_label(-1)

    def test_token_shapes(self) -> None:
        assert is_column_label("AB")
        assert not is_column_label("A1")
        assert is_row_number("12")
        assert not is_row_number("1A")
        assert not is_row_number("")


class TestParseAddress:
    def test_simple(self) -> None:
        assert parse_address("A1") == Address(0, 0)
        assert parse_address("B3") == Address(2, 1)
        assert parse_address("AA100") == Address(99, 26)

    def test_case_and_whitespace(self) -> None:
        assert parse_address("  c2 ") == Address(1, 2)

    def test_mismatch_returns_none(self) -> None:
        assert parse_address("123") is None
        assert parse_address("A") is None
        assert parse_address("A1B") is None
        assert parse_address("$A$1") is None
        assert parse_address("") is None

    def test_row_zero_returns_none(self) -> None:
        assert parse_address("A0") is None

    def test_address_label(self) -> None:
        assert address_label(Address(0, 0)) == "A1"
        assert address_label((99, 26)) == "AA100"
