from __future__ import annotations

import datetime
import logging
from decimal import Decimal

import pytest

from txnfile.errors import FieldParseError
from txnfile.fields import fit, format_amount, format_date, pad_line, parse, parse_date, render
from txnfile.layout import Column, Justify


def _amount_col() -> Column:
    return Column("amount", 0, 16, kind="amount", justify=Justify.RIGHT, default=Decimal("0"))


def test_fit_justification_and_truncation():
    assert fit("ABC", 5, Justify.LEFT) == "ABC  "
    assert fit("ABC", 5, Justify.RIGHT) == "  ABC"
    assert fit("123456", 8, Justify.ZERO) == "00123456"
    # lo que no cabe se corta
    assert fit("ABCDEFG", 3, Justify.RIGHT) == "ABC"
    assert pad_line("X", 4) == "X   "
    assert pad_line("ABCDEF", 4) == "ABCD"


def test_format_amount_two_decimals_no_sign():
    assert format_amount(Decimal("817.18")) == "817.18"
    assert format_amount(Decimal("5")) == "5.00"
    assert format_amount(Decimal("-12.5")) == "12.50"
    assert format_amount(Decimal("1234567.891")) == "1234567.89"
    # redondeo bancario
    assert format_amount(Decimal("0.125")) == "0.12"
    assert format_amount(Decimal("0.135")) == "0.14"


def test_dates_yyyymmdd():
    assert format_date(datetime.date(2017, 1, 23)) == "20170123"
    assert format_date(datetime.date(1, 1, 1)) == "00010101"
    assert format_date(None) == "00000000"

    assert parse_date("20170123") == datetime.date(2017, 1, 23)
    assert parse_date("00000000") is None
    with pytest.raises(ValueError):
        parse_date("2017012x")
    with pytest.raises(ValueError):
        parse_date("20171340")


def test_render_int_columns():
    zero = Column("reference_number", 0, 6, kind="int", justify=Justify.ZERO, default=0)
    left = Column("total", 0, 6, kind="int", justify=Justify.LEFT, default=0)
    assert render(zero, 3) == "000003"
    assert render(left, 2) == "2     "
    assert render(_amount_col(), Decimal("2721.78")) == "2721.78".rjust(16)


def test_parse_lenient_uses_column_default_and_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="txnfile"):
        value = parse(_amount_col(), "12,34.5".rjust(16), "record")

    assert value == Decimal("0")
    assert any("record.amount" in r.getMessage() for r in caplog.records), "No se avisó el campo mal formado"


def test_parse_blank_is_default_without_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="txnfile"):
        assert parse(_amount_col(), " " * 16, "record") == Decimal("0")
    assert not caplog.records


def test_parse_strict_raises():
    with pytest.raises(FieldParseError) as exc:
        parse(_amount_col(), "abc".rjust(16), "batch_trailer", strict=True)
    assert exc.value.field == "amount"
    assert exc.value.raw == "abc"
