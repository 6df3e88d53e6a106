"""Tests for parsing and formatting helpers."""

import pytest
from datetime import datetime, timedelta, timezone, UTC
from decimal import Decimal

from betconta.utils.amount_parser import parse_amount, to_cents
from betconta.utils.clock import as_utc, utcnow
from betconta.utils.cpf import format_cpf, mask_cpf, normalize_cpf
from betconta.utils.date_parser import parse_datetime


class TestParseAmount:
    """Tests for Brazilian real amount parsing."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("115", Decimal("115.00")),
            ("115.00", Decimal("115.00")),
            ("115,00", Decimal("115.00")),
            ("R$ 115,50", Decimal("115.50")),
            ("r$120", Decimal("120.00")),
            ("1.234,56", Decimal("1234.56")),
            ("1,234.56", Decimal("1234.56")),
            ("99.999", Decimal("100.00")),
        ],
    )
    def test_formats(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "R$"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)

    def test_to_cents_rounds_half_up(self):
        assert to_cents(Decimal("10.005")) == Decimal("10.01")


class TestParseDatetime:
    """Tests for timestamp parsing."""

    def test_now(self):
        before = utcnow()
        parsed = parse_datetime("now")
        assert before <= parsed <= utcnow()

    def test_relative(self):
        parsed = parse_datetime("-73h")
        expected = utcnow() - timedelta(hours=73)
        assert abs(parsed - expected) < timedelta(seconds=5)

    def test_relative_days(self):
        parsed = parse_datetime("+2d")
        assert abs(parsed - (utcnow() + timedelta(days=2))) < timedelta(seconds=5)

    def test_naive_is_utc(self):
        assert parse_datetime("2024-05-01 12:00") == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def test_offset_is_converted(self):
        assert parse_datetime("2024-05-01T09:00:00-03:00") == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    @pytest.mark.parametrize("text", ["+xh", "yesterday-ish"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_datetime(text)


class TestClock:
    """Tests for UTC helpers."""

    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo is not None

    def test_as_utc(self):
        naive = datetime(2024, 5, 1, 12, 0)
        assert as_utc(naive) == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

        brt = datetime(2024, 5, 1, 9, 0, tzinfo=timezone(timedelta(hours=-3)))
        converted = as_utc(brt)
        assert converted == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        assert converted.utcoffset() == timedelta(0)

        assert as_utc(None) is None


class TestCpf:
    """Tests for CPF helpers."""

    def test_normalize(self):
        assert normalize_cpf("987.654.321-00") == "98765432100"
        assert normalize_cpf("98765432100") == "98765432100"

    @pytest.mark.parametrize("cpf", ["", "123", "987.654.321-000"])
    def test_normalize_invalid(self, cpf):
        with pytest.raises(ValueError):
            normalize_cpf(cpf)

    def test_mask(self):
        assert mask_cpf("98765432100") == "***.***.321-**"
        assert mask_cpf("987.654.321-00") == "***.***.321-**"

    def test_format(self):
        assert format_cpf("98765432100") == "987.654.321-00"
        assert format_cpf("123") == "123"
