"""Unit tests for order number formatting."""

from fgo.domain.service.order_numbers import (
    format_order_number,
    next_after,
    parse_order_number,
)


def test_format():
    assert format_order_number(123) == "ORD-000123"


def test_parse():
    assert parse_order_number("ORD-000123") == 123
    assert parse_order_number("INV-000123") is None
    assert parse_order_number("ORD-12a") is None


def test_next_after_skips_malformed():
    assert next_after(["ORD-000004", "legacy-9", "ORD-000010"]) == "ORD-000011"


def test_next_after_empty():
    assert next_after([]) == "ORD-000001"
