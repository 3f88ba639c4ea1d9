"""Order number formatting: ``ORD-`` followed by a six-digit sequence."""

from __future__ import annotations

from collections.abc import Iterable

PREFIX = "ORD-"
WIDTH = 6


def format_order_number(sequence: int) -> str:
    return f"{PREFIX}{sequence:0{WIDTH}d}"


def parse_order_number(number: str) -> int | None:
    """Return the sequence part of an order number, or None if malformed."""
    if not number.startswith(PREFIX):
        return None
    digits = number[len(PREFIX):]
    return int(digits) if digits.isdigit() else None


def next_after(existing: Iterable[str]) -> str:
    """Next number after the highest well-formed one in *existing*."""
    highest = 0
    for number in existing:
        seq = parse_order_number(number)
        if seq is not None and seq > highest:
            highest = seq
    return format_order_number(highest + 1)
