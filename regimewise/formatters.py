"""
Display helpers for Indian currency and percentages.

Amounts use the Indian digit grouping (last three digits, then pairs):
1234567 → "12,34,567".
"""
from __future__ import annotations

import math
from typing import Optional


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (0.5 → 1, -0.5 → -1)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_number(amount: float) -> str:
    """Indian grouping, up to three decimals, no symbol."""
    sign = "-" if amount < 0 else ""
    whole, _, frac = f"{abs(amount):.3f}".partition(".")
    frac = frac.rstrip("0")
    text = _group_indian(whole)
    return f"{sign}{text}.{frac}" if frac else f"{sign}{text}"


def format_inr(amount: float) -> str:
    """Whole-rupee currency string, e.g. 150000 → '₹1,50,000'."""
    rupees = round_half_up(amount)
    if rupees < 0:
        return f"-₹{_group_indian(str(-rupees))}"
    return f"₹{_group_indian(str(rupees))}"


def format_percentage(value: float) -> str:
    return f"{value:.2f}%"


def format_large_number(num: float) -> str:
    """Compact form with Indian suffixes: K (thousand), L (lakh), Cr (crore)."""
    if num >= 10_000_000:
        return f"{num / 10_000_000:.1f} Cr"
    if num >= 100_000:
        return f"{num / 100_000:.1f} L"
    if num >= 1_000:
        return f"{num / 1_000:.1f} K"
    return f"{num:g}"


def format_tax_slab(lower: float, upper: Optional[float], rate: float) -> str:
    """'₹3,00,000 - ₹6,00,000 @ 5%'; an unbounded band ends in '∞'."""
    high = "∞" if upper is None else format_inr(upper)
    return f"{format_inr(lower)} - {high} @ {rate:g}%"
