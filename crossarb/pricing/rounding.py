# crossarb/pricing/rounding.py

"""Monetary rounding shared by the fee and scoring code."""

import math


def round_money(value: float) -> float:
    """Round to 2 decimals, halves away from zero.

    Python's ``round`` uses banker's rounding, which would make fee
    summaries differ from ``round(x * 100) / 100`` on exact halves.
    """
    rounded = math.floor(abs(value) * 100 + 0.5) / 100
    if value < 0 and rounded:
        return -rounded
    return rounded
