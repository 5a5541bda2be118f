# crossarb/services/sales_rank.py

"""Estimate monthly unit sales from an Amazon Best Sellers Rank."""

import math
import re
from dataclasses import dataclass
from datetime import datetime

from crossarb.pricing.rounding import round_money

# (max BSR, estimated monthly sales) per category
CATEGORY_CURVES: dict[str, list[tuple[int, int]]] = {
    "toys_and_games": [
        (1, 30000), (5, 18000), (10, 12000), (50, 5000), (100, 3000),
        (500, 1200), (1000, 700), (5000, 200), (10000, 100), (50000, 30),
        (100000, 10), (500000, 2), (1000000, 1),
    ],
    "electronics": [
        (1, 25000), (5, 15000), (10, 10000), (50, 4500), (100, 2800),
        (500, 1000), (1000, 550), (5000, 150), (10000, 80), (50000, 20),
        (100000, 8), (500000, 1),
    ],
    "home_and_kitchen": [
        (1, 35000), (5, 20000), (10, 14000), (50, 6000), (100, 3500),
        (500, 1500), (1000, 800), (5000, 250), (10000, 120), (50000, 35),
        (100000, 12), (500000, 3), (1000000, 1),
    ],
    "clothing": [
        (1, 20000), (5, 12000), (10, 8000), (50, 3500), (100, 2000),
        (500, 800), (1000, 450), (5000, 120), (10000, 60), (50000, 15),
        (100000, 5), (500000, 1),
    ],
    "sports_and_outdoors": [
        (1, 28000), (5, 16000), (10, 11000), (50, 5000), (100, 3000),
        (500, 1100), (1000, 600), (5000, 180), (10000, 90), (50000, 25),
        (100000, 9), (500000, 2),
    ],
    "beauty": [
        (1, 30000), (5, 18000), (10, 12000), (50, 5500), (100, 3200),
        (500, 1300), (1000, 700), (5000, 210), (10000, 110), (50000, 30),
        (100000, 10), (500000, 2),
    ],
    "books": [
        (1, 40000), (5, 25000), (10, 18000), (50, 8000), (100, 5000),
        (500, 2000), (1000, 1100), (5000, 350), (10000, 180), (50000, 50),
        (100000, 18), (500000, 4), (1000000, 1),
    ],
    "default": [
        (1, 25000), (5, 15000), (10, 10000), (50, 4500), (100, 2700),
        (500, 1100), (1000, 600), (5000, 180), (10000, 90), (50000, 25),
        (100000, 9), (500000, 2), (1000000, 1),
    ],
}


@dataclass
class SalesEstimate:
    bsr: int
    category: str
    estimated_monthly_sales: int
    estimated_daily_sales: float
    sales_velocity: str  # "very_high", "high", "medium", "low", "very_low"
    confidence: str  # "high", "medium", "low"


@dataclass
class BsrTrend:
    trend: str  # "accelerating", "stable", "declining"
    avg_bsr: int
    current_bsr: int
    change_percent: int


def normalise_curve_key(category: str | None) -> str:
    """Map a free-form category onto a ``CATEGORY_CURVES`` key."""
    if not category:
        return "default"
    slug = category.lower().replace("&", "_and_")
    slug = re.sub(r"[^a-z0-9_]", "_", slug)
    slug = re.sub(r"_+", "_", slug).strip("_")
    if not slug:
        return "default"
    if slug in CATEGORY_CURVES:
        return slug
    for key in CATEGORY_CURVES:
        if slug in key or key in slug:
            return key
    return "default"


def _interpolate(bsr: int, curve: list[tuple[int, int]]) -> int:
    """Log-linear interpolation between the surrounding curve points."""
    if bsr <= 0:
        return 0
    if bsr <= curve[0][0]:
        return curve[0][1]
    if bsr >= curve[-1][0]:
        return max(0, curve[-1][1])

    for (bsr1, sales1), (bsr2, sales2) in zip(curve, curve[1:]):
        if bsr1 <= bsr <= bsr2:
            t = (math.log(bsr) - math.log(bsr1)) / (
                math.log(bsr2) - math.log(bsr1)
            )
            log_sales = math.log(sales1) + t * (
                math.log(sales2) - math.log(sales1)
            )
            return int(math.floor(math.exp(log_sales) + 0.5))
    return 0


def _velocity(monthly_sales: int) -> str:
    if monthly_sales >= 1000:
        return "very_high"
    if monthly_sales >= 300:
        return "high"
    if monthly_sales >= 100:
        return "medium"
    if monthly_sales >= 30:
        return "low"
    return "very_low"


def estimate_sales_from_bsr(bsr: int, category: str | None = None) -> SalesEstimate:
    key = normalise_curve_key(category)
    monthly = _interpolate(bsr, CATEGORY_CURVES[key])

    if key == "default":
        confidence = "low"
    elif bsr <= 100_000:
        confidence = "high"
    else:
        confidence = "medium"

    return SalesEstimate(
        bsr=bsr,
        category=key,
        estimated_monthly_sales=monthly,
        estimated_daily_sales=round_money(monthly / 30),
        sales_velocity=_velocity(monthly),
        confidence=confidence,
    )


def analyze_bsr_trend(history: list[tuple[datetime, int]]) -> BsrTrend:
    """Classify a BSR history; a falling rank means accelerating sales."""
    if len(history) < 2:
        current = history[0][1] if history else 0
        return BsrTrend("stable", current, current, 0)

    ordered = sorted(history, key=lambda point: point[0])
    oldest = ordered[0][1]
    current = ordered[-1][1]
    avg = int(math.floor(sum(b for _, b in ordered) / len(ordered) + 0.5))
    change = (
        int(math.floor((current - oldest) / oldest * 100 + 0.5))
        if oldest > 0
        else 0
    )

    if change < -15:
        trend = "accelerating"
    elif change > 15:
        trend = "declining"
    else:
        trend = "stable"
    return BsrTrend(trend, avg, current, change)


def available_categories() -> list[str]:
    return [key for key in CATEGORY_CURVES if key != "default"]
