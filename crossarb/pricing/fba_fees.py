# crossarb/pricing/fba_fees.py

"""Amazon FBA fee breakdown.

Covers the per-unit costs of selling through Fulfillment by Amazon:

- fulfillment fee by size tier and shipping weight,
- category referral fee with a per-unit minimum,
- variable closing fee on media items,
- monthly and long-term storage fees.

The referral table here is the FBA one; ``FeeModel`` keeps its own
per-platform category rates for cross-platform comparisons.
"""

import math
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum

from crossarb.pricing.rounding import round_money


class SizeTier(str, Enum):
    SMALL_STANDARD = "small_standard"
    LARGE_STANDARD = "large_standard"
    SMALL_OVERSIZE = "small_oversize"
    MEDIUM_OVERSIZE = "medium_oversize"
    LARGE_OVERSIZE = "large_oversize"
    SPECIAL_OVERSIZE = "special_oversize"

    @property
    def is_standard(self) -> bool:
        return self in (SizeTier.SMALL_STANDARD, SizeTier.LARGE_STANDARD)


@dataclass(frozen=True)
class ProductDimensions:
    """Packaged item dimensions in inches and weight in pounds."""

    length_in: float
    width_in: float
    height_in: float
    weight_lbs: float

    @property
    def cubic_feet(self) -> float:
        return self.length_in * self.width_in * self.height_in / 1728


@dataclass
class FbaFeeBreakdown:
    size_tier: SizeTier
    fulfillment_fee: float
    referral_fee: float
    closing_fee: float
    monthly_storage_fee: float
    total_per_unit: float
    net_after_fees: float


# category -> (percentage, per-unit minimum)
REFERRAL_FEES: dict[str, tuple[float, float]] = {
    "amazon_device_accessories": (45, 0.30),
    "appliances": (15, 0.30),
    "automotive": (12, 0.30),
    "baby": (8, 0.30),
    "backpacks_handbags": (15, 0.30),
    "beauty": (8, 0.30),
    "books": (15, 0.0),
    "camera": (8, 0.30),
    "cell_phone_devices": (8, 0.30),
    "clothing": (17, 0.30),
    "computers": (8, 0.30),
    "consumer_electronics": (8, 0.30),
    "electronics_accessories": (15, 0.30),
    "everything_else": (15, 0.30),
    "furniture": (15, 0.30),
    "grocery": (8, 0.30),
    "health": (8, 0.30),
    "home_garden": (15, 0.30),
    "industrial_scientific": (12, 0.30),
    "jewelry": (20, 0.30),
    "kitchen": (15, 0.30),
    "luggage": (15, 0.30),
    "media": (15, 0.0),
    "music": (15, 0.0),
    "musical_instruments": (15, 0.30),
    "office": (15, 0.30),
    "outdoors": (15, 0.30),
    "personal_care": (8, 0.30),
    "pet": (15, 0.30),
    "shoes": (15, 0.30),
    "software": (15, 0.0),
    "sports": (15, 0.30),
    "tires": (10, 0.30),
    "tools": (15, 0.30),
    "toys": (15, 0.30),
    "video_games": (15, 0.0),
    "video_games_consoles": (8, 0.30),
    "watches": (16, 0.30),
    "default": (15, 0.30),
}

MEDIA_CATEGORIES = frozenset(
    {"books", "dvd", "music", "software", "video_games", "media"}
)
MEDIA_CLOSING_FEE = 1.80

# (max shipping weight lbs, fee) for standard tiers
_SMALL_STANDARD_STEPS = [(0.25, 3.22), (0.5, 3.40), (0.75, 3.58)]
_LARGE_STANDARD_STEPS = [
    (0.25, 3.86), (0.5, 4.08), (0.75, 4.24), (1.0, 4.75),
    (1.5, 5.40), (2.0, 5.69), (2.5, 6.10), (3.0, 6.39),
]


def _slug(category: str) -> str:
    lowered = category.lower().replace("&", "_and_")
    lowered = re.sub(r"[^a-z0-9_]", "_", lowered)
    lowered = re.sub(r"_+", "_", lowered)
    return lowered.strip("_")


def normalise_referral_category(category: str | None) -> str:
    """Map a free-form category onto a ``REFERRAL_FEES`` key.

    Tries an exact slug match first, then substring containment in
    either direction, then ``default``.
    """
    if not category:
        return "default"
    slug = _slug(category)
    if not slug:
        return "default"
    if slug in REFERRAL_FEES:
        return slug
    for key in REFERRAL_FEES:
        if slug in key or key in slug:
            return key
    return "default"


def determine_size_tier(dims: ProductDimensions) -> SizeTier:
    sides = sorted((dims.length_in, dims.width_in, dims.height_in))
    shortest, median, longest = sides
    length_plus_girth = longest + 2 * (median + shortest)
    weight = dims.weight_lbs

    if longest <= 15 and median <= 12 and shortest <= 0.75 and weight <= 1:
        return SizeTier.SMALL_STANDARD
    if longest <= 18 and median <= 14 and shortest <= 8 and weight <= 20:
        return SizeTier.LARGE_STANDARD
    if (
        longest <= 60 and median <= 30
        and length_plus_girth <= 130 and weight <= 70
    ):
        return SizeTier.SMALL_OVERSIZE
    if longest <= 108 and length_plus_girth <= 130 and weight <= 150:
        return SizeTier.MEDIUM_OVERSIZE
    if longest <= 108 and length_plus_girth <= 165 and weight <= 150:
        return SizeTier.LARGE_OVERSIZE
    return SizeTier.SPECIAL_OVERSIZE


def packaging_weight(tier: SizeTier) -> float:
    return 0.25 if tier.is_standard else 1.0


def calculate_fulfillment_fee(tier: SizeTier, weight_lbs: float) -> float:
    """Per-unit pick, pack and ship fee."""
    shipping_weight = weight_lbs + packaging_weight(tier)

    if tier is SizeTier.SMALL_STANDARD:
        for limit, fee in _SMALL_STANDARD_STEPS:
            if shipping_weight <= limit:
                return fee
        return 3.77

    if tier is SizeTier.LARGE_STANDARD:
        for limit, fee in _LARGE_STANDARD_STEPS:
            if shipping_weight <= limit:
                return fee
        # $0.16 per half pound above 3 lb
        return 6.39 + math.ceil((shipping_weight - 3) * 2) * 0.16

    if tier is SizeTier.SMALL_OVERSIZE:
        return 9.73 + max(0, math.ceil(shipping_weight - 1)) * 0.42
    if tier is SizeTier.MEDIUM_OVERSIZE:
        return 19.05 + max(0, math.ceil(shipping_weight - 1)) * 0.42
    if tier is SizeTier.LARGE_OVERSIZE:
        return 89.98 + max(0, math.ceil(shipping_weight - 90)) * 0.83
    return 158.49 + max(0, math.ceil(shipping_weight - 90)) * 0.83


def calculate_referral_fee(sale_price: float, category: str | None = None) -> float:
    pct, minimum = REFERRAL_FEES[normalise_referral_category(category)]
    return max(sale_price * pct / 100, minimum)


def calculate_closing_fee(category: str | None = None) -> float:
    if normalise_referral_category(category) in MEDIA_CATEGORIES:
        return MEDIA_CLOSING_FEE
    return 0.0


def calculate_monthly_storage_fee(
    dims: ProductDimensions,
    month: int,
    is_hazmat: bool = False,
) -> float:
    """Storage fee for one unit in *month* (1-12); Oct-Dec is peak."""
    if dims.length_in <= 0 or dims.width_in <= 0 or dims.height_in <= 0:
        return 0.0

    peak = 10 <= month <= 12
    if is_hazmat:
        rate = 1.20 if peak else 0.99
    elif not determine_size_tier(dims).is_standard:
        rate = 2.40 if peak else 0.78
    else:
        rate = 2.40 if peak else 0.87

    return round_money(dims.cubic_feet * rate)


def calculate_long_term_storage_fee(
    dims: ProductDimensions, days_in_storage: int
) -> float:
    """Aged-inventory surcharge; zero below 271 days."""
    if days_in_storage < 271:
        return 0.0
    if days_in_storage >= 365:
        return max(dims.cubic_feet * 6.90, 0.15)
    return max(dims.cubic_feet * 1.50, 0.10)


def calculate_fba_fees(
    sale_price: float,
    dims: ProductDimensions,
    category: str | None = None,
    month: int | None = None,
    is_hazmat: bool = False,
) -> FbaFeeBreakdown:
    """Complete per-unit FBA fee breakdown for one sale."""
    tier = determine_size_tier(dims)
    fulfillment_fee = calculate_fulfillment_fee(tier, dims.weight_lbs)
    referral_fee = calculate_referral_fee(sale_price, category)
    closing_fee = calculate_closing_fee(category)
    storage_fee = calculate_monthly_storage_fee(
        dims,
        month if month is not None else date.today().month,
        is_hazmat,
    )
    total = fulfillment_fee + referral_fee + closing_fee + storage_fee

    return FbaFeeBreakdown(
        size_tier=tier,
        fulfillment_fee=round_money(fulfillment_fee),
        referral_fee=round_money(referral_fee),
        closing_fee=closing_fee,
        monthly_storage_fee=storage_fee,
        total_per_unit=round_money(total),
        net_after_fees=round_money(sale_price - total),
    )
