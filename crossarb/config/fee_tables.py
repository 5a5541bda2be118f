# crossarb/config/fee_tables.py

"""Default fee schedules, category rates and platform reliability.

These tables are read-only. ``FeeModel`` and ``OpportunityScorer`` take
them as constructor defaults; pass a different mapping to override rates
for a tenant or a test.
"""

from collections.abc import Mapping
from types import MappingProxyType

from crossarb.models.fees import FeeStructure
from crossarb.models.listing import Platform

UNCATEGORIZED = "uncategorized"


def _schedule(
    platform: Platform,
    seller_fee_pct: float,
    fixed_fee: float = 0.0,
    shipping_estimate: float = 0.0,
    payment_processing_pct: float = 0.0,
) -> FeeStructure:
    return FeeStructure(
        platform=platform,
        seller_fee_pct=seller_fee_pct,
        fixed_fee=fixed_fee,
        payment_processing_pct=payment_processing_pct,
        shipping_estimate=shipping_estimate,
    )


DEFAULT_FEE_SCHEDULES: Mapping[Platform, FeeStructure] = MappingProxyType({
    Platform.AMAZON: _schedule(Platform.AMAZON, 15.0, 0.99, 5.99),
    Platform.EBAY: _schedule(Platform.EBAY, 12.9, 0.30, 5.99),
    Platform.WALMART: _schedule(Platform.WALMART, 15.0, 0.0, 5.49),
    Platform.ALIEXPRESS: _schedule(Platform.ALIEXPRESS, 8.0),
    Platform.BESTBUY: _schedule(Platform.BESTBUY, 0.0, 0.0, 5.99),
    Platform.TARGET: _schedule(Platform.TARGET, 0.0, 0.0, 5.99),
    Platform.COSTCO: _schedule(Platform.COSTCO, 0.0),
    Platform.HOMEDEPOT: _schedule(Platform.HOMEDEPOT, 0.0, 0.0, 5.99),
    Platform.POSHMARK: _schedule(Platform.POSHMARK, 20.0, 0.0, 7.97),
    Platform.MERCARI: _schedule(Platform.MERCARI, 10.0),
    Platform.FACEBOOK: _schedule(Platform.FACEBOOK, 5.0),
    Platform.FAIRE: _schedule(Platform.FAIRE, 15.0),
    Platform.BSTOCK: _schedule(Platform.BSTOCK, 0.0),
    Platform.BULQ: _schedule(Platform.BULQ, 0.0),
    Platform.LIQUIDATION: _schedule(Platform.LIQUIDATION, 0.0),
})

# Per-category seller fee percentages. Each table carries an explicit
# UNCATEGORIZED rate used for categories it does not list. Platforms
# absent here charge their base ``seller_fee_pct`` for every category.
CATEGORY_FEE_RATES: Mapping[Platform, Mapping[str, float]] = MappingProxyType({
    Platform.AMAZON: MappingProxyType({
        "electronics": 8, "computers": 8, "video_games": 15,
        "clothing": 17, "shoes": 15, "jewelry": 20, "watches": 16,
        "books": 15, "music": 15, "dvd": 15,
        "toys": 15, "sports": 15, "outdoors": 15,
        "home": 15, "kitchen": 15, "garden": 15,
        "beauty": 8, "health": 8, "grocery": 8,
        "automotive": 12, "tools": 15,
        "baby": 8, "pet": 15, "office": 15,
        UNCATEGORIZED: 15,
    }),
    Platform.EBAY: MappingProxyType({
        "electronics": 9.9, "computers": 9.9, "phones": 9.9,
        "clothing": 12.9, "shoes": 12.9, "jewelry": 15, "watches": 15,
        "books": 14.6, "music": 14.6, "movies": 14.6,
        "toys": 12.9, "sports": 12.9, "collectibles": 12.9,
        "home": 12.9, "garden": 12.9, "kitchen": 12.9,
        "automotive": 12.9, "parts": 12.9,
        "beauty": 12.9, "health": 12.9,
        "business": 12.9, "industrial": 12.9,
        UNCATEGORIZED: 12.9,
    }),
    Platform.WALMART: MappingProxyType({
        "electronics": 8, "computers": 8, "cameras": 8,
        "clothing": 15, "shoes": 15, "accessories": 15,
        "home": 15, "furniture": 10, "garden": 15,
        "toys": 15, "sports": 15, "outdoors": 15,
        "beauty": 15, "health": 15, "grocery": 15,
        "automotive": 12, "jewelry": 20,
        UNCATEGORIZED: 15,
    }),
    # Flat rate across all categories
    Platform.ALIEXPRESS: MappingProxyType({
        UNCATEGORIZED: 8,
    }),
})

PLATFORM_RELIABILITY: Mapping[Platform, float] = MappingProxyType({
    Platform.AMAZON: 0.95,
    Platform.EBAY: 0.85,
    Platform.WALMART: 0.90,
    Platform.ALIEXPRESS: 0.70,
    Platform.BESTBUY: 0.90,
    Platform.TARGET: 0.90,
    Platform.COSTCO: 0.90,
    Platform.HOMEDEPOT: 0.85,
    Platform.POSHMARK: 0.65,
    Platform.MERCARI: 0.60,
    Platform.FACEBOOK: 0.55,
    Platform.FAIRE: 0.75,
    Platform.BSTOCK: 0.70,
    Platform.BULQ: 0.70,
    Platform.LIQUIDATION: 0.65,
})
