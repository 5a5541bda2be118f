# crossarb/models/opportunity.py

"""Opportunity, match and scan models for inter-module data flow."""

from dataclasses import dataclass, field
from enum import Enum

from crossarb.config.settings import Settings
from crossarb.models.listing import Platform, ProductSearchResult


class MatchType(str, Enum):
    """How a group of listings was judged to be the same product."""

    UPC = "upc"
    ASIN = "asin"
    TITLE = "title"

    def __str__(self) -> str:
        return self.value


@dataclass
class MatchResult:
    """Listings from different platforms believed to be one product."""

    confidence: float
    match_type: MatchType
    products: list[ProductSearchResult] = field(
        default_factory=lambda: list[ProductSearchResult]()
    )

    @property
    def platforms(self) -> list[Platform]:
        return [p.platform for p in self.products]


@dataclass
class ArbitrageOpportunity:
    """A profitable buy-here, sell-there pair."""

    product_id: str
    product_title: str
    buy_platform: Platform
    buy_price: float
    buy_shipping: float
    buy_url: str
    sell_platform: Platform
    sell_price: float
    sell_shipping: float
    estimated_fees: float
    estimated_profit: float
    margin_pct: float
    score: float = 0.0


@dataclass(frozen=True)
class ScoringWeights:
    """Relative weight of each component of the opportunity score."""

    margin: float = 0.4
    profit: float = 0.35
    reliability: float = 0.25


@dataclass
class ScanOptions:
    """Caller-tunable knobs for a single scan."""

    query: str = Settings.DEFAULT_QUERY
    category: str | None = None
    min_margin_pct: float = Settings.DEFAULT_MIN_MARGIN_PCT
    max_results: int = Settings.DEFAULT_MAX_RESULTS
    platforms: list[Platform] | None = None
    exclude_keywords: list[str] = field(
        default_factory=lambda: list[str]()
    )
    matched_only: bool = False


@dataclass
class ScanReport:
    """Container for a completed scan across multiple platforms."""

    query: str
    opportunities: list[ArbitrageOpportunity] = field(
        default_factory=lambda: list[ArbitrageOpportunity]()
    )
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )
    platform_counts: dict[Platform, int] = field(
        default_factory=lambda: dict[Platform, int]()
    )
    total_listings: int = 0
    invalid_count: int = 0
    excluded_count: int = 0
    pairs_evaluated: int = 0
