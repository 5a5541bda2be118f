# crossarb/models/listing.py

"""Listing data models exchanged with platform adapters."""

from dataclasses import dataclass
from enum import Enum


class Platform(str, Enum):
    """Every marketplace the scanner can address."""

    AMAZON = "amazon"
    EBAY = "ebay"
    WALMART = "walmart"
    ALIEXPRESS = "aliexpress"
    BESTBUY = "bestbuy"
    TARGET = "target"
    COSTCO = "costco"
    HOMEDEPOT = "homedepot"
    POSHMARK = "poshmark"
    MERCARI = "mercari"
    FACEBOOK = "facebook"
    FAIRE = "faire"
    BSTOCK = "bstock"
    BULQ = "bulq"
    LIQUIDATION = "liquidation"

    def __str__(self) -> str:
        return self.value


@dataclass
class ProductSearchResult:
    """A single listing returned by one platform adapter."""

    platform_id: str
    platform: Platform
    title: str
    price: float
    shipping: float = 0.0
    currency: str = "USD"
    in_stock: bool = True
    seller: str | None = None
    url: str = ""
    image_url: str | None = None
    upc: str | None = None
    asin: str | None = None
    brand: str | None = None
    category: str | None = None
    rating: float | None = None
    review_count: int | None = None
    msrp: float | None = None

    @property
    def total_price(self) -> float:
        """Landed cost of buying this listing."""
        return self.price + self.shipping


@dataclass
class SearchOptions:
    """Query passed to ``adapter.search``."""

    query: str
    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    max_results: int | None = None


@dataclass
class StockStatus:
    """Availability reported by ``adapter.check_stock``."""

    in_stock: bool
    quantity: int | None = None
