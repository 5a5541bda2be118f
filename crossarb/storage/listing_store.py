# crossarb/storage/listing_store.py

"""Reads and writes listing snapshots as JSON."""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from crossarb.models.listing import Platform, ProductSearchResult
from crossarb.models.opportunity import ArbitrageOpportunity, MatchResult

logger = logging.getLogger("crossarb.storage")

_OPTIONAL_FIELDS = (
    "seller", "image_url", "upc", "asin", "brand", "category",
    "rating", "review_count", "msrp",
)


def listing_from_dict(data: dict[str, Any]) -> ProductSearchResult:
    """Build a listing from a JSON object.

    Raises ``ValueError`` when a required field is missing or the
    platform is unknown.
    """
    missing = [
        key for key in ("platform", "title", "price") if key not in data
    ]
    if missing:
        msg = f"Listing is missing required field(s): {', '.join(missing)}"
        raise ValueError(msg)

    try:
        platform = Platform(str(data["platform"]).lower())
    except ValueError:
        msg = f"Unknown platform in listing: {data['platform']!r}"
        raise ValueError(msg) from None

    price = float(data["price"])
    kwargs: dict[str, Any] = {
        key: data[key] for key in _OPTIONAL_FIELDS if data.get(key) is not None
    }
    return ProductSearchResult(
        platform_id=str(data.get("platform_id") or f"{platform.value}-{price}"),
        platform=platform,
        title=str(data["title"]),
        price=price,
        shipping=float(data.get("shipping") or 0.0),
        currency=str(data.get("currency") or "USD"),
        in_stock=bool(data.get("in_stock", True)),
        url=str(data.get("url") or ""),
        **kwargs,
    )


def listing_to_dict(listing: ProductSearchResult) -> dict[str, Any]:
    data = asdict(listing)
    data["platform"] = listing.platform.value
    return {k: v for k, v in data.items() if v is not None}


def opportunity_to_dict(opportunity: ArbitrageOpportunity) -> dict[str, Any]:
    data = asdict(opportunity)
    data["buy_platform"] = str(opportunity.buy_platform)
    data["sell_platform"] = str(opportunity.sell_platform)
    return data


def match_to_dict(match: MatchResult) -> dict[str, Any]:
    return {
        "confidence": match.confidence,
        "match_type": str(match.match_type),
        "products": [listing_to_dict(p) for p in match.products],
    }


class ListingStore:
    """Loads listing snapshots from disk and writes them back."""

    @staticmethod
    def load(path: Path) -> list[ProductSearchResult]:
        """Read a JSON array of listing objects from *path*."""
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)

        if not isinstance(raw, list):
            msg = f"{path}: expected a JSON array of listings"
            raise ValueError(msg)

        listings = [listing_from_dict(item) for item in raw]
        logger.info("Loaded %d listings from %s", len(listings), path)
        return listings

    @staticmethod
    def save(path: Path, listings: list[ProductSearchResult]) -> Path:
        """Write *listings* to *path* as a JSON array."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(
                [listing_to_dict(item) for item in listings],
                f,
                ensure_ascii=False,
                indent=2,
            )
        logger.info("Saved %d listings to %s", len(listings), path)
        return path
