# crossarb/adapters/json_file_adapter.py

"""Offline adapter serving one platform's listings from a snapshot."""

from pathlib import Path

from crossarb.adapters.base_adapter import BaseAdapter
from crossarb.filters.product_matcher import tokenize
from crossarb.models.listing import (
    Platform,
    ProductSearchResult,
    SearchOptions,
    StockStatus,
)
from crossarb.pricing.fee_model import normalise_category
from crossarb.storage.listing_store import ListingStore


class JsonFileAdapter(BaseAdapter):
    """Answers searches from listings captured earlier.

    A listing matches a query when every query token appears in its
    title. Category, price bounds and ``max_results`` are honoured the
    way a live adapter would.
    """

    def __init__(
        self,
        platform: Platform,
        listings: list[ProductSearchResult] | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__(platform)
        source = listings if listings is not None else []
        if path is not None:
            source = source + ListingStore.load(path)
        self.listings = [
            item for item in source if item.platform == platform
        ]

    def search(self, options: SearchOptions) -> list[ProductSearchResult]:
        query_tokens = tokenize(options.query)
        wanted_category = (
            normalise_category(options.category) if options.category else None
        )

        results: list[ProductSearchResult] = []
        for listing in self.listings:
            if query_tokens and not query_tokens <= tokenize(listing.title):
                continue
            if wanted_category and (
                not listing.category
                or normalise_category(listing.category) != wanted_category
            ):
                continue
            if options.min_price is not None and listing.price < options.min_price:
                continue
            if options.max_price is not None and listing.price > options.max_price:
                continue
            results.append(listing)

        if options.max_results is not None:
            results = results[: options.max_results]

        self.logger.debug(
            "[%s] %d listings match '%s'",
            self.platform,
            len(results),
            options.query,
        )
        return results

    def get_product(self, product_id: str) -> ProductSearchResult | None:
        for listing in self.listings:
            if listing.platform_id == product_id:
                return listing
        return None

    def check_stock(self, product_id: str) -> StockStatus:
        listing = self.get_product(product_id)
        if listing is None:
            return StockStatus(in_stock=False, quantity=0)
        return StockStatus(in_stock=listing.in_stock)
