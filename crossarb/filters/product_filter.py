# crossarb/filters/product_filter.py

"""Negative-keyword exclusion for listings (e.g. "for parts", "refurbished")."""

import logging

from crossarb.filters.product_matcher import normalise_title
from crossarb.models.listing import ProductSearchResult

logger = logging.getLogger("crossarb.filters")


class ProductFilter:
    """Drop listings a caller never wants to buy or sell."""

    @staticmethod
    def filter_by_keywords(
        listings: list[ProductSearchResult],
        negative_keywords: list[str],
    ) -> tuple[list[ProductSearchResult], int]:
        """Remove listings whose title contains a negative phrase.

        Phrases match on whole words of the normalised title, so
        ``"case"`` excludes "Phone Case" but not "Showcase Lamp".
        Returns the kept listings and the number excluded.
        """
        phrases = {
            f" {p} "
            for p in (normalise_title(kw) for kw in negative_keywords)
            if p
        }
        if not phrases:
            return listings, 0

        kept: list[ProductSearchResult] = []
        for listing in listings:
            padded = f" {normalise_title(listing.title)} "
            if any(phrase in padded for phrase in phrases):
                logger.debug(
                    "Excluded '%s' (%s) by keyword",
                    listing.title,
                    listing.platform,
                )
                continue
            kept.append(listing)

        excluded = len(listings) - len(kept)
        if excluded:
            logger.info("Keyword filter excluded %d listings", excluded)
        return kept, excluded
