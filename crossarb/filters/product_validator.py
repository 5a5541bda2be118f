# crossarb/filters/product_validator.py

"""Listing validation, drop malformed listings before pairing."""

import logging
import math

from crossarb.models.listing import ProductSearchResult

logger = logging.getLogger("crossarb.filters")


class ProductValidator:
    """Validate listings and drop those that cannot be priced."""

    @staticmethod
    def validate(
        listings: list[ProductSearchResult],
    ) -> tuple[list[ProductSearchResult], int]:
        """Drop listings with empty titles, negative prices or bad shipping.

        A zero price is valid: free items still pay shipping and can be
        bought for resale.

        Returns the valid listings and the count of dropped items.
        """
        valid: list[ProductSearchResult] = []
        dropped = 0

        for listing in listings:
            if not listing.title.strip():
                logger.debug(
                    "Dropped listing with empty title "
                    "(platform=%s, id=%s)",
                    listing.platform,
                    listing.platform_id,
                )
                dropped += 1
                continue
            if not math.isfinite(listing.price) or listing.price < 0:
                logger.debug(
                    "Dropped listing with negative or non-finite "
                    "price (title=%s, platform=%s)",
                    listing.title,
                    listing.platform,
                )
                dropped += 1
                continue
            if not math.isfinite(listing.shipping) or listing.shipping < 0:
                logger.debug(
                    "Dropped listing with invalid shipping "
                    "(title=%s, platform=%s)",
                    listing.title,
                    listing.platform,
                )
                dropped += 1
                continue
            valid.append(listing)

        if dropped:
            logger.info(
                "Validation dropped %d invalid listings",
                dropped,
            )

        return valid, dropped
