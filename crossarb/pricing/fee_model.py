# crossarb/pricing/fee_model.py

"""Platform fee, shipping and profit arithmetic."""

import logging
import re
from collections.abc import Mapping

from crossarb.config.fee_tables import (
    CATEGORY_FEE_RATES,
    DEFAULT_FEE_SCHEDULES,
    UNCATEGORIZED,
)
from crossarb.errors import ConfigurationError
from crossarb.models.fees import FeeBreakdown, FeeStructure, ProfitCalculation
from crossarb.models.listing import Platform
from crossarb.pricing.rounding import round_money

logger = logging.getLogger("crossarb.fees")

_CATEGORY_STRIP_RE = re.compile(r"[^a-z_]")


def normalise_category(category: str) -> str:
    """Lowercase a category and drop everything outside ``[a-z_]``."""
    return _CATEGORY_STRIP_RE.sub("", category.lower())


def coerce_platform(platform: Platform | str) -> Platform:
    """Accept a :class:`Platform` or its string value."""
    if isinstance(platform, Platform):
        return platform
    try:
        return Platform(platform)
    except ValueError:
        msg = f"Unknown platform: {platform!r}"
        raise ConfigurationError(msg) from None


class FeeModel:
    """Computes seller fees and net profit from injected fee tables.

    Every lookup goes through :meth:`get_fee_schedule`, which raises
    :class:`ConfigurationError` instead of assuming zero fees for a
    platform missing from the schedule table.
    """

    def __init__(
        self,
        schedules: Mapping[Platform, FeeStructure] = DEFAULT_FEE_SCHEDULES,
        category_rates: Mapping[Platform, Mapping[str, float]] = CATEGORY_FEE_RATES,
    ) -> None:
        self.schedules = schedules
        self.category_rates = category_rates

    def get_fee_schedule(self, platform: Platform | str) -> FeeStructure:
        """Return the fee schedule for *platform*."""
        key = coerce_platform(platform)
        schedule = self.schedules.get(key)
        if schedule is None:
            msg = f"No fee schedule configured for platform '{key}'"
            logger.error(msg)
            raise ConfigurationError(msg)
        return schedule

    def category_rate(
        self, platform: Platform | str, category: str | None = None
    ) -> float:
        """Seller fee percentage for *category* on *platform*.

        Without a category the base schedule rate applies. With one, the
        platform's category table is consulted and falls back to its
        ``uncategorized`` rate; platforms without a table use the base rate.
        """
        schedule = self.get_fee_schedule(platform)
        if not category:
            return schedule.seller_fee_pct

        rates = self.category_rates.get(schedule.platform)
        if rates is None:
            return schedule.seller_fee_pct

        key = normalise_category(category)
        if key in rates:
            return float(rates[key])
        if UNCATEGORIZED in rates:
            logger.debug(
                "Category '%s' unmapped on %s, using uncategorized rate",
                category,
                schedule.platform,
            )
            return float(rates[UNCATEGORIZED])
        return schedule.seller_fee_pct

    def calculate_fees(
        self,
        platform: Platform | str,
        price: float,
        category: str | None = None,
    ) -> FeeBreakdown:
        """Fees charged for selling one item at *price*, rounded to cents."""
        schedule = self.get_fee_schedule(platform)
        rate = self.category_rate(schedule.platform, category)

        seller_fee = price * rate / 100
        payment_fee = price * schedule.payment_processing_pct / 100
        total_fees = seller_fee + schedule.fixed_fee + payment_fee

        return FeeBreakdown(
            seller_fee=round_money(seller_fee),
            fixed_fee=round_money(schedule.fixed_fee),
            payment_fee=round_money(payment_fee),
            total_fees=round_money(total_fees),
            net_after_fees=round_money(price - total_fees),
        )

    def calculate_profit(
        self,
        sell_platform: Platform | str,
        sell_price: float,
        buy_platform: Platform | str,
        buy_price: float,
        buy_shipping: float = 0.0,
        sell_shipping: float | None = None,
    ) -> ProfitCalculation:
        """Net profit of buying on one platform and reselling on another.

        ``sell_shipping=None`` means no quote is known, so the sell
        platform's shipping estimate is used. Any number, including
        ``0.0`` for free shipping, is taken as given.
        """
        fees = self.get_fee_schedule(sell_platform)
        # Unknown buy platforms are a configuration error too
        self.get_fee_schedule(buy_platform)

        platform_fees = sell_price * fees.seller_fee_pct / 100 + fees.fixed_fee
        payment_fees = sell_price * fees.payment_processing_pct / 100
        shipping_cost = (
            fees.shipping_estimate if sell_shipping is None else sell_shipping
        )

        buy_cost = buy_price + buy_shipping
        total_cost = buy_cost + platform_fees + payment_fees + shipping_cost
        gross_profit = sell_price - buy_price - buy_shipping
        net_profit = sell_price - total_cost

        margin_pct = net_profit / sell_price * 100 if sell_price > 0 else 0.0
        if total_cost > 0 and buy_cost > 0:
            roi = net_profit / buy_cost * 100
        else:
            roi = 0.0

        return ProfitCalculation(
            sell_price=sell_price,
            buy_price=buy_price,
            buy_shipping=buy_shipping,
            platform_fees=platform_fees,
            payment_fees=payment_fees,
            shipping_cost=shipping_cost,
            total_cost=total_cost,
            gross_profit=gross_profit,
            net_profit=net_profit,
            margin_pct=margin_pct,
            roi=roi,
        )
